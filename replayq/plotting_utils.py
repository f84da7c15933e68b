import matplotlib.pyplot as plt
import numpy as np


def get_fig_dim(width, fraction=1, aspect_ratio=None):
    """Set figure dimensions to avoid scaling in LaTeX.

    Parameters
    ----------
    width: float
            Document textwidth or columnwidth in pts
    fraction: float, optional
            Fraction of the width which you wish the figure to occupy
    aspect_ratio: float, optional
            Aspect ratio of the figure

    Returns
    -------
    fig_dim: tuple
            Dimensions of figure in inches
    """
    # Width of figure (in pts)
    fig_width_pt = width * fraction

    # Convert from pt to inches
    inches_per_pt = 1 / 72.27

    if aspect_ratio is None:
        # If not specified, set the aspect ratio equal to the Golden ratio (https://en.wikipedia.org/wiki/Golden_ratio)
        aspect_ratio = (1 + 5**.5) / 2

    fig_width_in = fig_width_pt * inches_per_pt
    fig_height_in = fig_width_in / aspect_ratio

    return (fig_width_in, fig_height_in)


def plot_reward_trace(model, path=None, ax=None, show_td_error=False, width=469.75):
    """Plot the learning curve of a model: total reward per replay pass.

    Parameters
    ----------
    model: Model
            Trained model whose reward_trace is plotted
    path: str, optional
            If given, the figure is saved there and closed
    ax: matplotlib Axes, optional
            Axes to draw on; a new figure is created if None
    show_td_error: boolean, optional
            Also plot the mean absolute TD error per pass on a secondary axis
    width: float, optional
            Document width in pts used to size a new figure

    Returns
    -------
    ax: matplotlib Axes
            The axes holding the reward curve
    """
    if ax is None:
        _, ax = plt.subplots(figsize=get_fig_dim(width))
    fig = ax.figure

    passes = np.arange(1, len(model.reward_trace) + 1)
    ax.plot(passes, model.reward_trace, color='tab:blue', marker='o', markersize=3, label='Reward')
    ax.set_xlabel('Pass')
    ax.set_ylabel('Total reward')

    if show_td_error and model.td_error_trace:
        ax_td = ax.twinx()
        ax_td.plot(passes, model.td_error_trace, color='tab:red', linestyle='--', label='Mean |TD error|')
        ax_td.set_ylabel('Mean |TD error|')

    if path is not None:
        fig.tight_layout()
        fig.savefig(path, dpi=150, bbox_inches='tight')
        plt.close(fig)

    return ax
