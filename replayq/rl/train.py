"""
Experience Replay Training Script

This script trains a tabular Q-learning model from a batch of recorded
transitions (State, Action, Reward, NextState). A prior model can be passed to
continue training: its table is the warm start, the new batch is replayed on
top of it, and a new model is returned.

Note that incremental training is order sensitive. Table entries are created
when their transition is first replayed, so training on batch A and then on
batch B with iter=1 gives the same table as one pass over A followed by B.
With iter > 1 the two differ in general, since each call repeats only its own
batch.

Usage:
    python -m replayq.rl.train --data outputs/experience/gridworld.csv --iter 10 --alpha 0.1 --gamma 0.5
"""

import os
import argparse
from datetime import datetime

from tqdm import tqdm

from replayq.rl.algorithms.replay_agent import ExperienceReplayAgent
from replayq.rl.config import (
    CONTROL, TRAINING, LEARNING_RULES, Control, ensure_output_dirs
)
from replayq.rl.errors import InvalidConfigurationError
from replayq.rl.indexer import index_transitions, new_pairs, merge_universe
from replayq.rl.models.model import Model


def train_replay(data, s=None, a=None, r=None, s_new=None, control=None, model=None,
                 learning_rule=None, verbose=False):
    """
    Learn a state-action value table from recorded transitions via experience replay.

    Args:
        data: DataFrame (or records) with one transition per row
        s: Column with the current state (default 'State')
        a: Column with the action (default 'Action')
        r: Column with the reward (default 'Reward')
        s_new: Column with the next state (default 'NextState')
        control: Control or dict with alpha, gamma, epsilon and iter
        model: Optional prior Model to continue training from (not modified)
        learning_rule: Only 'experience_replay' is supported
        verbose: Whether to print progress

    Returns:
        A new Model with the learned table, recomputed policy and extended reward trace

    Raises:
        InvalidConfigurationError before any computation if a parameter is invalid,
        MalformedInputError if the batch is malformed
    """
    # Use provided values or fall back to config values
    s = s if s is not None else TRAINING["state_col"]
    a = a if a is not None else TRAINING["action_col"]
    r = r if r is not None else TRAINING["reward_col"]
    s_new = s_new if s_new is not None else TRAINING["next_state_col"]
    learning_rule = learning_rule if learning_rule is not None else TRAINING["learning_rule"]

    if learning_rule not in LEARNING_RULES:
        raise InvalidConfigurationError(
            f"Unknown learning rule: {learning_rule}. Supported: {', '.join(LEARNING_RULES)}"
        )
    control = Control.coerce(control)
    if model is not None and not isinstance(model, Model):
        raise InvalidConfigurationError(f"model must be a Model, got {type(model).__name__}")

    batch = index_transitions(data, s, a, r, s_new)

    # Warm start from a copy of the prior model
    prior = model.copy() if model is not None else Model()
    q_table = prior.q_table
    states = merge_universe(prior.states, batch.states)
    actions = merge_universe(prior.actions, batch.actions)
    added = len(new_pairs(q_table, batch))

    if verbose:
        print(f"Training on {len(batch.transitions)} transitions "
              f"({len(states)} states, {len(actions)} actions, {added} new state-action pairs)")
        print(f"Parameters: alpha={control.alpha}, gamma={control.gamma}, iter={control.iter}"
              f"{', warm start from prior model' if model is not None else ''}")

    agent = ExperienceReplayAgent(q_table, alpha=control.alpha, gamma=control.gamma)
    progress = (lambda passes: tqdm(passes, desc="Replay passes")) if verbose else None
    reward_trace, td_error_trace = agent.learn(batch.transitions, iter=control.iter, progress=progress)

    new_model = Model(
        q_table=q_table,
        reward_trace=prior.reward_trace + reward_trace,
        td_error_trace=prior.td_error_trace + td_error_trace,
        control=control,
        states=states,
        actions=actions,
    )

    if verbose:
        print(f"Finished {control.iter} pass(es), {agent.updates_done} updates, "
              f"final mean |TD error| {td_error_trace[-1]:.6f}")

    return new_model


if __name__ == "__main__":
    import pandas as pd

    from replayq.plotting_utils import plot_reward_trace

    parser = argparse.ArgumentParser(description="Train a tabular Q-learning model with experience replay")

    # Data parameters
    parser.add_argument("--data", type=str, required=True, help="CSV file with one transition per row")
    parser.add_argument("--state_col", type=str, default=TRAINING["state_col"], help="Column with the current state")
    parser.add_argument("--action_col", type=str, default=TRAINING["action_col"], help="Column with the action")
    parser.add_argument("--reward_col", type=str, default=TRAINING["reward_col"], help="Column with the reward")
    parser.add_argument("--next_state_col", type=str, default=TRAINING["next_state_col"], help="Column with the next state")

    # Learning parameters
    parser.add_argument("--alpha", type=float, default=CONTROL["alpha"], help="Learning rate")
    parser.add_argument("--gamma", type=float, default=CONTROL["gamma"], help="Discount factor")
    parser.add_argument("--epsilon", type=float, default=CONTROL["epsilon"], help="Exploration rate (sampling only)")
    parser.add_argument("--iter", type=int, default=CONTROL["iter"], help="Number of replay passes")

    # Output parameters
    parser.add_argument("--plot", action="store_true", help="Save a plot of the reward trace")

    args = parser.parse_args()

    paths = ensure_output_dirs()

    # Set up simple logging to file
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = f"{paths['logs']}/training_{timestamp}.log"

    def log_print(message):
        """Print to both console and log file"""
        print(message)
        with open(log_file, 'a') as f:
            f.write(f"{datetime.now().strftime('%Y-%m-%d %H:%M:%S')} - {message}\n")

    log_print(f"Training on {args.data}")
    log_print(f"Parameters: alpha={args.alpha}, gamma={args.gamma}, iter={args.iter}")
    log_print(f"Log file: {log_file}")

    data = pd.read_csv(args.data)
    control = Control(alpha=args.alpha, gamma=args.gamma, epsilon=args.epsilon, iter=args.iter)
    trained = train_replay(data, args.state_col, args.action_col, args.reward_col, args.next_state_col,
                           control=control, verbose=True)

    log_print("")
    log_print(trained.summary())

    if args.plot:
        plot_path = os.path.join(paths["results"], f"reward_trace_{timestamp}.png")
        plot_reward_trace(trained, path=plot_path)
        log_print(f"Reward trace plot saved: {plot_path}")

    log_print("Training completed!")
