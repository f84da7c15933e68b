"""
Configuration for the experience replay pipeline.
"""

import os
import numbers
from dataclasses import dataclass, fields

from replayq.rl.errors import InvalidConfigurationError

# Directory structure
EXPERIENCE_PATH = "experience"              # Directory for sampled transition tuples
RESULTS_PATH = "results"                    # Directory for plots and evaluation results
LOGS_PATH = "logs"                          # Directory for training logs

# Learning parameters
CONTROL = {
    "alpha": 0.1,                           # Learning rate
    "gamma": 0.1,                           # Discount factor
    "epsilon": 0.1,                         # Exploration rate (only used when sampling)
    "iter": 1,                              # Number of passes over the batch
}

# Training parameters
TRAINING = {
    "state_col": "State",                   # Column holding the current state
    "action_col": "Action",                 # Column holding the action taken
    "reward_col": "Reward",                 # Column holding the reward received
    "next_state_col": "NextState",          # Column holding the resulting state
    "learning_rule": "experience_replay",   # Only experience replay is supported
}

# Sampling parameters
SAMPLING = {
    "sampling_seed": 18740254,              # Seed for drawing start states
    "agent_seed": 817686876,                # Seed for the action selector's internal randomness
    "action_selection": "random",           # Default action selection strategy
    "n": 1000,                              # Default number of tuples to sample
}

# Evaluation parameters
EVALUATION = {
    "max_steps": 20,                        # Maximum steps per greedy rollout
    "goal_states": ["s4"],                  # Goal states of the bundled gridworld
}

LEARNING_RULES = ("experience_replay",)


@dataclass(frozen=True)
class Control:
    """
    Range-checked learning parameters.

    Args:
        alpha: Learning rate in [0, 1]
        gamma: Discount factor in [0, 1]
        epsilon: Exploration rate in [0, 1], only used by the sampler
        iter: Number of passes over the batch, integer >= 1
    """
    alpha: float = CONTROL["alpha"]
    gamma: float = CONTROL["gamma"]
    epsilon: float = CONTROL["epsilon"]
    iter: int = CONTROL["iter"]

    def __post_init__(self):
        for name in ("alpha", "gamma", "epsilon"):
            check_unit_interval(name, getattr(self, name))
        check_positive_int("iter", self.iter)

    @classmethod
    def from_dict(cls, options):
        """Build a Control from a mapping, rejecting unrecognised options."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(options) - known)
        if unknown:
            raise InvalidConfigurationError(
                f"Unrecognised control option(s): {', '.join(map(str, unknown))}. "
                f"Recognised options: {', '.join(sorted(known))}"
            )
        return cls(**options)

    @classmethod
    def coerce(cls, control):
        """Accept None, a mapping, or a Control instance."""
        if control is None:
            return cls()
        if isinstance(control, cls):
            return control
        if isinstance(control, dict):
            return cls.from_dict(control)
        raise InvalidConfigurationError(
            f"control must be a Control or a dict, got {type(control).__name__}"
        )

    def to_dict(self):
        return {f.name: getattr(self, f.name) for f in fields(self)}


def check_unit_interval(name, value):
    """Raise if value is not a real number in [0, 1]."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidConfigurationError(f"{name} must be a number in [0, 1], got {value!r}")
    if not 0.0 <= value <= 1.0:
        raise InvalidConfigurationError(f"{name} must be in [0, 1], got {value}")


def check_positive_int(name, value):
    """Raise if value is not an integer >= 1."""
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise InvalidConfigurationError(f"{name} must be a positive integer, got {value!r}")
    if value < 1:
        raise InvalidConfigurationError(f"{name} must be >= 1, got {value}")


def get_output_paths(base="outputs"):
    """Generate output paths for the command line scripts."""
    return {
        "experience": os.path.join(base, EXPERIENCE_PATH),
        "results": os.path.join(base, RESULTS_PATH),
        "logs": os.path.join(base, LOGS_PATH),
    }

def ensure_output_dirs(base="outputs"):
    """Ensure all output directories exist."""
    paths = get_output_paths(base)
    for path in paths.values():
        os.makedirs(path, exist_ok=True)

    return paths
