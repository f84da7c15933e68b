"""
Tabular Q-learning with experience replay.

Learn a state-action value table from recorded (State, Action, Reward, NextState)
tuples, derive a greedy policy, and sample new experience from an environment
function to improve it iteratively.
"""

from replayq.rl.config import Control
from replayq.rl.errors import (
    ReplayQError, MalformedInputError, InvalidConfigurationError, EnvironmentContractError
)
from replayq.rl.models.model import Model
from replayq.rl.models.q_table import QTable
from replayq.rl.train import train_replay
from replayq.rl.sample import sample_experience, create_agent
from replayq.rl.evaluate import evaluate_policy
from replayq.environment import gridworld_environment, GRIDWORLD_STATES, GRIDWORLD_ACTIONS

__version__ = "0.1.0"

__all__ = [
    "Control",
    "Model",
    "QTable",
    "train_replay",
    "sample_experience",
    "create_agent",
    "evaluate_policy",
    "gridworld_environment",
    "GRIDWORLD_STATES",
    "GRIDWORLD_ACTIONS",
    "ReplayQError",
    "MalformedInputError",
    "InvalidConfigurationError",
    "EnvironmentContractError",
]
