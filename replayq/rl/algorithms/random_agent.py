"""
This module contains a simple random agent that selects an action uniformly
at random from the action universe, ignoring the value table.
"""

import numpy as np

from replayq.rl.config import SAMPLING
from replayq.rl.errors import InvalidConfigurationError


class RandomAgent:

    def __init__(self, actions, agent_seed=None):
        self.actions = list(actions)
        if not self.actions:
            raise InvalidConfigurationError("The action universe must not be empty")

        # Set random seed
        self.agent_seed = agent_seed if agent_seed is not None else SAMPLING["agent_seed"]
        self.rng = np.random.default_rng(seed=self.agent_seed)

    def act(self, state):
        """
        Choose an action uniformly at random.

        Args:
            state: Current state, used only for compatibility with the other agents

        Returns:
            The selected action
        """
        return self.actions[self.rng.integers(0, len(self.actions))]

    def reset(self, seed=None):
        """Reset the agent's random number generator with a new seed."""
        if seed is not None:
            self.agent_seed = seed
        self.rng = np.random.default_rng(seed=self.agent_seed)
