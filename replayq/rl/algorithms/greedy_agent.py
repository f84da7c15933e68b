"""
This module contains a greedy agent that follows the policy derived from a value table.
States without a known policy fall back to a uniformly random action from the
action universe.
"""

import numpy as np

from replayq.rl.config import SAMPLING
from replayq.rl.errors import InvalidConfigurationError
from replayq.rl.policy import policy_action


class GreedyAgent:

    def __init__(self, actions, policy=None, agent_seed=None):
        """
        Args:
            actions: Action universe used for the random fallback
            policy: Dict state -> action (e.g. Model.policy); empty if None
            agent_seed: Seed for the fallback choice
        """
        self.actions = list(actions)
        if not self.actions:
            raise InvalidConfigurationError("The action universe must not be empty")
        self.policy = policy if policy is not None else {}

        # Set random seed
        self.agent_seed = agent_seed if agent_seed is not None else SAMPLING["agent_seed"]
        self.rng = np.random.default_rng(seed=self.agent_seed)

    def act(self, state):
        """
        Choose the policy's action for the state.

        Args:
            state: Current state

        Returns:
            The policy action, or a uniformly random action if the state has no known policy
        """
        action = policy_action(self.policy, state)
        if action is None:
            action = self.actions[self.rng.integers(0, len(self.actions))]
        return action

    def reset(self, seed=None):
        """Reset the agent's random number generator with a new seed."""
        if seed is not None:
            self.agent_seed = seed
        self.rng = np.random.default_rng(seed=self.agent_seed)
