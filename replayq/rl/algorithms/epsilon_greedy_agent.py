"""
This module contains the epsilon-greedy agent: with probability epsilon it explores
with a uniformly random action, otherwise it follows the greedy policy.
"""

import numpy as np

from replayq.rl.config import CONTROL, SAMPLING, check_unit_interval
from replayq.rl.algorithms.greedy_agent import GreedyAgent
from replayq.rl.algorithms.random_agent import RandomAgent


class EpsilonGreedyAgent:

    def __init__(self, actions, policy=None, epsilon=None, agent_seed=None):
        """
        Initialize the agent.

        Args:
            actions: Action universe
            policy: Dict state -> action (e.g. Model.policy)
            epsilon: Exploration rate in [0, 1]
            agent_seed: Seed from which the branch and choice generators are derived
        """
        self.epsilon = epsilon if epsilon is not None else CONTROL["epsilon"]
        check_unit_interval("epsilon", self.epsilon)
        self.agent_seed = agent_seed if agent_seed is not None else SAMPLING["agent_seed"]

        self.random_agent = RandomAgent(actions, agent_seed=self.agent_seed)
        self.greedy_agent = GreedyAgent(actions, policy, agent_seed=self.agent_seed)
        self.actions = self.random_agent.actions
        self.policy = self.greedy_agent.policy

        self.reset()

    def act(self, state):
        """
        Choose an action with the epsilon-greedy rule.

        The exploration branch is drawn from a dedicated generator; the random
        action itself comes from the random agent's own generator.
        """
        if self.branch_rng.random() < self.epsilon:
            return self.random_agent.act(state)
        return self.greedy_agent.act(state)

    def reset(self, seed=None):
        """Reset all random generators, deriving them from `seed` (or the stored agent seed)."""
        if seed is not None:
            self.agent_seed = seed
        # Derive independent seeds for the branch draw, the random choice and the greedy fallback
        branch_seed, choice_seed, fallback_seed = \
            np.random.default_rng(seed=self.agent_seed).integers(0, 2**32 - 1, size=3)
        self.branch_rng = np.random.default_rng(seed=int(branch_seed))
        self.random_agent.reset(seed=int(choice_seed))
        self.greedy_agent.reset(seed=int(fallback_seed))
