"""
RL algorithm implementations.
"""

from .replay_agent import ExperienceReplayAgent
from .random_agent import RandomAgent
from .greedy_agent import GreedyAgent
from .epsilon_greedy_agent import EpsilonGreedyAgent

__all__ = ['ExperienceReplayAgent', 'RandomAgent', 'GreedyAgent', 'EpsilonGreedyAgent']
