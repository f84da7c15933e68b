"""
This module contains the tabular Q-learning agent trained with experience replay.
Recorded transitions are replayed in their given order for a number of passes;
every update is written to the table immediately, so later transitions of the
same pass already bootstrap from the improved values of earlier ones.
"""

import numpy as np

from replayq.rl.config import CONTROL, check_unit_interval, check_positive_int
from replayq.rl.models.q_table import QTable


class ExperienceReplayAgent:

    def __init__(self, q_table=None, alpha=None, gamma=None):
        """
        Initialize the agent with parameters from config.

        Args:
            q_table: Value table to update in place (a fresh empty table if None).
                Pass a copy of a prior model's table to warm start.
            alpha: Learning rate in [0, 1]
            gamma: Discount factor in [0, 1]
        """
        # Use provided values or fall back to config values
        self.alpha = alpha if alpha is not None else CONTROL["alpha"]
        self.gamma = gamma if gamma is not None else CONTROL["gamma"]
        check_unit_interval("alpha", self.alpha)
        check_unit_interval("gamma", self.gamma)

        self.q_table = q_table if q_table is not None else QTable()
        self.updates_done = 0

    def update(self, state, action, reward, next_state):
        """
        Apply the Q-learning update for one transition.

        A pair without an entry starts from 0 and gets its entry here, so it
        only counts towards the bootstrap of other transitions once it has been
        replayed. The bootstrap term is the maximum over the actions recorded
        for the next state, or 0 if it has none.

        Returns:
            The temporal difference error before the update
        """
        current = self.q_table[state, action]
        target = reward + self.gamma * self.q_table.max_value(next_state)
        td_error = target - current

        # Convex form keeps alpha=0 and alpha=1 exact
        self.q_table[state, action] = (1.0 - self.alpha) * current + self.alpha * target
        self.updates_done += 1

        return td_error

    def replay(self, transitions):
        """
        Run one sequential pass over the transitions in their given order.

        Returns:
            Tuple of (total reward of the pass, mean absolute TD error)
        """
        total_reward = 0.0
        abs_td_errors = []
        for transition in transitions:
            td_error = self.update(transition.state, transition.action,
                                   transition.reward, transition.next_state)
            total_reward += transition.reward
            abs_td_errors.append(abs(td_error))

        mean_abs_td_error = float(np.mean(abs_td_errors)) if abs_td_errors else 0.0
        return total_reward, mean_abs_td_error

    def learn(self, transitions, iter=None, progress=None):
        """
        Replay the transitions for `iter` passes.

        Args:
            transitions: Sequence of Transition tuples
            iter: Number of passes (>= 1)
            progress: Optional callable wrapping the range of passes (e.g. tqdm)

        Returns:
            Tuple of (reward trace, TD error trace), one entry per pass
        """
        iter = iter if iter is not None else CONTROL["iter"]
        check_positive_int("iter", iter)

        passes = range(iter)
        if progress is not None:
            passes = progress(passes)

        reward_trace = []
        td_error_trace = []
        for _ in passes:
            pass_reward, mean_abs_td_error = self.replay(transitions)
            reward_trace.append(pass_reward)
            td_error_trace.append(mean_abs_td_error)

        return reward_trace, td_error_trace
