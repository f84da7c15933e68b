"""
The aggregate result of a training call: value table, derived policy,
reward trace and the parameters used to learn them.
"""

import numpy as np

from replayq.rl.config import Control
from replayq.rl.models.q_table import QTable
from replayq.rl.policy import compute_policy, policy_action


class Model:
    """
    Exclusively owned training result.

    Attributes:
        q_table: QTable with the learned state-action values
        policy: Cached dict state -> best action, recomputed by compute_policy()
        reward_trace: Total reward per replay pass, across all training calls
        td_error_trace: Mean absolute TD error per replay pass
        control: Control used by the most recent training call
        states: All states seen in training data (current and next states);
            defaults to the states of the table, which omits next states without actions
        actions: All actions seen in training data
    """

    def __init__(self, q_table=None, reward_trace=None, td_error_trace=None,
                 control=None, states=None, actions=None):
        self.q_table = q_table if q_table is not None else QTable()
        self.reward_trace = list(reward_trace) if reward_trace is not None else []
        self.td_error_trace = list(td_error_trace) if td_error_trace is not None else []
        self.control = Control.coerce(control)
        self.states = list(states) if states is not None else self.q_table.states()
        self.actions = list(actions) if actions is not None else \
            list(dict.fromkeys(action for _, action, _ in self.q_table.items()))
        self.policy = {}
        self.compute_policy()

    def compute_policy(self):
        """Recompute and cache the greedy policy from the value table."""
        self.policy = compute_policy(self.q_table)
        return self.policy

    def policy_action(self, state):
        """Return the policy's action for `state`, or None if no policy is known for it."""
        return policy_action(self.policy, state)

    @property
    def reward(self):
        """Total reward of the most recent replay pass (0.0 before any training)."""
        return self.reward_trace[-1] if self.reward_trace else 0.0

    def copy(self):
        return Model(
            q_table=self.q_table.copy(),
            reward_trace=self.reward_trace,
            td_error_trace=self.td_error_trace,
            control=self.control,
            states=self.states,
            actions=self.actions,
        )

    def to_frame(self):
        """State-action values as a states x actions DataFrame (NaN where no entry exists)."""
        return self.q_table.to_frame(actions=self.actions)

    def summary(self):
        """Return a multi-line text summary of the model."""
        lines = ["State-Action function Q"]
        lines.append(self.to_frame().to_string(na_rep="."))
        lines.append("")
        lines.append("Policy")
        for state, action in self.policy.items():
            lines.append(f"  {state}: {action}")
        lines.append("")
        lines.append(f"Reward (last pass): {self.reward:.4f}")
        if self.reward_trace:
            lines.append(f"Passes: {len(self.reward_trace)}")
            lines.append(f"Reward trace - Mean: {np.mean(self.reward_trace):.4f}, "
                         f"Min: {np.min(self.reward_trace):.4f}, Max: {np.max(self.reward_trace):.4f}")
        if self.td_error_trace:
            lines.append(f"Final mean |TD error|: {self.td_error_trace[-1]:.6f}")
        lines.append(f"Parameters: alpha={self.control.alpha}, gamma={self.control.gamma}, "
                     f"epsilon={self.control.epsilon}, iter={self.control.iter}")
        return "\n".join(lines)

    def __str__(self):
        return self.summary()

    def __repr__(self):
        return (f"Model(states={len(self.states)}, actions={len(self.actions)}, "
                f"entries={len(self.q_table)}, passes={len(self.reward_trace)})")
