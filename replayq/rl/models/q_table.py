"""
Sparse state-action value table used by the experience replay agent.
"""
import numpy as np
import pandas as pd


class QTable:
    """
    Sparse mapping from (state, action) pairs to value estimates.

    Values are stored as nested insertion-ordered dicts ``state -> {action: value}``.
    Pairs that were never observed have no entry and read as 0.0.
    The insertion order of the actions of a state is the tie-break order
    used when selecting the best action.
    """

    def __init__(self, values=None):
        self._values = {}
        if values is not None:
            for state, action_values in values.items():
                for action, value in action_values.items():
                    self.ensure(state, action, value)

    def ensure(self, state, action, value=0.0):
        """
        Make sure the pair has an entry, creating it with `value` if missing.

        Returns:
            True if a new entry was created, False if it already existed
        """
        action_values = self._values.setdefault(state, {})
        if action in action_values:
            return False
        action_values[action] = float(value)
        return True

    def __getitem__(self, key):
        state, action = key
        return self._values.get(state, {}).get(action, 0.0)

    def __setitem__(self, key, value):
        state, action = key
        self._values.setdefault(state, {})[action] = float(value)

    def __contains__(self, key):
        state, action = key
        return action in self._values.get(state, {})

    def __len__(self):
        """Number of (state, action) entries."""
        return sum(len(action_values) for action_values in self._values.values())

    def __eq__(self, other):
        if not isinstance(other, QTable):
            return NotImplemented
        return self._values == other._values

    def __repr__(self):
        return f"QTable(states={len(self._values)}, entries={len(self)})"

    def states(self):
        """States with at least one recorded action, in insertion order."""
        return [state for state, action_values in self._values.items() if action_values]

    def actions_for(self, state):
        """Actions recorded for `state`, in insertion order."""
        return list(self._values.get(state, {}))

    def values_for(self, state):
        """Copy of the ``{action: value}`` dict recorded for `state`."""
        return dict(self._values.get(state, {}))

    def max_value(self, state):
        """Maximum value over the recorded actions of `state`, 0.0 if there are none."""
        action_values = self._values.get(state)
        if not action_values:
            return 0.0
        return max(action_values.values())

    def best_action(self, state):
        """
        Return the action with maximum value for `state`.

        Ties are resolved in favour of the action inserted first for that state.
        Returns None if the state has no recorded actions.
        """
        action_values = self._values.get(state)
        if not action_values:
            return None
        actions = list(action_values)
        # np.argmax returns the first occurrence of the maximum
        return actions[int(np.argmax(list(action_values.values())))]

    def items(self):
        """Iterate over ``(state, action, value)`` triples in insertion order."""
        for state, action_values in self._values.items():
            for action, value in action_values.items():
                yield state, action, value

    def copy(self):
        table = QTable()
        table._values = {state: dict(action_values) for state, action_values in self._values.items()}
        return table

    def to_dict(self):
        return {state: dict(action_values) for state, action_values in self._values.items()}

    def to_frame(self, states=None, actions=None):
        """
        Return the table as a states x actions DataFrame.

        Args:
            states: Optional row order, defaults to the states with recorded actions
            actions: Optional column order, defaults to actions in first-seen order
        Returns:
            DataFrame with NaN where a pair has no entry
        """
        if states is None:
            states = self.states()
        if actions is None:
            actions = list(dict.fromkeys(action for _, action, _ in self.items()))
        data = [
            [self._values[state][action] if (state, action) in self else np.nan for action in actions]
            for state in states
        ]
        return pd.DataFrame(data, index=pd.Index(states, name="state"),
                            columns=pd.Index(actions, name="action"), dtype=float)
