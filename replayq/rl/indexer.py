"""
This module turns a batch of recorded transitions into the ordered tuples consumed
by the experience replay agent, discovers the states and actions they mention,
and lists the state-action pairs a value table has not recorded yet.
"""

import numbers
from collections import namedtuple

import numpy as np
import pandas as pd

from replayq.rl.errors import MalformedInputError

# Named tuple for a single recorded transition
Transition = namedtuple('Transition', ('state', 'action', 'reward', 'next_state'))

# Transitions in the caller's row order, plus the universes they mention
TransitionBatch = namedtuple('TransitionBatch', ('transitions', 'states', 'actions'))


def _as_frame(data):
    """Accept a DataFrame or anything pandas can frame (list of dicts, dict of lists)."""
    if isinstance(data, pd.DataFrame):
        return data
    try:
        return pd.DataFrame(data)
    except (TypeError, ValueError) as e:
        raise MalformedInputError(f"Cannot read transition batch: {e}") from e


def _bad_rows(mask):
    """Format the first few offending row positions for an error message."""
    rows = [int(i) for i in mask.to_numpy().nonzero()[0]]
    shown = ", ".join(str(i) for i in rows[:5])
    return f"{shown}{', ...' if len(rows) > 5 else ''} ({len(rows)} row(s))"


def index_transitions(data, s, a, r, s_new):
    """
    Validate a batch of transitions and collect its states and actions.

    Args:
        data: DataFrame (or records) with one transition per row
        s: Name of the column holding the current state
        a: Name of the column holding the action
        r: Name of the column holding the reward
        s_new: Name of the column holding the next state

    Returns:
        TransitionBatch with the transitions in row order, the states
        (from both state columns) and the actions in first-seen order

    Raises:
        MalformedInputError if a column is missing, a state/action/next state
        is null, a reward is missing or non-numeric, or the batch is empty.
        The whole batch is rejected; nothing is processed partially.
    """
    frame = _as_frame(data)

    columns = {"state": s, "action": a, "reward": r, "next_state": s_new}
    missing = [f"{field} ('{col}')" for field, col in columns.items() if col not in frame.columns]
    if missing:
        raise MalformedInputError(
            f"Missing required column(s): {', '.join(missing)}. "
            f"Available columns: {', '.join(map(str, frame.columns))}"
        )

    if len(frame) == 0:
        raise MalformedInputError("Transition batch is empty")

    for field in ("state", "action", "next_state"):
        nulls = frame[columns[field]].isna()
        if nulls.any():
            raise MalformedInputError(f"Null {field} in column '{columns[field]}' at row(s) {_bad_rows(nulls)}")

    rewards = frame[r]
    if pd.api.types.is_bool_dtype(rewards) or not pd.api.types.is_numeric_dtype(rewards):
        # Only real numbers count as rewards, not numeric strings or booleans
        numeric = rewards.map(lambda v: isinstance(v, numbers.Real) and not isinstance(v, (bool, np.bool_)))
        rewards = rewards.where(numeric.astype(bool))
    rewards = pd.to_numeric(rewards, errors="coerce")
    invalid = rewards.isna()
    if invalid.any():
        raise MalformedInputError(f"Missing or non-numeric reward in column '{r}' at row(s) {_bad_rows(invalid)}")

    states = frame[s].tolist()
    actions = frame[a].tolist()
    next_states = frame[s_new].tolist()
    rewards = rewards.astype(float).tolist()

    transitions = [Transition(*row) for row in zip(states, actions, rewards, next_states)]

    # dicts keep first-seen order
    state_universe = {}
    for state, next_state in zip(states, next_states):
        state_universe.setdefault(state, None)
        state_universe.setdefault(next_state, None)
    action_universe = dict.fromkeys(actions)

    return TransitionBatch(transitions, list(state_universe), list(action_universe))


def new_pairs(q_table, batch):
    """
    List the (state, action) pairs of the batch that the table has no entry for yet.

    The table is not modified. The replay agent creates each entry, starting
    from 0, when its transition is first replayed.

    Returns:
        New pairs in first-seen order
    """
    pairs = dict.fromkeys((t.state, t.action) for t in batch.transitions)
    return [pair for pair in pairs if pair not in q_table]


def merge_universe(prior, new):
    """Union of two label sequences, keeping the first-seen order."""
    return list(dict.fromkeys(list(prior) + list(new)))
