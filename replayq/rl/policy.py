"""
Greedy policy derived from a value table.
"""


def compute_policy(q_table):
    """
    For every state with recorded actions, select the action maximizing the value table.

    Ties are broken in favour of the action recorded first for that state, so
    the result is reproducible. The table is not modified.

    Args:
        q_table: QTable to read

    Returns:
        Ordered dict mapping each state to its best action
    """
    return {state: q_table.best_action(state) for state in q_table.states()}


def policy_action(policy, state):
    """Return the policy's action for `state`, or None if no policy is known for it."""
    return policy.get(state)
