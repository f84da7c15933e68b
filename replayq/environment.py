"""Example environment: a deterministic 2x2 gridworld.

    |-----------|
    | s1  | s4  |
    | s2    s3  |
    |-----------|

The agent moves with up/down/left/right. A wall separates s1 from s4, so the
goal s4 can only be entered from s3. Entering s4 yields +10; every other step
(including moves into the wall or staying in the goal) yields -1.
"""

GRIDWORLD_STATES = ["s1", "s2", "s3", "s4"]
GRIDWORLD_ACTIONS = ["up", "down", "left", "right"]
GRIDWORLD_GOAL = "s4"

GOAL_REWARD = 10.0
STEP_REWARD = -1.0

# (state, action) -> next state; moves not listed bump into a wall
MOVES = {
    ("s1", "down"): "s2",
    ("s2", "up"): "s1",
    ("s2", "right"): "s3",
    ("s3", "left"): "s2",
    ("s3", "up"): "s4",
}


def gridworld_environment(state, action):
    """One step transition of the gridworld.

    Args:
        state: One of GRIDWORLD_STATES
        action: One of GRIDWORLD_ACTIONS

    Returns:
        Tuple (next_state, reward)
    """
    if state not in GRIDWORLD_STATES:
        raise ValueError(f"Unknown gridworld state: {state!r}")
    if action not in GRIDWORLD_ACTIONS:
        raise ValueError(f"Unknown gridworld action: {action!r}")

    next_state = MOVES.get((state, action), state)
    if next_state == GRIDWORLD_GOAL and state != GRIDWORLD_GOAL:
        reward = GOAL_REWARD
    else:
        reward = STEP_REWARD
    return next_state, reward
