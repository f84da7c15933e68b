"""Tests for the bundled gridworld environment."""

from __future__ import annotations

import pytest

from replayq.environment import GOAL_REWARD, STEP_REWARD, gridworld_environment


@pytest.mark.parametrize(
    "state, action, expected",
    [
        ("s1", "down", ("s2", STEP_REWARD)),
        ("s2", "right", ("s3", STEP_REWARD)),
        ("s3", "up", ("s4", GOAL_REWARD)),
        ("s3", "left", ("s2", STEP_REWARD)),
        ("s1", "right", ("s1", STEP_REWARD)),
        ("s4", "down", ("s4", STEP_REWARD)),
    ],
)
def test_transitions(state, action, expected):
    assert gridworld_environment(state, action) == expected


@pytest.mark.parametrize("state, action", [("s5", "up"), ("s1", "jump")])
def test_unknown_inputs(state, action):
    with pytest.raises(ValueError):
        gridworld_environment(state, action)
