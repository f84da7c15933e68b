"""Shared fixtures for the replayq test suite."""

from __future__ import annotations

import matplotlib

matplotlib.use("Agg")

import pandas as pd
import pytest

from replayq.environment import GRIDWORLD_ACTIONS, GRIDWORLD_STATES, gridworld_environment
from replayq.rl.sample import sample_experience


@pytest.fixture
def small_batch() -> pd.DataFrame:
    """A short corridor s1 -> s2 -> s3 -> goal."""
    return pd.DataFrame(
        [
            ("s1", "right", -1.0, "s2"),
            ("s2", "right", -1.0, "s3"),
            ("s3", "up", 10.0, "goal"),
        ],
        columns=["State", "Action", "Reward", "NextState"],
    )


@pytest.fixture(scope="session")
def gridworld_experience() -> pd.DataFrame:
    """1000 uniformly random gridworld transitions, fixed seed."""
    return sample_experience(1000, gridworld_environment, GRIDWORLD_STATES, GRIDWORLD_ACTIONS, seed=42)
