"""Tests for training, warm starts and model merging."""

from __future__ import annotations

import pandas as pd
import pytest

from replayq.rl.config import Control
from replayq.rl.errors import InvalidConfigurationError, MalformedInputError
from replayq.rl.models.model import Model
from replayq.rl.train import train_replay

COLUMNS = ["State", "Action", "Reward", "NextState"]


def _frame(rows):
    return pd.DataFrame(rows, columns=COLUMNS)


class TestTrainReplay:

    def test_returns_model_with_table_policy_and_trace(self, small_batch):
        model = train_replay(small_batch, control={"alpha": 1.0, "gamma": 1.0, "iter": 3})

        assert isinstance(model, Model)
        # values back-propagate one state per pass
        assert model.q_table["s3", "up"] == 10.0
        assert model.q_table["s2", "right"] == 9.0
        assert model.q_table["s1", "right"] == 8.0
        assert model.policy == {"s1": "right", "s2": "right", "s3": "up"}
        assert model.reward_trace == [8.0, 8.0, 8.0]
        assert model.states == ["s1", "s2", "s3", "goal"]
        assert model.actions == ["right", "up"]
        assert model.control == Control(alpha=1.0, gamma=1.0, iter=3)

    @pytest.mark.parametrize("iter", [1, 4, 10])
    def test_reward_trace_has_one_entry_per_pass(self, small_batch, iter):
        model = train_replay(small_batch, control=Control(iter=iter))
        assert len(model.reward_trace) == iter
        assert len(model.td_error_trace) == iter

    def test_table_only_holds_observed_pairs(self, gridworld_experience):
        model = train_replay(gridworld_experience, control={"iter": 2})
        observed = set(zip(gridworld_experience["State"], gridworld_experience["Action"]))
        assert {(state, action) for state, action, _ in model.q_table.items()} == observed

    def test_custom_column_names(self):
        data = pd.DataFrame({"s": ["a", "b"], "act": ["x", "y"], "rew": [1, 2], "s2": ["b", "a"]})
        model = train_replay(data, s="s", a="act", r="rew", s_new="s2", control={"alpha": 1.0, "gamma": 0.0})
        assert model.q_table["a", "x"] == 1.0
        assert model.q_table["b", "y"] == 2.0

    def test_tie_break_follows_row_order(self):
        rows = [("s1", "up", 5.0, "end"), ("s1", "down", 5.0, "end")]
        control = {"alpha": 1.0, "gamma": 0.0}

        model = train_replay(_frame(rows), control=control)
        assert all(model.policy_action("s1") == "up" for _ in range(5))

        model = train_replay(_frame(list(reversed(rows))), control=control)
        assert model.policy_action("s1") == "down"

    def test_unknown_state_has_no_policy(self, small_batch):
        model = train_replay(small_batch)
        assert model.policy_action("goal") is None
        assert model.policy_action("nowhere") is None

    def test_invalid_configuration_is_reported_before_input_checks(self):
        with pytest.raises(InvalidConfigurationError):
            train_replay(pd.DataFrame({"x": [1]}), control={"alpha": 3})

    def test_unknown_control_option(self, small_batch):
        with pytest.raises(InvalidConfigurationError, match="beta"):
            train_replay(small_batch, control={"beta": 0.1})

    def test_unknown_learning_rule(self, small_batch):
        with pytest.raises(InvalidConfigurationError, match="learning rule"):
            train_replay(small_batch, learning_rule="sarsa")

    def test_malformed_batch(self, small_batch):
        with pytest.raises(MalformedInputError):
            train_replay(small_batch.rename(columns={"NextState": "Next"}))

    def test_prior_model_must_be_a_model(self, small_batch):
        with pytest.raises(InvalidConfigurationError):
            train_replay(small_batch, model={"s1": {"right": 1.0}})

    def test_verbose_prints_progress(self, small_batch, capsys):
        train_replay(small_batch, control={"iter": 2}, verbose=True)
        out = capsys.readouterr().out
        assert "Training on 3 transitions" in out
        assert "Finished 2 pass(es)" in out


class TestMerge:

    def test_merge_returns_new_model_and_keeps_prior_untouched(self, small_batch):
        prior = train_replay(small_batch, control={"alpha": 0.5, "gamma": 0.9, "iter": 3})
        prior_table = prior.q_table.to_dict()
        prior_trace = list(prior.reward_trace)

        extra = _frame([("s2", "left", -1.0, "s1"), ("s4", "down", 0.0, "s3")])
        merged = train_replay(extra, control={"alpha": 0.5, "gamma": 0.9, "iter": 2}, model=prior)

        assert merged is not prior
        assert prior.q_table.to_dict() == prior_table
        assert prior.reward_trace == prior_trace

        # entries are only ever added or updated
        for state, action, _ in prior.q_table.items():
            assert (state, action) in merged.q_table
        assert ("s2", "left") in merged.q_table
        assert ("s4", "down") in merged.q_table
        assert merged.reward_trace == prior_trace + [-1.0, -1.0]
        assert len(merged.td_error_trace) == 5
        assert merged.states == ["s1", "s2", "s3", "goal", "s4"]
        assert merged.actions == ["right", "up", "left", "down"]

    def test_warm_start_uses_prior_values(self):
        prior = train_replay(_frame([("s2", "x", -5.0, "end")]), control={"alpha": 1.0, "gamma": 0.0})
        merged = train_replay(_frame([("s1", "y", 0.0, "s2")]), control={"alpha": 1.0, "gamma": 1.0},
                              model=prior)
        assert merged.q_table["s1", "y"] == -5.0
        assert merged.q_table["s2", "x"] == -5.0

    def test_policy_is_recomputed_after_merge(self):
        prior = train_replay(_frame([("s1", "a", 1.0, "end")]), control={"alpha": 1.0, "gamma": 0.0})
        assert prior.policy == {"s1": "a"}

        merged = train_replay(_frame([("s1", "b", 2.0, "end")]), control={"alpha": 1.0, "gamma": 0.0},
                              model=prior)
        assert merged.policy == {"s1": "b"}
        assert prior.policy == {"s1": "a"}

    def test_single_pass_merge_equals_single_pass_over_concatenation(self):
        batch_a = _frame([
            ("s1", "right", -1.0, "s2"),
            ("s2", "right", -1.0, "s3"),
            ("s3", "up", 10.0, "s4"),
        ])
        batch_b = _frame([
            ("s1", "right", -1.0, "s2"),
            ("s2", "right", -1.0, "s3"),
            ("s3", "up", 10.0, "s4"),
            ("s2", "up", -1.0, "s1"),
        ])
        control = {"alpha": 0.5, "gamma": 0.9, "iter": 1}

        merged = train_replay(batch_b, control=control, model=train_replay(batch_a, control=control))
        combined = train_replay(pd.concat([batch_a, batch_b], ignore_index=True), control=control)

        assert merged.q_table == combined.q_table
        assert merged.policy == combined.policy

    def test_single_pass_merge_equality_with_negative_next_state_values(self):
        # s2 only has a negative action when s1 is replayed; the action of s2
        # added by batch B must not lift the bootstrap to 0 in either run
        batch_a = _frame([("s2", "x", -5.0, "end"), ("s1", "a", 0.0, "s2")])
        batch_b = _frame([("s2", "y", 0.0, "end")])
        control = {"alpha": 1.0, "gamma": 1.0, "iter": 1}

        merged = train_replay(batch_b, control=control, model=train_replay(batch_a, control=control))
        combined = train_replay(pd.concat([batch_a, batch_b], ignore_index=True), control=control)

        assert merged.q_table["s1", "a"] == combined.q_table["s1", "a"] == -5.0
        assert merged.q_table == combined.q_table

    def test_entries_are_created_in_replay_order(self):
        model = train_replay(_frame([("s1", "down", 1.0, "s2"), ("s1", "up", 1.0, "s2")]),
                             control={"alpha": 1.0, "gamma": 0.0})
        assert model.q_table.actions_for("s1") == ["down", "up"]
        assert model.policy_action("s1") == "down"

    def test_multi_pass_merge_differs_from_multi_pass_over_concatenation(self):
        batch_a = _frame([("s1", "a", 0.0, "s2")])
        batch_b = _frame([("s2", "a", 10.0, "s3")])
        control = {"alpha": 0.5, "gamma": 1.0, "iter": 2}

        merged = train_replay(batch_b, control=control, model=train_replay(batch_a, control=control))
        combined = train_replay(pd.concat([batch_a, batch_b], ignore_index=True), control=control)

        # s2 has no recorded action while batch A is replayed on its own
        assert merged.q_table["s1", "a"] == 0.0
        assert combined.q_table["s1", "a"] == 2.5
        assert merged.q_table["s2", "a"] == combined.q_table["s2", "a"] == 7.5
        assert merged.q_table != combined.q_table
