"""Tests for session summary aggregation."""

from __future__ import annotations

import json

import pytest

from wcst_engine.analysis import SessionSummary, compute_session_summary, learning_to_learn_index, summary_to_dict
from wcst_engine.core import KEY_CARDS
from wcst_engine.session import SessionMetadata, TerminationPolicy, WcstSession


def _session(max_trials: int = 128) -> WcstSession:
    """Build a session with a generous category threshold."""

    metadata = SessionMetadata(participant_id="p", session_id="s", seed=42)
    return WcstSession(metadata, TerminationPolicy(max_trials=max_trials, categories_to_complete=50))


def _key(session: WcstSession, *, correct: bool) -> int:
    """Return a key index that is correct (or incorrect) for the current trial."""

    card = session.current_card
    for index, key_card in enumerate(KEY_CARDS):
        if card.matches(key_card, session.current_rule) is correct:
            return index
    raise AssertionError("no matching key")


def test_empty_log_returns_zeroed_summary() -> None:
    """An empty trial log should yield zero/empty fields."""

    summary = compute_session_summary([])

    assert summary == SessionSummary()
    assert summary.total_trials == 0
    assert summary.categories_completed == 0
    assert summary.trials_to_complete_first_category == 0
    assert summary.trials_per_category == ()
    assert summary.learning_to_learn == 0.0
    assert summary.shift_efficiency_mean == 0.0
    assert summary.mean_rt == 0.0
    assert summary.mean_rt_correct == 0.0
    assert summary.mean_rt_error == 0.0


def test_perfect_run_summary() -> None:
    """A run of correct responses should produce regular category statistics."""

    session = _session()
    for trial in range(35):
        session.respond(_key(session, correct=True), 100.0 + trial)

    summary = compute_session_summary(session.records)

    assert summary.total_trials == 35
    assert summary.total_correct == 35
    assert summary.total_errors == 0
    assert summary.categories_completed == 3
    assert summary.trials_to_complete_first_category == 11
    assert summary.trials_per_category == (10, 10, 10)
    assert summary.learning_to_learn == pytest.approx(0.0)
    assert summary.shift_efficiency_mean == pytest.approx(10.0)
    assert summary.conceptual_level_responses == 33
    assert summary.perseverative_errors == 0
    assert summary.non_perseverative_errors == 0
    assert summary.failure_to_maintain_set == 0
    assert summary.mean_rt == pytest.approx(117.0)
    assert summary.mean_rt_correct == pytest.approx(117.0)
    assert summary.mean_rt_error == 0.0


def test_response_time_means_split_by_correctness() -> None:
    """Mean RTs should be computed over all, correct, and error trials separately."""

    session = _session()
    session.respond(_key(session, correct=True), 100.0)
    session.respond(_key(session, correct=False), 300.0)
    session.respond(_key(session, correct=True), 200.0)

    summary = session.summary()

    assert summary.total_correct == 2
    assert summary.total_errors == 1
    assert summary.non_perseverative_errors == 1
    assert summary.mean_rt == pytest.approx(200.0)
    assert summary.mean_rt_correct == pytest.approx(150.0)
    assert summary.mean_rt_error == pytest.approx(300.0)
    assert summary.trials_to_complete_first_category == 0
    assert summary.trials_per_category == ()


def test_flag_sums_match_records() -> None:
    """Heaton counts should equal the number of flagged records."""

    session = _session(max_trials=90)
    pattern = [True] * 8 + [False] + [True] * 11 + [False, False]
    trial = 0
    while not session.finished:
        session.respond(_key(session, correct=pattern[trial % len(pattern)]), 250.0)
        trial += 1

    records = session.records
    summary = compute_session_summary(records)

    assert summary.total_trials == 90
    assert summary.perseverative_responses == sum(r.is_perseverative_response for r in records)
    assert summary.perseverative_errors == sum(r.is_perseverative_error for r in records)
    assert summary.non_perseverative_errors == sum(r.is_non_perseverative_error for r in records)
    assert summary.conceptual_level_responses == sum(r.is_conceptual_response for r in records)
    assert summary.failure_to_maintain_set == sum(r.set_maintenance_error for r in records)
    assert summary.failure_to_maintain_set >= 1
    assert summary.perseverative_errors + summary.non_perseverative_errors == summary.total_errors
    assert sum(summary.trials_per_category) <= summary.total_trials
    assert len(summary.trials_per_category) == summary.categories_completed


@pytest.mark.parametrize(
    ("counts", "expected"),
    [
        ([], 0.0),
        ([10], 0.0),
        ([20, 10], 0.5),
        ([30, 20, 10, 10], 0.6),
        ([10, 20, 20], -1.0),
        ([0, 5], 0.0),
    ],
)
def test_learning_to_learn_index(counts: list[int], expected: float) -> None:
    """Learning-to-learn should compare first-half and second-half category means."""

    assert learning_to_learn_index(counts) == pytest.approx(expected)


def test_summary_to_dict_is_json_serializable() -> None:
    """The summary mapping should round-trip through JSON."""

    session = _session()
    for trial in range(25):
        session.respond(_key(session, correct=True), 120.0)

    payload = summary_to_dict(session.summary())
    decoded = json.loads(json.dumps(payload))

    assert decoded["trials_per_category"] == [10, 10]
    assert decoded["total_trials"] == 25
    assert len(decoded) == 16


def test_summary_is_immutable_and_hashable() -> None:
    """Summaries should be hashable values whose category counts cannot change."""

    session = _session()
    for _ in range(15):
        session.respond(_key(session, correct=True), 100.0)
    summary = session.summary()

    assert isinstance(summary.trials_per_category, tuple)
    assert hash(summary) == hash(session.summary())
    assert {summary, session.summary()} == {summary}
    with pytest.raises(AttributeError):
        summary.trials_per_category.append(3)  # type: ignore[attr-defined]
