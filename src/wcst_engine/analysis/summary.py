"""Session-level WCST indices computed from an ordered trial log."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any

import numpy as np

if TYPE_CHECKING:
    from wcst_engine.session.records import TrialRecord


@dataclass(frozen=True, slots=True)
class SessionSummary:
    """Summary indices for one administered session.

    Parameters
    ----------
    total_trials, total_correct, total_errors : int
        Response counts.
    categories_completed : int
        Categories completed before the last logged trial.
    perseverative_responses, perseverative_errors, non_perseverative_errors : int
        Heaton response/error counts.
    conceptual_level_responses : int
        Correct responses that were the third or later of a run.
    failure_to_maintain_set : int
        Errors made after 5 to 9 consecutive correct responses.
    trials_to_complete_first_category : int
        1-based position of the first record logged with one completed
        category, ``0`` when never reached.
    trials_per_category : tuple[int, ...]
        Trial counts per completed category index.
    learning_to_learn : float
        Relative drop in trials-per-category from the first to the second
        half of completed categories.
    shift_efficiency_mean : float
        Mean trial distance between consecutive shift trials.
    mean_rt, mean_rt_correct, mean_rt_error : float
        Mean response times in milliseconds; ``0.0`` for empty subsets.
    """

    total_trials: int = 0
    total_correct: int = 0
    total_errors: int = 0
    categories_completed: int = 0
    perseverative_responses: int = 0
    perseverative_errors: int = 0
    non_perseverative_errors: int = 0
    conceptual_level_responses: int = 0
    failure_to_maintain_set: int = 0
    trials_to_complete_first_category: int = 0
    trials_per_category: tuple[int, ...] = ()
    learning_to_learn: float = 0.0
    shift_efficiency_mean: float = 0.0
    mean_rt: float = 0.0
    mean_rt_correct: float = 0.0
    mean_rt_error: float = 0.0


def compute_session_summary(records: Sequence[TrialRecord]) -> SessionSummary:
    """Aggregate an ordered trial log into a :class:`SessionSummary`.

    Parameters
    ----------
    records : Sequence[TrialRecord]
        Trial records in administration order.

    Returns
    -------
    SessionSummary
        Summary indices. An empty log yields an all-zero summary.
    """

    rows = list(records)
    if not rows:
        return SessionSummary()

    correct = np.array([row.correct for row in rows], dtype=bool)
    rts = np.array([row.response_time_ms for row in rows], dtype=float)
    categories = np.array([row.categories_completed for row in rows], dtype=int)
    category_index = np.array([row.category_index for row in rows], dtype=int)

    categories_completed = int(rows[-1].categories_completed)

    first_category_hits = np.flatnonzero(categories == 1)
    trials_to_first = int(first_category_hits[0]) + 1 if first_category_hits.size else 0

    trials_per_category = tuple(
        int(np.count_nonzero(category_index == index))
        for index in range(categories_completed)
    )

    shift_trials = np.array([row.trial_index for row in rows if row.is_shift_trial], dtype=float)

    return SessionSummary(
        total_trials=len(rows),
        total_correct=int(np.count_nonzero(correct)),
        total_errors=int(np.count_nonzero(~correct)),
        categories_completed=categories_completed,
        perseverative_responses=_count(rows, "is_perseverative_response"),
        perseverative_errors=_count(rows, "is_perseverative_error"),
        non_perseverative_errors=_count(rows, "is_non_perseverative_error"),
        conceptual_level_responses=_count(rows, "is_conceptual_response"),
        failure_to_maintain_set=_count(rows, "set_maintenance_error"),
        trials_to_complete_first_category=trials_to_first,
        trials_per_category=trials_per_category,
        learning_to_learn=learning_to_learn_index(trials_per_category),
        shift_efficiency_mean=_safe_mean(np.diff(shift_trials)),
        mean_rt=_safe_mean(rts),
        mean_rt_correct=_safe_mean(rts[correct]),
        mean_rt_error=_safe_mean(rts[~correct]),
    )


def learning_to_learn_index(trials_per_category: Sequence[int]) -> float:
    """Compare mean trials-per-category between the first and second half.

    The split point is ``len(trials_per_category) // 2``; with an odd count
    the middle category belongs to the second half.

    Returns
    -------
    float
        ``(mean_first - mean_second) / mean_first``, or ``0.0`` when the first
        half is empty or its mean is zero.
    """

    counts = np.asarray(trials_per_category, dtype=float)
    half = counts.size // 2
    mean_first = _safe_mean(counts[:half])
    mean_second = _safe_mean(counts[half:])
    if mean_first <= 0.0:
        return 0.0
    return float((mean_first - mean_second) / mean_first)


def summary_to_dict(summary: SessionSummary) -> dict[str, Any]:
    """Return a JSON-ready mapping of ``summary``."""

    payload = asdict(summary)
    payload["trials_per_category"] = [int(value) for value in summary.trials_per_category]
    return payload


def _count(rows: Sequence[TrialRecord], flag: str) -> int:
    return sum(1 for row in rows if getattr(row, flag))


def _safe_mean(values: np.ndarray) -> float:
    if values.size == 0:
        return 0.0
    return float(np.mean(values))


__all__ = [
    "SessionSummary",
    "compute_session_summary",
    "learning_to_learn_index",
    "summary_to_dict",
]
