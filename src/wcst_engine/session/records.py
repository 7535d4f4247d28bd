"""Trial records: the immutable log entries produced once per response."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

from wcst_engine._version import __version__
from wcst_engine.core.cards import KEY_CARDS, RULES, Card, Rule
from wcst_engine.core.classifier import ClassificationResult
from wcst_engine.core.state import EngineState


@dataclass(frozen=True, slots=True)
class SessionMetadata:
    """Per-session identifiers copied onto every trial record.

    Parameters
    ----------
    participant_id : str
        Participant identifier. Must be non-empty.
    session_id : str
        Session identifier. Must be non-empty.
    seed : int
        Deck seed.
    device_info : str, optional
        Free-form description of the administering device.
    app_version : str, optional
        Version label of the administering software.
    """

    participant_id: str
    session_id: str
    seed: int
    device_info: str = ""
    app_version: str = __version__

    def __post_init__(self) -> None:
        if not str(self.participant_id).strip():
            raise ValueError("participant_id must be non-empty")
        if not str(self.session_id).strip():
            raise ValueError("session_id must be non-empty")


@dataclass(frozen=True, slots=True)
class TrialRecord:
    """One administered trial.

    Counters (``categories_completed``, ``consecutive_correct``,
    ``trial_within_category``, ``category_index``) hold the values *before*
    the response was scored.
    """

    participant_id: str
    session_id: str
    trial_index: int
    trial_within_category: int
    deck_card: Card
    selected_key_index: int
    correct: bool
    is_perseverative_response: bool
    is_perseverative_error: bool
    is_non_perseverative_error: bool
    is_conceptual_response: bool
    set_maintenance_error: bool
    rule_in_force: Rule
    prev_rule: Rule | None
    color_match: bool
    shape_match: bool
    number_match: bool
    no_attribute_match: bool
    categories_completed: int
    consecutive_correct: int
    is_shift_trial: bool
    category_index: int
    response_time_ms: float
    timestamp_utc: str
    seed: int
    device_info: str = ""
    app_version: str = __version__

    def __post_init__(self) -> None:
        if self.trial_index < 0:
            raise ValueError("trial_index must be >= 0")
        if self.selected_key_index not in range(len(KEY_CARDS)):
            raise ValueError("selected_key_index must be in [0, 3]")
        if self.rule_in_force not in RULES:
            raise ValueError(f"unknown rule_in_force {self.rule_in_force!r}")
        if self.prev_rule is not None and self.prev_rule not in RULES:
            raise ValueError(f"unknown prev_rule {self.prev_rule!r}")


def utc_timestamp(moment: datetime | None = None) -> str:
    """Format ``moment`` (default: now) as ISO-8601 UTC with milliseconds and ``Z``."""

    value = moment if moment is not None else datetime.now(timezone.utc)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def build_trial_record(
    *,
    state: EngineState,
    result: ClassificationResult,
    key_index: int,
    metadata: SessionMetadata,
    response_time_ms: float,
    timestamp_utc: str,
) -> TrialRecord:
    """Assemble a :class:`TrialRecord` from the pre-response state and its classification.

    Parameters
    ----------
    state : EngineState
        State the response was evaluated against (not the returned next state).
    result : ClassificationResult
        Output of :func:`~wcst_engine.core.classifier.evaluate_selection`.
    key_index : int
        Selected key-card index.
    metadata : SessionMetadata
        Session identifiers.
    response_time_ms : float
        Latency measured by the caller.
    timestamp_utc : str
        Response timestamp.

    Returns
    -------
    TrialRecord
        Immutable log entry.
    """

    return TrialRecord(
        participant_id=metadata.participant_id,
        session_id=metadata.session_id,
        trial_index=state.trial_index,
        trial_within_category=result.trial_within_category,
        deck_card=state.card,
        selected_key_index=int(key_index),
        correct=result.correct,
        is_perseverative_response=result.is_perseverative_response,
        is_perseverative_error=result.is_perseverative_error,
        is_non_perseverative_error=result.is_non_perseverative_error,
        is_conceptual_response=result.is_conceptual_response,
        set_maintenance_error=result.set_maintenance_error,
        rule_in_force=state.rule,
        prev_rule=state.prev_rule,
        color_match=result.color_match,
        shape_match=result.shape_match,
        number_match=result.number_match,
        no_attribute_match=result.no_attribute_match,
        categories_completed=state.categories_completed,
        consecutive_correct=state.consecutive_correct,
        is_shift_trial=result.is_shift_trial,
        category_index=state.categories_completed,
        response_time_ms=float(response_time_ms),
        timestamp_utc=timestamp_utc,
        seed=metadata.seed,
        device_info=metadata.device_info,
        app_version=metadata.app_version,
    )


__all__ = ["SessionMetadata", "TrialRecord", "build_trial_record", "utc_timestamp"]
