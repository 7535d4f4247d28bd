"""Caller-side session loop around the pure engine.

The engine never decides when a session ends. :class:`WcstSession` is a thin
stateful wrapper for callers that want the usual administration loop: it keeps
the latest :class:`~wcst_engine.core.state.EngineState`, appends one
:class:`~wcst_engine.session.records.TrialRecord` per response, and consults a
:class:`TerminationPolicy`.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from wcst_engine.analysis.summary import SessionSummary, compute_session_summary
from wcst_engine.core.cards import Card, Rule
from wcst_engine.core.classifier import evaluate_selection, validate_key_index
from wcst_engine.core.errors import SessionFinishedError
from wcst_engine.core.state import EngineState, initial_state

from .records import SessionMetadata, TrialRecord, build_trial_record, utc_timestamp

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TerminationPolicy:
    """Stop rule applied by the caller.

    Parameters
    ----------
    max_trials : int, optional
        Maximum number of administered trials.
    categories_to_complete : int, optional
        Number of completed categories that ends the session.

    Raises
    ------
    ValueError
        If either limit is not positive.
    """

    max_trials: int = 128
    categories_to_complete: int = 6

    def __post_init__(self) -> None:
        if self.max_trials <= 0:
            raise ValueError("max_trials must be > 0")
        if self.categories_to_complete <= 0:
            raise ValueError("categories_to_complete must be > 0")

    def is_finished(self, records: Sequence[TrialRecord]) -> bool:
        """Return whether no further response should be collected.

        Records carry pre-response counters, so the category threshold is
        seen on the logged trial following the final shift.
        """

        if not records:
            return False
        return (
            records[-1].categories_completed >= self.categories_to_complete
            or len(records) >= self.max_trials
        )


class WcstSession:
    """Stateful administration loop for one participant.

    Parameters
    ----------
    metadata : SessionMetadata
        Identifiers and seed for the session.
    policy : TerminationPolicy | None, optional
        Stop rule. Defaults to 128 trials or six categories.

    Notes
    -----
    Each instance owns its own state and log; independent sessions can be
    simulated side by side without interacting.
    """

    def __init__(self, metadata: SessionMetadata, policy: TerminationPolicy | None = None) -> None:
        self._metadata = metadata
        self._policy = policy if policy is not None else TerminationPolicy()
        self._state = initial_state(metadata.seed)
        self._records: list[TrialRecord] = []

    @property
    def metadata(self) -> SessionMetadata:
        return self._metadata

    @property
    def policy(self) -> TerminationPolicy:
        return self._policy

    @property
    def state(self) -> EngineState:
        """Return the engine state for the next trial."""

        return self._state

    @property
    def records(self) -> tuple[TrialRecord, ...]:
        """Return the trial log in administration order."""

        return tuple(self._records)

    @property
    def current_card(self) -> Card:
        return self._state.card

    @property
    def current_rule(self) -> Rule:
        return self._state.rule

    @property
    def finished(self) -> bool:
        return self._policy.is_finished(self._records)

    def respond(
        self,
        key_index: int,
        response_time_ms: float,
        timestamp_utc: str | None = None,
    ) -> TrialRecord:
        """Score one response and advance the session.

        Parameters
        ----------
        key_index : int
            Selected key card in ``0..3``.
        response_time_ms : float
            Latency measured by the caller.
        timestamp_utc : str | None, optional
            Response timestamp. Defaults to the current UTC time.

        Returns
        -------
        TrialRecord
            Log entry appended for this trial.

        Raises
        ------
        SessionFinishedError
            If the termination policy already fired.
        InvalidSelectionError
            If ``key_index`` is out of range. The session is left unchanged.
        """

        if self.finished:
            raise SessionFinishedError(
                f"session {self._metadata.session_id!r} is finished after {len(self._records)} trials"
            )
        index = validate_key_index(key_index)

        state = self._state
        result, next_state = evaluate_selection(state, index)
        record = build_trial_record(
            state=state,
            result=result,
            key_index=index,
            metadata=self._metadata,
            response_time_ms=response_time_ms,
            timestamp_utc=timestamp_utc if timestamp_utc is not None else utc_timestamp(),
        )
        self._records.append(record)
        self._state = next_state

        if result.is_shift_trial:
            logger.debug(
                "session %s: category %d completed on trial %d, rule %s -> %s",
                self._metadata.session_id,
                next_state.categories_completed,
                state.trial_index,
                state.rule,
                next_state.rule,
            )
        if self.finished:
            logger.info(
                "session %s finished: %d trials, %d categories",
                self._metadata.session_id,
                len(self._records),
                next_state.categories_completed,
            )
        return record

    def summary(self) -> SessionSummary:
        """Return summary indices for the trials logged so far."""

        return compute_session_summary(self._records)


__all__ = ["TerminationPolicy", "WcstSession"]
