"""Immutable engine state for the rule-shifting trial loop.

Each response produces a new :class:`EngineState`; see
:func:`wcst_engine.core.classifier.evaluate_selection`. Callers keep or drop
snapshots as they like, which makes deterministic replay trivial.

Notes
-----
The deck is indexed with ``trial_index % len(deck)``, so sessions longer than
128 trials reuse cards cyclically. Standard administrations stop earlier.
"""

from __future__ import annotations

from dataclasses import dataclass

from .cards import RULES, Card, Rule
from .deck import DECK_SIZE, build_deck_with_cursor
from .rng import normalize_seed

CORRECT_TO_SHIFT = 10
SET_MAINTENANCE_MIN_STREAK = 5
CONCEPTUAL_MIN_RUN = 2


@dataclass(frozen=True, slots=True)
class EngineState:
    """Snapshot of the trial state machine before one response.

    Parameters
    ----------
    seed : int
        Seed used to build the deck.
    rng_state : int
        32-bit generator cursor after deck shuffling.
    deck : tuple[Card, ...]
        Shuffled 128-card deck.
    trial_index : int
        Zero-based trial counter. Monotonic, never reset.
    rule_index : int
        Index into :data:`~wcst_engine.core.cards.RULES`.
    consecutive_correct : int
        Current streak toward the shift threshold.
    categories_completed : int
        Number of rule shifts so far.
    prev_rule : str | None
        Rule vacated by the most recent shift, ``None`` before the first.
    trial_within_category : int
        Trials administered since the last shift.
    conceptual_run_length : int
        Length of the current uninterrupted correct run.

    Raises
    ------
    ValueError
        If the deck size is wrong or any counter is out of range.
    """

    seed: int
    rng_state: int
    deck: tuple[Card, ...]
    trial_index: int = 0
    rule_index: int = 0
    consecutive_correct: int = 0
    categories_completed: int = 0
    prev_rule: Rule | None = None
    trial_within_category: int = 0
    conceptual_run_length: int = 0

    def __post_init__(self) -> None:
        if len(self.deck) != DECK_SIZE:
            raise ValueError(f"deck must contain {DECK_SIZE} cards, got {len(self.deck)}")
        if self.rule_index not in range(len(RULES)):
            raise ValueError("rule_index must be in [0, 2]")
        if self.prev_rule is not None and self.prev_rule not in RULES:
            raise ValueError(f"unknown prev_rule {self.prev_rule!r}")
        for name in (
            "trial_index",
            "consecutive_correct",
            "categories_completed",
            "trial_within_category",
            "conceptual_run_length",
        ):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0")
        if self.consecutive_correct >= CORRECT_TO_SHIFT:
            raise ValueError(f"consecutive_correct must be < {CORRECT_TO_SHIFT}")

    @property
    def rule(self) -> Rule:
        """Return the active sorting rule."""

        return RULES[self.rule_index]

    @property
    def card(self) -> Card:
        """Return the deck card shown on the current trial."""

        return self.deck[self.trial_index % len(self.deck)]


def initial_state(seed: int) -> EngineState:
    """Create the engine state for a fresh session.

    Parameters
    ----------
    seed : int
        Deck seed.

    Returns
    -------
    EngineState
        State at trial ``0`` under the ``color`` rule with zeroed counters.

    Raises
    ------
    InvalidSeedError
        If ``seed`` is not a finite integer.
    """

    normalized = normalize_seed(seed)
    deck, cursor = build_deck_with_cursor(normalized)
    return EngineState(seed=normalized, rng_state=cursor, deck=deck)


def current_rule(state: EngineState) -> Rule:
    """Return the active sorting rule for ``state``."""

    return state.rule


def deck_card(state: EngineState) -> Card:
    """Return the deck card for the current trial of ``state``."""

    return state.card


__all__ = [
    "CONCEPTUAL_MIN_RUN",
    "CORRECT_TO_SHIFT",
    "EngineState",
    "SET_MAINTENANCE_MIN_STREAK",
    "current_rule",
    "deck_card",
    "initial_state",
]
