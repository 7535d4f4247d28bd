"""Deterministic WCST engine: generator, deck, state machine, classifier."""

from .cards import COLORS, KEY_CARDS, NUMBERS, RULES, SHAPES, Card, Rule
from .classifier import ClassificationResult, evaluate_selection, validate_key_index
from .deck import DECK_SIZE, build_base_deck, build_deck, shuffle_in_place
from .errors import InvalidSeedError, InvalidSelectionError, SessionFinishedError, WcstError
from .rng import SeededGenerator, normalize_seed
from .state import CORRECT_TO_SHIFT, EngineState, current_rule, deck_card, initial_state

__all__ = [
    "COLORS",
    "CORRECT_TO_SHIFT",
    "Card",
    "ClassificationResult",
    "DECK_SIZE",
    "EngineState",
    "InvalidSeedError",
    "InvalidSelectionError",
    "KEY_CARDS",
    "NUMBERS",
    "RULES",
    "Rule",
    "SHAPES",
    "SeededGenerator",
    "SessionFinishedError",
    "WcstError",
    "build_base_deck",
    "build_deck",
    "current_rule",
    "deck_card",
    "evaluate_selection",
    "initial_state",
    "normalize_seed",
    "shuffle_in_place",
    "validate_key_index",
]
