"""Per-response classification under Heaton's WCST scoring taxonomy.

:func:`evaluate_selection` is the engine's only transition function. It is a
pure mapping ``(state, key_index) -> (result, next_state)``; the input state
is never modified.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from numbers import Integral

from .cards import KEY_CARDS, RULES
from .errors import InvalidSelectionError
from .state import (
    CONCEPTUAL_MIN_RUN,
    CORRECT_TO_SHIFT,
    SET_MAINTENANCE_MIN_STREAK,
    EngineState,
)


@dataclass(frozen=True, slots=True)
class ClassificationResult:
    """Classification of one response.

    Parameters
    ----------
    correct : bool
        Whether the selection matches the deck card under the active rule.
    is_perseverative_response : bool
        Selection matches under the previously active rule.
    is_perseverative_error : bool
        Incorrect perseverative response.
    is_non_perseverative_error : bool
        Incorrect response that is not perseverative.
    is_conceptual_response : bool
        Correct response that is the third or later of an uninterrupted run.
    set_maintenance_error : bool
        Error after 5 to 9 consecutive correct responses.
    color_match, shape_match, number_match : bool
        Attribute-wise match between deck card and selected key card.
    no_attribute_match : bool
        Selection shares no attribute with the deck card.
    is_shift_trial : bool
        This response completed a category and triggered a rule shift.
    trial_within_category : int
        Trials administered in the current category before this response.
    """

    correct: bool
    is_perseverative_response: bool
    is_perseverative_error: bool
    is_non_perseverative_error: bool
    is_conceptual_response: bool
    set_maintenance_error: bool
    color_match: bool
    shape_match: bool
    number_match: bool
    no_attribute_match: bool
    is_shift_trial: bool
    trial_within_category: int


def validate_key_index(key_index: object) -> int:
    """Return ``key_index`` as ``int`` or raise :class:`InvalidSelectionError`."""

    if isinstance(key_index, bool) or not isinstance(key_index, Integral):
        raise InvalidSelectionError(f"key index must be an integer, got {key_index!r}")
    index = int(key_index)
    if index < 0 or index >= len(KEY_CARDS):
        raise InvalidSelectionError(
            f"key index must be in [0, {len(KEY_CARDS) - 1}], got {index}"
        )
    return index


def evaluate_selection(state: EngineState, key_index: int) -> tuple[ClassificationResult, EngineState]:
    """Classify one selection and compute the next engine state.

    Parameters
    ----------
    state : EngineState
        State before the response.
    key_index : int
        Index of the chosen key card in ``0..3``.

    Returns
    -------
    tuple[ClassificationResult, EngineState]
        Trial classification and the state for the following trial.

    Raises
    ------
    InvalidSelectionError
        If ``key_index`` is not an integer in ``[0, 3]``. Nothing is
        classified in that case.
    """

    index = validate_key_index(key_index)
    card = state.card
    key_card = KEY_CARDS[index]
    rule = state.rule

    color_match = card.color == key_card.color
    shape_match = card.shape == key_card.shape
    number_match = card.number == key_card.number
    no_attribute_match = not (color_match or shape_match or number_match)

    correct = card.matches(key_card, rule)
    is_perseverative_response = state.prev_rule is not None and card.matches(key_card, state.prev_rule)
    is_perseverative_error = not correct and is_perseverative_response
    is_non_perseverative_error = not correct and not is_perseverative_response
    is_conceptual_response = correct and state.conceptual_run_length >= CONCEPTUAL_MIN_RUN
    set_maintenance_error = (
        not correct
        and SET_MAINTENANCE_MIN_STREAK <= state.consecutive_correct < CORRECT_TO_SHIFT
    )

    is_shift_trial = False
    if correct:
        consecutive_correct = state.consecutive_correct + 1
        if consecutive_correct >= CORRECT_TO_SHIFT:
            is_shift_trial = True
            next_state = replace(
                state,
                trial_index=state.trial_index + 1,
                rule_index=(state.rule_index + 1) % len(RULES),
                prev_rule=rule,
                consecutive_correct=0,
                categories_completed=state.categories_completed + 1,
                trial_within_category=0,
                conceptual_run_length=state.conceptual_run_length + 1,
            )
        else:
            next_state = replace(
                state,
                trial_index=state.trial_index + 1,
                consecutive_correct=consecutive_correct,
                trial_within_category=state.trial_within_category + 1,
                conceptual_run_length=state.conceptual_run_length + 1,
            )
    else:
        next_state = replace(
            state,
            trial_index=state.trial_index + 1,
            consecutive_correct=0,
            trial_within_category=state.trial_within_category + 1,
            conceptual_run_length=0,
        )

    result = ClassificationResult(
        correct=correct,
        is_perseverative_response=is_perseverative_response,
        is_perseverative_error=is_perseverative_error,
        is_non_perseverative_error=is_non_perseverative_error,
        is_conceptual_response=is_conceptual_response,
        set_maintenance_error=set_maintenance_error,
        color_match=color_match,
        shape_match=shape_match,
        number_match=number_match,
        no_attribute_match=no_attribute_match,
        is_shift_trial=is_shift_trial,
        trial_within_category=state.trial_within_category,
    )
    return result, next_state


__all__ = ["ClassificationResult", "evaluate_selection", "validate_key_index"]
