"""Simulated respondents for replay checks and synthetic sessions.

A responder only sees what a participant sees: the deck card and the
correct/incorrect feedback after each choice. The active rule stays hidden.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import numpy as np

from wcst_engine.core.cards import KEY_CARDS, RULES, Card, Rule

KEY_INDICES: tuple[int, ...] = tuple(range(len(KEY_CARDS)))


@runtime_checkable
class Responder(Protocol):
    """Interface for simulated respondents.

    The simulation loop calls ``start_session`` once, then alternates
    ``action_distribution`` and ``update`` for every trial.
    """

    def start_session(self) -> None:
        """Reset internal state before a new session."""

    def action_distribution(self, card: Card) -> dict[int, float]:
        """Return choice weights over key indices ``0..3`` for ``card``."""

    def update(
        self,
        card: Card,
        key_index: int,
        correct: bool,
        *,
        rng: np.random.Generator,
    ) -> None:
        """Receive feedback for the choice just made."""


class RandomResponder:
    """Uniform choice over the four key cards, ignoring feedback."""

    def start_session(self) -> None:
        """No state to reset."""

    def action_distribution(self, card: Card) -> dict[int, float]:
        del card
        probability = 1.0 / float(len(KEY_INDICES))
        return {key_index: probability for key_index in KEY_INDICES}

    def update(
        self,
        card: Card,
        key_index: int,
        correct: bool,
        *,
        rng: np.random.Generator,
    ) -> None:
        del card, key_index, correct, rng


class RuleSwitchingResponder:
    """Hypothesis-testing respondent.

    The responder sorts by one hypothesised rule. After negative feedback it
    abandons the hypothesis for one of the other two rules, unless it
    perseverates.

    Parameters
    ----------
    perseveration : float, optional
        Probability of keeping the current hypothesis after an error.
    lapse : float, optional
        Weight of a uniform random choice mixed into every trial.
    initial_rule : {"color", "shape", "number"}, optional
        Hypothesis held at session start.

    Raises
    ------
    ValueError
        If a probability lies outside ``[0, 1]`` or the initial rule is unknown.
    """

    def __init__(
        self,
        *,
        perseveration: float = 0.0,
        lapse: float = 0.0,
        initial_rule: Rule = "color",
    ) -> None:
        if perseveration < 0.0 or perseveration > 1.0:
            raise ValueError("perseveration must be in [0, 1]")
        if lapse < 0.0 or lapse > 1.0:
            raise ValueError("lapse must be in [0, 1]")
        if initial_rule not in RULES:
            raise ValueError(f"unknown initial_rule {initial_rule!r}")

        self._perseveration = float(perseveration)
        self._lapse = float(lapse)
        self._initial_rule: Rule = initial_rule
        self._hypothesis: Rule = initial_rule

    @property
    def hypothesis(self) -> Rule:
        """Return the rule the responder currently sorts by."""

        return self._hypothesis

    def start_session(self) -> None:
        self._hypothesis = self._initial_rule

    def action_distribution(self, card: Card) -> dict[int, float]:
        """Mix the hypothesis-consistent key with a uniform lapse component."""

        base = self._lapse / float(len(KEY_INDICES))
        distribution = {key_index: base for key_index in KEY_INDICES}
        distribution[self._matching_key(card)] += 1.0 - self._lapse
        return distribution

    def update(
        self,
        card: Card,
        key_index: int,
        correct: bool,
        *,
        rng: np.random.Generator,
    ) -> None:
        """Switch hypothesis after an error with probability ``1 - perseveration``."""

        del card, key_index
        if correct:
            return
        if rng.random() < self._perseveration:
            return
        alternatives = [rule for rule in RULES if rule != self._hypothesis]
        self._hypothesis = alternatives[int(rng.integers(len(alternatives)))]

    def _matching_key(self, card: Card) -> int:
        for key_index, key_card in enumerate(KEY_CARDS):
            if card.matches(key_card, self._hypothesis):
                return key_index
        raise ValueError(f"no key card matches {card!r} under {self._hypothesis!r}")


def create_responder(
    kind: str,
    *,
    perseveration: float = 0.0,
    lapse: float = 0.0,
) -> Responder:
    """Build a responder by name (``"random"`` or ``"rule_switching"``)."""

    if kind == "random":
        return RandomResponder()
    if kind == "rule_switching":
        return RuleSwitchingResponder(perseveration=perseveration, lapse=lapse)
    raise ValueError(f"unknown responder kind {kind!r}; expected 'random' or 'rule_switching'")


__all__ = [
    "KEY_INDICES",
    "RandomResponder",
    "Responder",
    "RuleSwitchingResponder",
    "create_responder",
]
