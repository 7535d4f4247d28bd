"""Deterministic construction of the 128-card response deck."""

from __future__ import annotations

from collections.abc import MutableSequence
from typing import TypeVar

from .cards import COLORS, NUMBERS, SHAPES, Card
from .rng import SeededGenerator, normalize_seed

ItemT = TypeVar("ItemT")

DECK_SIZE = 2 * len(COLORS) * len(SHAPES) * len(NUMBERS)


def build_base_deck() -> tuple[Card, ...]:
    """Return the 64 unique cards in color/shape/number nested order."""

    return tuple(
        Card(color=color, shape=shape, number=number)
        for color in COLORS
        for shape in SHAPES
        for number in NUMBERS
    )


def shuffle_in_place(items: MutableSequence[ItemT], generator: SeededGenerator) -> None:
    """Fisher-Yates shuffle driven by ``generator``.

    Parameters
    ----------
    items : MutableSequence[ItemT]
        Sequence shuffled in place.
    generator : SeededGenerator
        Source of uniform draws. One draw is consumed per position from the
        last index down to ``1``.
    """

    for i in range(len(items) - 1, 0, -1):
        j = int(generator.next_float() * (i + 1))
        items[i], items[j] = items[j], items[i]


def build_deck_with_cursor(seed: int) -> tuple[tuple[Card, ...], int]:
    """Build a shuffled deck and return it with the generator state after shuffling."""

    generator = SeededGenerator(normalize_seed(seed))
    base = build_base_deck()
    cards = list(base) + list(base)
    shuffle_in_place(cards, generator)
    return tuple(cards), generator.state


def build_deck(seed: int) -> tuple[Card, ...]:
    """Build the shuffled 128-card deck for ``seed``.

    Parameters
    ----------
    seed : int
        Integer seed. Validated eagerly, see
        :func:`~wcst_engine.core.rng.normalize_seed`.

    Returns
    -------
    tuple[Card, ...]
        Two copies of every card combination in seed-determined order.

    Raises
    ------
    InvalidSeedError
        If ``seed`` is not a finite integer.
    """

    deck, _ = build_deck_with_cursor(seed)
    return deck


__all__ = [
    "DECK_SIZE",
    "build_base_deck",
    "build_deck",
    "build_deck_with_cursor",
    "shuffle_in_place",
]
