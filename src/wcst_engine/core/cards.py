"""Card attributes, key cards, and sorting rules."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

Color = Literal["red", "green", "blue", "yellow"]
Shape = Literal["flower", "butterfly", "mushroom", "leaf"]
Rule = Literal["color", "shape", "number"]

COLORS: tuple[Color, ...] = ("red", "green", "blue", "yellow")
SHAPES: tuple[Shape, ...] = ("flower", "butterfly", "mushroom", "leaf")
NUMBERS: tuple[int, ...] = (1, 2, 3, 4)

# Rules cycle in this order; the active rule is never drawn at random.
RULES: tuple[Rule, ...] = ("color", "shape", "number")


@dataclass(frozen=True, slots=True)
class Card:
    """One stimulus card.

    Parameters
    ----------
    color : {"red", "green", "blue", "yellow"}
        Symbol color.
    shape : {"flower", "butterfly", "mushroom", "leaf"}
        Symbol shape.
    number : int
        Symbol count in ``1..4``.

    Raises
    ------
    ValueError
        If any attribute lies outside its enumerated domain.
    """

    color: Color
    shape: Shape
    number: int

    def __post_init__(self) -> None:
        if self.color not in COLORS:
            raise ValueError(f"unknown card color {self.color!r}")
        if self.shape not in SHAPES:
            raise ValueError(f"unknown card shape {self.shape!r}")
        if isinstance(self.number, bool) or self.number not in NUMBERS:
            raise ValueError(f"card number must be one of {NUMBERS}, got {self.number!r}")

    def attribute(self, rule: Rule) -> str | int:
        """Return the attribute value inspected under ``rule``."""

        if rule == "color":
            return self.color
        if rule == "shape":
            return self.shape
        if rule == "number":
            return self.number
        raise ValueError(f"unknown rule {rule!r}")

    def matches(self, other: "Card", rule: Rule) -> bool:
        """Return whether two cards share the attribute selected by ``rule``."""

        return self.attribute(rule) == other.attribute(rule)


KEY_CARDS: tuple[Card, ...] = (
    Card(color="red", shape="flower", number=1),
    Card(color="green", shape="butterfly", number=2),
    Card(color="yellow", shape="mushroom", number=3),
    Card(color="blue", shape="leaf", number=4),
)


__all__ = [
    "COLORS",
    "Card",
    "Color",
    "KEY_CARDS",
    "NUMBERS",
    "RULES",
    "Rule",
    "SHAPES",
    "Shape",
]
