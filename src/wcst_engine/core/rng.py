"""Deterministic 32-bit pseudorandom source used for deck shuffling.

The algorithm is mulberry32. It is kept bit-exact so a deck built from a seed
here matches decks built by other implementations of the task from the same
seed. NumPy generators are used elsewhere for simulated behaviour, never for
stimulus order.
"""

from __future__ import annotations

import math
from numbers import Integral, Real

from .errors import InvalidSeedError

_MASK_32 = 0xFFFFFFFF
_INCREMENT = 0x6D2B79F5
_DENOMINATOR = 4294967296.0


def normalize_seed(seed: object) -> int:
    """Validate a seed and return it as a Python ``int``.

    Parameters
    ----------
    seed : object
        Candidate seed. Integers (including NumPy integer scalars) are accepted
        as-is. Floats are accepted only when finite and integral.

    Returns
    -------
    int
        Normalized integer seed.

    Raises
    ------
    InvalidSeedError
        If ``seed`` is a boolean, non-numeric, non-finite, or fractional.
    """

    if isinstance(seed, bool):
        raise InvalidSeedError("seed must be an integer, got bool")
    if isinstance(seed, Integral):
        return int(seed)
    if isinstance(seed, Real):
        value = float(seed)
        if not math.isfinite(value):
            raise InvalidSeedError(f"seed must be finite, got {seed!r}")
        if not value.is_integer():
            raise InvalidSeedError(f"seed must be integral, got {seed!r}")
        return int(value)
    raise InvalidSeedError(f"seed must be an integer, got {type(seed).__name__}")


class SeededGenerator:
    """Mulberry32 generator producing floats in ``[0, 1)``.

    Parameters
    ----------
    seed : int
        Integer seed. Values are reduced modulo ``2**32``; negative seeds are
        therefore valid and map onto their two's-complement state.

    Notes
    -----
    The generator is the only mutable object in the engine. It is consumed
    while building the deck; the resulting 32-bit state is stored on the
    immutable engine state as a cursor and can be resumed with
    :meth:`from_state`.
    """

    __slots__ = ("_state",)

    def __init__(self, seed: int) -> None:
        self._state = normalize_seed(seed) & _MASK_32

    @classmethod
    def from_state(cls, state: int) -> "SeededGenerator":
        """Resume a generator from a raw 32-bit state."""

        generator = cls(0)
        generator._state = int(state) & _MASK_32
        return generator

    @property
    def state(self) -> int:
        """Return the current 32-bit internal state."""

        return self._state

    def next_float(self) -> float:
        """Advance the state and return the next float in ``[0, 1)``."""

        self._state = (self._state + _INCREMENT) & _MASK_32
        t = self._state
        t = ((t ^ (t >> 15)) * (t | 1)) & _MASK_32
        t = t ^ ((t + (((t ^ (t >> 7)) * (t | 61)) & _MASK_32)) & _MASK_32)
        return ((t ^ (t >> 14)) & _MASK_32) / _DENOMINATOR

    __call__ = next_float

    def draws(self, n: int) -> list[float]:
        """Return the next ``n`` floats."""

        if n < 0:
            raise ValueError("n must be >= 0")
        return [self.next_float() for _ in range(n)]


__all__ = ["SeededGenerator", "normalize_seed"]
