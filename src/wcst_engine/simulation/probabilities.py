"""Choice-probability helpers for simulated responders."""

from __future__ import annotations

from collections.abc import Mapping

import numpy as np


def normalize_distribution(
    raw_distribution: Mapping[int, float],
    key_indices: tuple[int, ...],
) -> dict[int, float]:
    """Validate and normalize key-choice weights.

    Parameters
    ----------
    raw_distribution : Mapping[int, float]
        Responder-emitted weights per key index.
    key_indices : tuple[int, ...]
        Selectable key indices.

    Returns
    -------
    dict[int, float]
        Probabilities over ``key_indices`` summing to one.

    Raises
    ------
    ValueError
        If weights reference unknown keys, are negative, or sum to zero.
    """

    unknown = set(raw_distribution) - set(key_indices)
    if unknown:
        raise ValueError(f"distribution contains unknown key indices: {sorted(unknown)!r}")

    weights: dict[int, float] = {}
    for key_index in key_indices:
        value = float(raw_distribution.get(key_index, 0.0))
        if value < 0:
            raise ValueError(f"distribution contains negative weight for key {key_index!r}")
        weights[key_index] = value

    total = float(sum(weights.values()))
    if total <= 0:
        raise ValueError("distribution sum must be > 0")

    return {key_index: value / total for key_index, value in weights.items()}


def sample_key(distribution: Mapping[int, float], rng: np.random.Generator) -> int:
    """Draw one key index from a normalized distribution."""

    keys = tuple(distribution.keys())
    probs = np.asarray(tuple(distribution.values()), dtype=float)
    return int(keys[int(rng.choice(len(keys), p=probs))])


__all__ = ["normalize_distribution", "sample_key"]
