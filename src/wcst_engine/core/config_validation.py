"""Key checks shared by mapping-based config parsers."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any


def validate_allowed_keys(
    mapping: Mapping[str, Any],
    *,
    field_name: str,
    allowed_keys: Iterable[str],
) -> None:
    """Reject keys of ``mapping`` that are not in ``allowed_keys``.

    Raises
    ------
    ValueError
        If unknown keys are present. The message lists them sorted.
    """

    allowed = {str(key) for key in allowed_keys}
    unknown = sorted(str(key) for key in mapping if str(key) not in allowed)
    if unknown:
        raise ValueError(f"{field_name} has unknown keys: {unknown}")


def validate_required_keys(
    mapping: Mapping[str, Any],
    *,
    field_name: str,
    required_keys: Iterable[str],
) -> None:
    """Reject ``mapping`` when any of ``required_keys`` is missing.

    Raises
    ------
    ValueError
        If required keys are missing.
    """

    missing = sorted(str(key) for key in required_keys if key not in mapping)
    if missing:
        raise ValueError(f"{field_name} is missing required keys: {missing}")


def coerce_positive_int(raw: Any, *, field_name: str) -> int:
    """Return ``raw`` as a strictly positive ``int``."""

    if isinstance(raw, bool):
        raise ValueError(f"{field_name} must be a positive integer")
    try:
        value = int(raw)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{field_name} must be a positive integer") from exc
    if value != raw or value <= 0:
        raise ValueError(f"{field_name} must be a positive integer")
    return value


__all__ = ["coerce_positive_int", "validate_allowed_keys", "validate_required_keys"]
