"""Exception types raised by the WCST engine and session helpers."""

from __future__ import annotations


class WcstError(Exception):
    """Base class for all engine-specific failures."""


class InvalidSelectionError(WcstError, ValueError):
    """Raised when a selected key-card index is not an integer in ``[0, 3]``."""


class InvalidSeedError(WcstError, ValueError):
    """Raised when a seed cannot be represented as a finite integer."""


class SessionFinishedError(WcstError, RuntimeError):
    """Raised when a response is submitted after the termination policy fired."""


__all__ = [
    "InvalidSeedError",
    "InvalidSelectionError",
    "SessionFinishedError",
    "WcstError",
]
