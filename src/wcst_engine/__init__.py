"""Top-level package for ``wcst_engine``.

The package administers and scores the Wisconsin Card Sorting Test:

1. :func:`~wcst_engine.core.state.initial_state` builds a seeded 128-card deck,
2. :func:`~wcst_engine.core.classifier.evaluate_selection` scores one response
   and returns the next immutable state,
3. :class:`~wcst_engine.session.records.TrialRecord` logs every trial,
4. :func:`~wcst_engine.analysis.summary.compute_session_summary` and
   :mod:`wcst_engine.io` turn the log into indices and CSV files.

Notes
-----
The engine never ends a session on its own. :class:`~wcst_engine.session.runner.WcstSession`
applies a caller-chosen :class:`~wcst_engine.session.runner.TerminationPolicy`.
"""

from ._version import __version__
from .analysis import SessionSummary, compute_session_summary
from .core import (
    KEY_CARDS,
    Card,
    ClassificationResult,
    EngineState,
    InvalidSeedError,
    InvalidSelectionError,
    SeededGenerator,
    build_deck,
    evaluate_selection,
    initial_state,
)
from .io import read_internal_csv, to_internal_csv, to_psytoolkit_csv, write_internal_csv, write_psytoolkit_csv
from .session import SessionConfig, SessionMetadata, TerminationPolicy, TrialRecord, WcstSession

__all__ = [
    "Card",
    "ClassificationResult",
    "EngineState",
    "InvalidSeedError",
    "InvalidSelectionError",
    "KEY_CARDS",
    "SeededGenerator",
    "SessionConfig",
    "SessionMetadata",
    "SessionSummary",
    "TerminationPolicy",
    "TrialRecord",
    "WcstSession",
    "__version__",
    "build_deck",
    "compute_session_summary",
    "evaluate_selection",
    "initial_state",
    "read_internal_csv",
    "to_internal_csv",
    "to_psytoolkit_csv",
    "write_internal_csv",
    "write_psytoolkit_csv",
]
