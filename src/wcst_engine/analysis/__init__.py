"""Session-level scoring of WCST trial logs."""

from .summary import SessionSummary, compute_session_summary, learning_to_learn_index, summary_to_dict

__all__ = [
    "SessionSummary",
    "compute_session_summary",
    "learning_to_learn_index",
    "summary_to_dict",
]
