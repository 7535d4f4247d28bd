"""Trial records, session configuration, and the caller-side session loop."""

from .config import SessionConfig, load_session_config, session_config_from_mapping
from .records import SessionMetadata, TrialRecord, build_trial_record, utc_timestamp
from .runner import TerminationPolicy, WcstSession

__all__ = [
    "SessionConfig",
    "SessionMetadata",
    "TerminationPolicy",
    "TrialRecord",
    "WcstSession",
    "build_trial_record",
    "load_session_config",
    "session_config_from_mapping",
    "utc_timestamp",
]
