"""Declarative session configuration.

Presentation settings (language, sound, theme) are deliberately absent; they
belong to whatever front end drives the session.
"""

from __future__ import annotations

import json
import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from wcst_engine._version import __version__
from wcst_engine.core.config_validation import (
    coerce_positive_int,
    validate_allowed_keys,
    validate_required_keys,
)
from wcst_engine.core.rng import normalize_seed

from .records import SessionMetadata
from .runner import TerminationPolicy

SUPPORTED_CONFIG_SUFFIXES: tuple[str, ...] = (".json", ".yaml", ".yml")

_SESSION_KEYS = (
    "participant_id",
    "session_id",
    "seed",
    "max_trials",
    "categories_to_complete",
    "device_info",
    "app_version",
)


def _new_session_id() -> str:
    return uuid.uuid4().hex[:12]


@dataclass(frozen=True, slots=True)
class SessionConfig:
    """Everything needed to start one session.

    Parameters
    ----------
    participant_id : str
        Participant identifier.
    session_id : str, optional
        Session identifier. A random 12-character hex id by default.
    seed : int, optional
        Deck seed.
    max_trials : int, optional
        Trial cap of the termination policy.
    categories_to_complete : int, optional
        Category threshold of the termination policy.
    device_info : str, optional
        Device description copied into every record.
    app_version : str, optional
        Software version copied into every record.
    """

    participant_id: str
    session_id: str = field(default_factory=_new_session_id)
    seed: int = 42
    max_trials: int = 128
    categories_to_complete: int = 6
    device_info: str = ""
    app_version: str = __version__

    def metadata(self) -> SessionMetadata:
        """Return the record metadata for this configuration."""

        return SessionMetadata(
            participant_id=self.participant_id,
            session_id=self.session_id,
            seed=self.seed,
            device_info=self.device_info,
            app_version=self.app_version,
        )

    def policy(self) -> TerminationPolicy:
        """Return the termination policy for this configuration."""

        return TerminationPolicy(
            max_trials=self.max_trials,
            categories_to_complete=self.categories_to_complete,
        )


def session_config_from_mapping(config: Mapping[str, Any]) -> SessionConfig:
    """Parse and validate a session config mapping.

    Raises
    ------
    ValueError
        If keys are unknown or missing, or a value is invalid.
    InvalidSeedError
        If ``seed`` is not a finite integer.
    """

    validate_allowed_keys(config, field_name="session config", allowed_keys=_SESSION_KEYS)
    validate_required_keys(config, field_name="session config", required_keys=("participant_id",))

    participant_id = str(config["participant_id"]).strip()
    if not participant_id:
        raise ValueError("session config participant_id must be non-empty")

    kwargs: dict[str, Any] = {"participant_id": participant_id}
    if config.get("session_id") is not None:
        kwargs["session_id"] = str(config["session_id"])
    if "seed" in config:
        kwargs["seed"] = normalize_seed(config["seed"])
    if "max_trials" in config:
        kwargs["max_trials"] = coerce_positive_int(config["max_trials"], field_name="max_trials")
    if "categories_to_complete" in config:
        kwargs["categories_to_complete"] = coerce_positive_int(
            config["categories_to_complete"],
            field_name="categories_to_complete",
        )
    if "device_info" in config:
        kwargs["device_info"] = str(config["device_info"])
    if "app_version" in config:
        kwargs["app_version"] = str(config["app_version"])
    return SessionConfig(**kwargs)


def load_session_config(path: str | Path) -> SessionConfig:
    """Load a session config from a JSON or YAML file.

    Parameters
    ----------
    path : str | pathlib.Path
        Config file with suffix ``.json``, ``.yaml`` or ``.yml``.

    Returns
    -------
    SessionConfig
        Parsed configuration.

    Raises
    ------
    ValueError
        If the file is empty, unparseable, not a mapping, or holds invalid
        session settings. Messages name the offending file.
    ImportError
        If a YAML file is given and PyYAML is not installed.
    """

    config_path = Path(path)
    raw = _read_session_file(config_path)
    if raw is None:
        raise ValueError(f"session config {config_path} is empty")
    if not isinstance(raw, Mapping):
        raise ValueError(
            f"session config {config_path} must be a mapping of settings, got {type(raw).__name__}"
        )
    try:
        return session_config_from_mapping(raw)
    except ValueError as exc:
        # Re-raise with the same type so InvalidSeedError survives.
        raise type(exc)(f"session config {config_path}: {exc}") from exc


def _read_session_file(config_path: Path) -> Any:
    suffix = config_path.suffix.lower()
    if suffix not in SUPPORTED_CONFIG_SUFFIXES:
        supported = ", ".join(SUPPORTED_CONFIG_SUFFIXES)
        raise ValueError(
            f"unsupported config file extension {suffix!r} for {config_path}; expected one of {supported}"
        )

    text = config_path.read_text(encoding="utf-8")
    if not text.strip():
        return None

    if suffix == ".json":
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise ValueError(f"session config {config_path} is not valid JSON: {exc}") from exc

    try:
        import yaml
    except ImportError as exc:  # pragma: no cover - exercised only without pyyaml
        raise ImportError(
            "YAML session configs require PyYAML. Install with `pip install wcst-engine[yaml]`."
        ) from exc
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ValueError(f"session config {config_path} is not valid YAML: {exc}") from exc


__all__ = [
    "SUPPORTED_CONFIG_SUFFIXES",
    "SessionConfig",
    "load_session_config",
    "session_config_from_mapping",
]
