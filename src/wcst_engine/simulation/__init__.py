"""Simulated respondents and synthetic session runs."""

from .probabilities import normalize_distribution, sample_key
from .responders import (
    KEY_INDICES,
    RandomResponder,
    Responder,
    RuleSwitchingResponder,
    create_responder,
)
from .simulate import SIMULATION_EPOCH, simulate_records, simulate_session

__all__ = [
    "KEY_INDICES",
    "RandomResponder",
    "Responder",
    "RuleSwitchingResponder",
    "SIMULATION_EPOCH",
    "create_responder",
    "normalize_distribution",
    "sample_key",
    "simulate_records",
    "simulate_session",
]
