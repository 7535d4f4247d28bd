"""Run complete synthetic sessions with a simulated responder."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

import numpy as np

from wcst_engine.core.cards import Card
from wcst_engine.session.config import SessionConfig
from wcst_engine.session.records import TrialRecord, utc_timestamp
from wcst_engine.session.runner import WcstSession

from .probabilities import normalize_distribution, sample_key
from .responders import KEY_INDICES, Responder

logger = logging.getLogger(__name__)

SIMULATION_EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)


def simulate_session(
    config: SessionConfig,
    responder: Responder,
    *,
    response_seed: int | None = None,
    rt_mean_ms: float = 1200.0,
    rt_sd_ms: float = 400.0,
) -> WcstSession:
    """Administer one full session to ``responder``.

    Parameters
    ----------
    config : SessionConfig
        Session identifiers, deck seed and termination limits.
    responder : Responder
        Simulated participant.
    response_seed : int | None, optional
        Seed for the NumPy generator driving choices and response times.
        Defaults to ``config.seed`` so a config alone fixes the whole session.
    rt_mean_ms, rt_sd_ms : float, optional
        Mean and standard deviation of the log-normal response times.

    Returns
    -------
    WcstSession
        Finished session holding the trial log.

    Raises
    ------
    ValueError
        If the response-time parameters are not positive.

    Notes
    -----
    Timestamps advance from a fixed epoch by the cumulative response time, so
    two runs with the same seeds produce identical logs.
    """

    if rt_mean_ms <= 0.0 or rt_sd_ms <= 0.0:
        raise ValueError("rt_mean_ms and rt_sd_ms must be > 0")

    rng = np.random.default_rng(config.seed if response_seed is None else response_seed)
    sigma = float(np.sqrt(np.log1p((rt_sd_ms / rt_mean_ms) ** 2)))
    mu = float(np.log(rt_mean_ms) - 0.5 * sigma**2)

    session = WcstSession(config.metadata(), config.policy())
    responder.start_session()
    clock = SIMULATION_EPOCH

    while not session.finished:
        card = session.current_card
        key_index = _choose(responder, card, rng)
        response_time_ms = round(float(rng.lognormal(mean=mu, sigma=sigma)), 3)
        clock = clock + timedelta(milliseconds=response_time_ms)
        record = session.respond(key_index, response_time_ms, timestamp_utc=utc_timestamp(clock))
        responder.update(card, key_index, record.correct, rng=rng)

    logger.debug(
        "simulated session %s: %d trials, %d categories",
        config.session_id,
        len(session.records),
        session.state.categories_completed,
    )
    return session


def simulate_records(
    config: SessionConfig,
    responder: Responder,
    **kwargs: float | int | None,
) -> tuple[TrialRecord, ...]:
    """Convenience wrapper returning only the trial log of :func:`simulate_session`."""

    return simulate_session(config, responder, **kwargs).records


def _choose(responder: Responder, card: Card, rng: np.random.Generator) -> int:
    distribution = normalize_distribution(responder.action_distribution(card), KEY_INDICES)
    return sample_key(distribution, rng)


__all__ = ["SIMULATION_EPOCH", "simulate_records", "simulate_session"]
