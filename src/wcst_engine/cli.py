"""Command-line entry point for simulated WCST sessions."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any, Sequence

from wcst_engine.analysis.summary import summary_to_dict
from wcst_engine.io.export import write_internal_csv, write_psytoolkit_csv
from wcst_engine.session.config import load_session_config
from wcst_engine.simulation.responders import create_responder
from wcst_engine.simulation.simulate import simulate_session

logger = logging.getLogger(__name__)


def run_simulation_cli(argv: Sequence[str] | None = None) -> int:
    """Simulate one session from a JSON or YAML config and export it.

    Parameters
    ----------
    argv : Sequence[str] | None, optional
        CLI argument list. When ``None``, process arguments are used.

    Returns
    -------
    int
        Exit code (`0` on success).
    """

    parser = argparse.ArgumentParser(description="Simulate a WCST session from a JSON or YAML config.")
    parser.add_argument("--config", required=True, help="Path to session JSON or YAML config.")
    parser.add_argument(
        "--responder",
        choices=("random", "rule_switching"),
        default="rule_switching",
        help="Simulated respondent.",
    )
    parser.add_argument("--perseveration", type=float, default=0.0, help="Probability of keeping a rule after an error.")
    parser.add_argument("--lapse", type=float, default=0.0, help="Weight of random choices.")
    parser.add_argument("--response-seed", type=int, default=None, help="Seed for responder choices and RTs.")
    parser.add_argument("--output-dir", default=".", help="Directory for CSV/JSON outputs.")
    parser.add_argument("--prefix", default="wcst", help="Output filename prefix.")
    parser.add_argument(
        "--log-level",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        default="WARNING",
        help="Logging verbosity.",
    )
    args = parser.parse_args(list(argv) if argv is not None else None)

    logging.basicConfig(level=getattr(logging, str(args.log_level)), format="%(levelname)s %(name)s: %(message)s")

    config = load_session_config(args.config)
    responder = create_responder(
        str(args.responder),
        perseveration=float(args.perseveration),
        lapse=float(args.lapse),
    )
    session = simulate_session(config, responder, response_seed=args.response_seed)

    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    prefix = str(args.prefix)

    records = session.records
    trials_path = write_internal_csv(records, output_dir / f"{prefix}_trials.csv")
    psytoolkit_path = write_psytoolkit_csv(records, output_dir / f"{prefix}_psytoolkit.csv")
    summary = session.summary()
    summary_path = _write_json_summary(
        output_dir / f"{prefix}_summary.json",
        {
            "participant_id": config.participant_id,
            "session_id": config.session_id,
            "seed": config.seed,
            **summary_to_dict(summary),
        },
    )
    logger.info("exported %d trials for session %s", len(records), config.session_id)

    print(
        "Simulation complete: "
        f"n_trials={summary.total_trials}, categories_completed={session.state.categories_completed}"
    )
    print(f"Trials CSV: {trials_path}")
    print(f"PsyToolkit CSV: {psytoolkit_path}")
    print(f"Summary JSON: {summary_path}")
    return 0


def _write_json_summary(path: Path, payload: dict[str, Any]) -> Path:
    """Write summary JSON payload to disk."""

    path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
    return path


def main() -> None:
    """Execute the simulation CLI and exit with its return code."""

    raise SystemExit(run_simulation_cli())


if __name__ == "__main__":
    main()


__all__ = ["main", "run_simulation_cli"]
