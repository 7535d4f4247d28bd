"""Tests for the session simulation CLI."""

from __future__ import annotations

import json

import pytest

from wcst_engine.cli import run_simulation_cli
from wcst_engine.io import INTERNAL_COLUMNS, PSYTOOLKIT_COLUMNS, read_internal_csv


def _write_config(tmp_path, **overrides) -> str:
    config = {"participant_id": "p07", "session_id": "cli-01", "seed": 2024, "max_trials": 60}
    config.update(overrides)
    path = tmp_path / "session.json"
    path.write_text(json.dumps(config), encoding="utf-8")
    return str(path)


def test_simulation_cli_writes_outputs(tmp_path, capsys) -> None:
    """The CLI should write trial, PsyToolkit, and summary files."""

    config_path = _write_config(tmp_path)
    output_dir = tmp_path / "out"

    code = run_simulation_cli(
        [
            "--config",
            config_path,
            "--responder",
            "rule_switching",
            "--lapse",
            "0.1",
            "--response-seed",
            "5",
            "--output-dir",
            str(output_dir),
            "--prefix",
            "p07",
        ]
    )
    captured = capsys.readouterr()

    assert code == 0
    assert "Simulation complete" in captured.out
    assert "Trials CSV:" in captured.out
    trials_path = output_dir / "p07_trials.csv"
    psytoolkit_path = output_dir / "p07_psytoolkit.csv"
    summary_path = output_dir / "p07_summary.json"
    assert trials_path.exists()
    assert psytoolkit_path.exists()
    assert summary_path.exists()

    records = read_internal_csv(trials_path)
    assert 0 < len(records) <= 60
    assert {record.participant_id for record in records} == {"p07"}
    assert {record.seed for record in records} == {2024}

    header = trials_path.read_text(encoding="utf-8-sig").split("\n")[0]
    assert header == ";".join(INTERNAL_COLUMNS)
    psytoolkit_lines = psytoolkit_path.read_text(encoding="utf-8-sig").split("\n")
    assert psytoolkit_lines[0] == ";".join(PSYTOOLKIT_COLUMNS)
    assert len(psytoolkit_lines) == len(records) + 1

    summary = json.loads(summary_path.read_text(encoding="utf-8"))
    assert summary["participant_id"] == "p07"
    assert summary["session_id"] == "cli-01"
    assert summary["seed"] == 2024
    assert summary["total_trials"] == len(records)
    assert summary["total_correct"] == sum(record.correct for record in records)


def test_simulation_cli_is_reproducible(tmp_path) -> None:
    """Two runs with the same config and response seed should write identical logs."""

    config_path = _write_config(tmp_path)
    for prefix in ("a", "b"):
        run_simulation_cli(
            [
                "--config",
                config_path,
                "--responder",
                "random",
                "--response-seed",
                "1",
                "--output-dir",
                str(tmp_path),
                "--prefix",
                prefix,
            ]
        )

    assert (tmp_path / "a_trials.csv").read_bytes() == (tmp_path / "b_trials.csv").read_bytes()


def test_simulation_cli_rejects_invalid_config(tmp_path) -> None:
    """Unknown config keys should surface as a ValueError."""

    config_path = _write_config(tmp_path, theme="dark")

    with pytest.raises(ValueError, match="unknown keys"):
        run_simulation_cli(["--config", config_path, "--output-dir", str(tmp_path)])


def test_simulation_cli_rejects_unknown_responder(tmp_path) -> None:
    """argparse should reject unknown responder names."""

    config_path = _write_config(tmp_path)

    with pytest.raises(SystemExit):
        run_simulation_cli(["--config", config_path, "--responder", "oracle"])
