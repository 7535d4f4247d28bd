"""Tests for internal and PsyToolkit CSV export."""

from __future__ import annotations

import dataclasses

import pytest

from wcst_engine.core import KEY_CARDS, Card
from wcst_engine.io import (
    INTERNAL_COLUMNS,
    PSYTOOLKIT_COLUMNS,
    card_id,
    psytoolkit_rows,
    read_internal_csv,
    target_index,
    to_internal_csv,
    to_psytoolkit_csv,
    write_internal_csv,
    write_psytoolkit_csv,
)
from wcst_engine.io.export import escape_field, parse_internal_csv
from wcst_engine.session import SessionMetadata, TerminationPolicy, WcstSession


def _records(n_trials: int = 30, *, participant_id: str = "p01", device_info: str = "pytest"):
    """Administer a short session mixing correct and incorrect responses."""

    metadata = SessionMetadata(
        participant_id=participant_id,
        session_id="s01",
        seed=42,
        device_info=device_info,
        app_version="0.1.0",
    )
    session = WcstSession(metadata, TerminationPolicy(max_trials=n_trials))
    trial = 0
    while not session.finished:
        card = session.current_card
        matching = [
            index
            for index, key_card in enumerate(KEY_CARDS)
            if card.matches(key_card, session.current_rule)
        ]
        key = matching[0] if trial % 6 else (matching[0] + 1) % 4
        session.respond(key, 400.0 + trial * 12.5, timestamp_utc=f"2024-01-01T00:00:{trial % 60:02d}.000Z")
        trial += 1
    return session.records


def test_internal_header_has_29_columns_in_order() -> None:
    """The internal CSV header should list the 29 columns separated by semicolons."""

    text = to_internal_csv(_records(3))
    header = text.split("\n")[0]

    assert len(INTERNAL_COLUMNS) == 29
    assert header == ";".join(INTERNAL_COLUMNS)
    assert header.startswith("participant_id;session_id;trial_index;trial_within_category;deck_color")
    assert header.endswith("timestamp_utc;seed;device_info;app_version")


def test_internal_rows_render_booleans_and_missing_prev_rule() -> None:
    """Booleans should render as true/false and a missing previous rule as empty."""

    records = _records(3)
    lines = to_internal_csv(records).split("\n")
    first = dict(zip(INTERNAL_COLUMNS, lines[1].split(";")))

    assert len(lines) == 4
    assert first["correct"] == "false"
    assert first["prev_rule"] == ""
    assert first["rule_in_force"] == "color"
    assert first["trial_index"] == "0"
    assert first["response_time_ms"] == "400.0"
    assert first["seed"] == "42"
    assert first["deck_color"] == records[0].deck_card.color


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("plain", "plain"),
        ("a;b", '"a;b"'),
        ("a,b", '"a,b"'),
        ('say "hi"', '"say ""hi"""'),
        ("two\nlines", '"two\nlines"'),
        ("two\rlines", '"two\rlines"'),
        (True, "true"),
        (False, "false"),
        (None, ""),
        (3, "3"),
    ],
)
def test_escape_field(value, expected: str) -> None:
    """Fields with delimiters, commas, quotes, or newlines should be quoted."""

    assert escape_field(value) == expected


def test_written_files_start_with_bom(tmp_path) -> None:
    """CSV files should be UTF-8 with a leading byte-order mark."""

    records = _records(5)
    internal = write_internal_csv(records, tmp_path / "nested" / "trials.csv")
    psytoolkit = write_psytoolkit_csv(records, tmp_path / "psy.csv")

    assert internal.read_bytes().startswith(b"\xef\xbb\xbf")
    assert psytoolkit.read_bytes().startswith(b"\xef\xbb\xbf")
    assert internal.read_bytes()[3:].decode("utf-8") == to_internal_csv(records)


def test_internal_csv_roundtrip(tmp_path) -> None:
    """Writing and re-reading the internal schema should recover every field."""

    records = _records(40, participant_id='p;01 "x"', device_info="Linux x86_64|Mozilla/5.0 (X11, Linux)\r\nline")
    path = write_internal_csv(records, tmp_path / "trials.csv")

    loaded = read_internal_csv(path)

    assert loaded == records
    assert any(record.prev_rule == "color" for record in loaded)
    assert loaded[0].prev_rule is None
    assert isinstance(loaded[0].correct, bool)


def test_parse_internal_csv_accepts_text_without_bom() -> None:
    """The parser should accept in-memory text with or without a BOM."""

    records = _records(4)
    text = to_internal_csv(records)

    assert parse_internal_csv(text) == records
    assert parse_internal_csv("\ufeff" + text) == records


def test_read_internal_csv_rejects_missing_columns(tmp_path) -> None:
    """Reading a file without the required columns should fail fast."""

    path = tmp_path / "invalid.csv"
    path.write_text("participant_id;session_id\np;s\n", encoding="utf-8")

    with pytest.raises(ValueError, match="missing required columns"):
        read_internal_csv(path)


def test_read_internal_csv_rejects_bad_boolean(tmp_path) -> None:
    """Unparseable boolean values should report the row."""

    records = _records(2)
    text = to_internal_csv(records).replace(";false;", ";maybe;", 1)
    path = tmp_path / "bad.csv"
    path.write_text(text, encoding="utf-8")

    with pytest.raises(ValueError, match="row 0"):
        read_internal_csv(path)


def test_card_id_spans_1_to_64() -> None:
    """card_id should map the 64 combinations onto 1..64."""

    assert card_id(Card("red", "flower", 1)) == 1
    assert card_id(Card("red", "flower", 4)) == 4
    assert card_id(Card("red", "butterfly", 1)) == 5
    assert card_id(Card("green", "flower", 1)) == 17
    assert card_id(Card("yellow", "leaf", 4)) == 64


def test_target_index_follows_key_card_order() -> None:
    """Targets should be the 1-based key-card position matching under a rule."""

    card = Card("yellow", "flower", 2)

    assert target_index(card, "color") == 3
    assert target_index(card, "shape") == 1
    assert target_index(card, "number") == 2
    assert target_index(card, None) == 0
    assert target_index(Card("blue", "leaf", 4), "color") == 4


def test_psytoolkit_rows_map_record_fields() -> None:
    """PsyToolkit rows should derive status, clicked card, and error flags."""

    records = _records(30)
    rows = psytoolkit_rows(records)

    assert len(rows) == len(records)
    for record, row in zip(records, rows):
        assert tuple(row) == PSYTOOLKIT_COLUMNS
        assert row["card_id"] == card_id(record.deck_card)
        assert row["correct_target"] == target_index(record.deck_card, record.rule_in_force)
        assert row["perseveration_target"] == target_index(record.deck_card, record.prev_rule)
        assert row["trial_in_sequence"] == record.trial_within_category + 1
        assert row["task_name"] == record.rule_in_force
        assert row["status"] == (1 if record.correct else 2)
        assert row["clicked_card"] == record.selected_key_index + 1
        assert row["is_error"] == (0 if record.correct else 1)
        assert row["is_perseveration_error"] == int(record.is_perseverative_error)
        assert row["is_non_perseveration_error"] == int(record.is_non_perseverative_error)
    assert rows[0]["perseveration_target"] == 0
    assert rows[0]["status"] == 2


def test_psytoolkit_csv_header_and_row_count() -> None:
    """The PsyToolkit CSV should have a 14-column header and one line per record."""

    records = _records(6)
    lines = to_psytoolkit_csv(records).split("\n")

    assert lines[0] == ";".join(PSYTOOLKIT_COLUMNS)
    assert len(lines[0].split(";")) == 14
    assert len(lines) == 7


def test_empty_log_exports_header_only() -> None:
    """Exporting no records should produce only the header line."""

    assert to_internal_csv([]) == ";".join(INTERNAL_COLUMNS)
    assert parse_internal_csv(to_internal_csv([])) == ()


def test_roundtrip_preserves_fractional_response_times(tmp_path) -> None:
    """Float response times should survive the CSV round trip unchanged."""

    records = tuple(
        dataclasses.replace(record, response_time_ms=record.response_time_ms + 0.1)
        for record in _records(3)
    )
    path = write_internal_csv(records, tmp_path / "rt.csv")

    assert [record.response_time_ms for record in read_internal_csv(path)] == [
        record.response_time_ms for record in records
    ]
