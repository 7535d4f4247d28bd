"""CSV export of trial logs.

Two semicolon-delimited schemas are supported:

- the internal schema, one column per :class:`TrialRecord` field (29 columns),
- a 14-column schema compatible with PsyToolkit WCST analysis scripts.

Files are written as UTF-8 with a leading BOM so spreadsheet software detects
the encoding. The ``to_*_csv`` helpers return the text without a BOM.

A field is quoted when it contains a semicolon, comma, double quote or line
break. Carriage returns are quoted as well, so such fields survive
:func:`read_internal_csv` unchanged.
"""

from __future__ import annotations

import csv
import io
import logging
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any

from wcst_engine.core.cards import COLORS, KEY_CARDS, NUMBERS, RULES, SHAPES, Card
from wcst_engine.session.records import TrialRecord

logger = logging.getLogger(__name__)

DELIMITER = ";"
LINE_TERMINATOR = "\n"
FILE_ENCODING = "utf-8-sig"

INTERNAL_COLUMNS: tuple[str, ...] = (
    "participant_id",
    "session_id",
    "trial_index",
    "trial_within_category",
    "deck_color",
    "deck_shape",
    "deck_number",
    "selected_key_index",
    "correct",
    "is_perseverative_response",
    "is_perseverative_error",
    "is_non_perseverative_error",
    "is_conceptual_response",
    "set_maintenance_error",
    "rule_in_force",
    "prev_rule",
    "color_match",
    "shape_match",
    "number_match",
    "no_attribute_match",
    "categories_completed",
    "consecutive_correct",
    "is_shift_trial",
    "category_index",
    "response_time_ms",
    "timestamp_utc",
    "seed",
    "device_info",
    "app_version",
)

PSYTOOLKIT_COLUMNS: tuple[str, ...] = (
    "card_id",
    "correct_target",
    "perseveration_target",
    "trial_in_sequence",
    "task_name",
    "shape_label",
    "symbol_count",
    "color_label",
    "reaction_time_ms",
    "status",
    "clicked_card",
    "is_error",
    "is_perseveration_error",
    "is_non_perseveration_error",
)

_BOOL_COLUMNS = frozenset(
    (
        "correct",
        "is_perseverative_response",
        "is_perseverative_error",
        "is_non_perseverative_error",
        "is_conceptual_response",
        "set_maintenance_error",
        "color_match",
        "shape_match",
        "number_match",
        "no_attribute_match",
        "is_shift_trial",
    )
)

_INT_COLUMNS = frozenset(
    (
        "trial_index",
        "trial_within_category",
        "selected_key_index",
        "categories_completed",
        "consecutive_correct",
        "category_index",
        "seed",
    )
)

_SPECIAL_CHARACTERS = (";", ",", '"', "\n", "\r")


def internal_rows(records: Iterable[TrialRecord]) -> list[dict[str, Any]]:
    """Flatten records into mappings keyed by :data:`INTERNAL_COLUMNS`."""

    rows: list[dict[str, Any]] = []
    for record in records:
        rows.append(
            {
                "participant_id": record.participant_id,
                "session_id": record.session_id,
                "trial_index": int(record.trial_index),
                "trial_within_category": int(record.trial_within_category),
                "deck_color": record.deck_card.color,
                "deck_shape": record.deck_card.shape,
                "deck_number": int(record.deck_card.number),
                "selected_key_index": int(record.selected_key_index),
                "correct": bool(record.correct),
                "is_perseverative_response": bool(record.is_perseverative_response),
                "is_perseverative_error": bool(record.is_perseverative_error),
                "is_non_perseverative_error": bool(record.is_non_perseverative_error),
                "is_conceptual_response": bool(record.is_conceptual_response),
                "set_maintenance_error": bool(record.set_maintenance_error),
                "rule_in_force": record.rule_in_force,
                "prev_rule": record.prev_rule,
                "color_match": bool(record.color_match),
                "shape_match": bool(record.shape_match),
                "number_match": bool(record.number_match),
                "no_attribute_match": bool(record.no_attribute_match),
                "categories_completed": int(record.categories_completed),
                "consecutive_correct": int(record.consecutive_correct),
                "is_shift_trial": bool(record.is_shift_trial),
                "category_index": int(record.category_index),
                "response_time_ms": float(record.response_time_ms),
                "timestamp_utc": record.timestamp_utc,
                "seed": int(record.seed),
                "device_info": record.device_info,
                "app_version": record.app_version,
            }
        )
    return rows


def psytoolkit_rows(records: Iterable[TrialRecord]) -> list[dict[str, Any]]:
    """Flatten records into mappings keyed by :data:`PSYTOOLKIT_COLUMNS`."""

    rows: list[dict[str, Any]] = []
    for record in records:
        card = record.deck_card
        rows.append(
            {
                "card_id": card_id(card),
                "correct_target": target_index(card, record.rule_in_force),
                "perseveration_target": target_index(card, record.prev_rule),
                "trial_in_sequence": int(record.trial_within_category) + 1,
                "task_name": record.rule_in_force,
                "shape_label": card.shape,
                "symbol_count": int(card.number),
                "color_label": card.color,
                "reaction_time_ms": float(record.response_time_ms),
                "status": 1 if record.correct else 2,
                "clicked_card": int(record.selected_key_index) + 1,
                "is_error": 0 if record.correct else 1,
                "is_perseveration_error": 1 if record.is_perseverative_error else 0,
                "is_non_perseveration_error": 1 if record.is_non_perseverative_error else 0,
            }
        )
    return rows


def card_id(card: Card) -> int:
    """Return the 1-based PsyToolkit card identifier in ``1..64``."""

    return (
        COLORS.index(card.color) * len(SHAPES) * len(NUMBERS)
        + SHAPES.index(card.shape) * len(NUMBERS)
        + NUMBERS.index(card.number)
        + 1
    )


def target_index(card: Card, rule: str | None) -> int:
    """Return the 1-based key-card position matching ``card`` under ``rule``.

    The key cards cover every color, shape and number exactly once, so the
    target is the position of the key card sharing the attribute. ``0`` is
    returned when ``rule`` is ``None``.
    """

    if rule is None:
        return 0
    if rule not in RULES:
        raise ValueError(f"unknown rule {rule!r}")
    for position, key_card in enumerate(KEY_CARDS, start=1):
        if card.matches(key_card, rule):
            return position
    return 0


def to_internal_csv(records: Iterable[TrialRecord]) -> str:
    """Render records in the internal schema as CSV text."""

    return _render(INTERNAL_COLUMNS, internal_rows(records))


def to_psytoolkit_csv(records: Iterable[TrialRecord]) -> str:
    """Render records in the PsyToolkit-compatible schema as CSV text."""

    return _render(PSYTOOLKIT_COLUMNS, psytoolkit_rows(records))


def write_internal_csv(records: Iterable[TrialRecord], path: str | Path) -> Path:
    """Write records in the internal schema to ``path``.

    Returns
    -------
    pathlib.Path
        Output CSV path.
    """

    return _write_text(to_internal_csv(records), path)


def write_psytoolkit_csv(records: Iterable[TrialRecord], path: str | Path) -> Path:
    """Write records in the PsyToolkit-compatible schema to ``path``."""

    return _write_text(to_psytoolkit_csv(records), path)


def read_internal_csv(path: str | Path) -> tuple[TrialRecord, ...]:
    """Read a file written by :func:`write_internal_csv`.

    Parameters
    ----------
    path : str | pathlib.Path
        Input CSV path. A leading BOM is optional.

    Returns
    -------
    tuple[TrialRecord, ...]
        Parsed records in file order.

    Raises
    ------
    ValueError
        If the header misses columns or a row holds an unparseable value.
    """

    input_path = Path(path)
    with input_path.open("r", encoding=FILE_ENCODING, newline="") as handle:
        return parse_internal_csv(handle.read())


def parse_internal_csv(text: str) -> tuple[TrialRecord, ...]:
    """Parse internal-schema CSV text into records."""

    reader = csv.DictReader(io.StringIO(text.lstrip("\ufeff")), delimiter=DELIMITER)
    _require_columns(reader.fieldnames, required=INTERNAL_COLUMNS)
    return tuple(
        _record_from_row(raw, row_index=index)
        for index, raw in enumerate(reader)
    )


def _format_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def escape_field(value: Any) -> str:
    """Format one value, quoting it when it holds a delimiter, comma, quote or newline."""

    text = _format_value(value)
    if any(character in text for character in _SPECIAL_CHARACTERS):
        return '"' + text.replace('"', '""') + '"'
    return text


def _render(columns: Sequence[str], rows: Sequence[dict[str, Any]]) -> str:
    lines = [DELIMITER.join(columns)]
    for row in rows:
        lines.append(DELIMITER.join(escape_field(row[column]) for column in columns))
    return LINE_TERMINATOR.join(lines)


def _write_text(text: str, path: str | Path) -> Path:
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", encoding=FILE_ENCODING, newline="") as handle:
        handle.write(text)
    logger.debug("wrote %s", output_path)
    return output_path


def _record_from_row(raw: dict[str, Any], *, row_index: int) -> TrialRecord:
    values: dict[str, Any] = {}
    for column in INTERNAL_COLUMNS:
        text = raw.get(column)
        text = "" if text is None else str(text)
        if column in _BOOL_COLUMNS:
            values[column] = _parse_bool(text, field_name=column, row_index=row_index)
        elif column in _INT_COLUMNS:
            values[column] = _parse_int(text, field_name=column, row_index=row_index)
        else:
            values[column] = text

    try:
        deck_card = Card(
            color=values.pop("deck_color"),
            shape=values.pop("deck_shape"),
            number=_parse_int(values.pop("deck_number"), field_name="deck_number", row_index=row_index),
        )
        response_time_ms = float(values.pop("response_time_ms"))
        prev_rule = values.pop("prev_rule") or None
        return TrialRecord(
            deck_card=deck_card,
            response_time_ms=response_time_ms,
            prev_rule=prev_rule,
            **values,
        )
    except ValueError as exc:
        raise ValueError(f"row {row_index}: {exc}") from exc


def _parse_bool(text: str, *, field_name: str, row_index: int) -> bool:
    lowered = text.strip().lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    raise ValueError(f"row {row_index}: {field_name} must be 'true' or 'false', got {text!r}")


def _parse_int(text: str, *, field_name: str, row_index: int) -> int:
    stripped = text.strip()
    if not stripped:
        raise ValueError(f"row {row_index}: {field_name} must be an integer")
    try:
        return int(stripped)
    except ValueError as exc:
        raise ValueError(f"row {row_index}: {field_name} must be an integer, got {text!r}") from exc


def _require_columns(fieldnames: Sequence[str] | None, *, required: tuple[str, ...]) -> None:
    if fieldnames is None:
        raise ValueError("CSV file must include a header row")
    present = set(fieldnames)
    missing = [name for name in required if name not in present]
    if missing:
        raise ValueError(f"CSV file missing required columns: {missing}")


__all__ = [
    "INTERNAL_COLUMNS",
    "PSYTOOLKIT_COLUMNS",
    "card_id",
    "escape_field",
    "internal_rows",
    "parse_internal_csv",
    "psytoolkit_rows",
    "read_internal_csv",
    "target_index",
    "to_internal_csv",
    "to_psytoolkit_csv",
    "write_internal_csv",
    "write_psytoolkit_csv",
]
