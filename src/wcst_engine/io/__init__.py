"""CSV import/export of WCST trial logs."""

from .export import (
    INTERNAL_COLUMNS,
    PSYTOOLKIT_COLUMNS,
    card_id,
    internal_rows,
    parse_internal_csv,
    psytoolkit_rows,
    read_internal_csv,
    target_index,
    to_internal_csv,
    to_psytoolkit_csv,
    write_internal_csv,
    write_psytoolkit_csv,
)

__all__ = [
    "INTERNAL_COLUMNS",
    "PSYTOOLKIT_COLUMNS",
    "card_id",
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
