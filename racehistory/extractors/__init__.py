"""Timing export readers."""

from .lap_rows import (
    CsvFormatError,
    ExtraTelemetry,
    ParsedLap,
    RowError,
    parse_row,
    read_lap_rows,
)

__all__ = [
    "CsvFormatError",
    "ExtraTelemetry",
    "ParsedLap",
    "RowError",
    "parse_row",
    "read_lap_rows",
]
