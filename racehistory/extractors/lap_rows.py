"""
Lap Row Extraction

Decodes the semicolon-delimited timing export into typed lap records.
Bad duration cells degrade to 0; structurally broken rows are dropped with a
warning and the rest of the file is still read.
"""

import io
import logging
import math
from dataclasses import dataclass
from typing import Any, Mapping

import pandas as pd

from racehistory.models.car import CarMetadata, RaceClass
from racehistory.models.lap import CheckpointTiming, LapRecord
from racehistory.utils.constants import CHECKPOINT_IDS, CSV_DELIMITER
from racehistory.utils.duration import parse_duration, parse_duration_or_zero

logger = logging.getLogger(__name__)

# Unknown class labels fall back to the top class
DEFAULT_RACE_CLASS = RaceClass.HYPERCAR


class RowError(ValueError):
    """A CSV record that cannot be turned into a lap."""


class CsvFormatError(ValueError):
    """The export as a whole cannot be tokenized as CSV."""


@dataclass(frozen=True)
class ExtraTelemetry:
    """Row values the pipeline carries through untouched for output shaping."""

    driver_number: int
    lap_improvement: int
    crossing_finish_line_in_pit: str
    s1_improvement: int
    s2_improvement: int
    s3_improvement: int
    kph: float
    hour: str
    top_speed: str | None
    pit_time: int | None
    # Original sector text, so a blank cell can be told apart from "0.000"
    s1_raw: str
    s2_raw: str
    s3_raw: str
    checkpoints_raw: dict[str, tuple[str, str]] | None = None
    """Trimmed (time, elapsed) text per checkpoint, when the row has any"""


@dataclass(frozen=True)
class ParsedLap:
    lap: LapRecord
    metadata: CarMetadata
    extra: ExtraTelemetry


def _cell(record: Mapping[str, Any], name: str) -> str | None:
    """Look up a column by name or by its leading-space alias."""
    for key in (name, f" {name}"):
        value = record.get(key)
        # pandas fills cells missing from short rows with NaN
        if isinstance(value, str):
            return value
    return None


def _required(record: Mapping[str, Any], name: str) -> str:
    value = _cell(record, name)
    if value is None:
        raise RowError(f"missing required column {name}")
    return value


def _to_int(value: str, name: str) -> int:
    try:
        return int(value.strip())
    except ValueError:
        raise RowError(f"{name} is not an integer: {value!r}") from None


def _to_unsigned(value: str, name: str) -> int:
    number = _to_int(value, name)
    if number < 0:
        raise RowError(f"{name} is negative: {value!r}")
    return number


def _optional_int(record: Mapping[str, Any], name: str) -> int:
    value = _cell(record, name)
    if value is None or not value.strip():
        return 0
    return _to_int(value, name)


def _optional_float(record: Mapping[str, Any], name: str) -> float:
    value = _cell(record, name)
    if value is None or not value.strip():
        return 0.0
    try:
        number = float(value)
    except ValueError:
        raise RowError(f"{name} is not a number: {value!r}") from None
    if not math.isfinite(number):
        raise RowError(f"{name} is not a finite number: {value!r}")
    return number


def _race_class(label: str) -> RaceClass:
    race_class = RaceClass.from_label(label)
    if race_class is None:
        logger.debug(f"Unknown class label {label!r}, using {DEFAULT_RACE_CLASS.label}")
        return DEFAULT_RACE_CLASS
    return race_class


def _checkpoint_cells(record: Mapping[str, Any]) -> dict[str, tuple[str, str]] | None:
    """
    Collect trimmed checkpoint cells.

    Returns None unless at least one of the time/elapsed cells across all
    checkpoints holds something other than whitespace.
    """
    cells = {}
    for checkpoint_id in CHECKPOINT_IDS:
        time_text = (_cell(record, f"{checkpoint_id}_time") or "").strip()
        elapsed_text = (_cell(record, f"{checkpoint_id}_elapsed") or "").strip()
        cells[checkpoint_id] = (time_text, elapsed_text)

    if not any(time_text or elapsed_text for time_text, elapsed_text in cells.values()):
        return None
    return cells


def parse_row(record: Mapping[str, Any]) -> ParsedLap:
    """
    Decode one CSV record.

    Args:
        record: Column name -> cell text for one row

    Returns:
        ParsedLap with times in milliseconds. Duration cells that do not parse
        become 0.

    Raises:
        RowError: If a required column is missing or an integer field is not
            an integer.
    """
    car_number = _required(record, "NUMBER")
    driver = _required(record, "DRIVER_NAME")
    driver_number = _to_unsigned(_required(record, "DRIVER_NUMBER"), "DRIVER_NUMBER")
    lap_number = _to_unsigned(_required(record, "LAP_NUMBER"), "LAP_NUMBER")

    s1_raw = _required(record, "S1")
    s2_raw = _required(record, "S2")
    s3_raw = _required(record, "S3")

    time = parse_duration_or_zero(_required(record, "LAP_TIME"))
    sector_1 = parse_duration_or_zero(s1_raw)
    sector_2 = parse_duration_or_zero(s2_raw)
    sector_3 = parse_duration_or_zero(s3_raw)
    elapsed = parse_duration_or_zero(_required(record, "ELAPSED"))

    pit_text = _cell(record, "PIT_TIME")
    pit_time = parse_duration(pit_text) if pit_text else None

    metadata = CarMetadata(
        race_class=_race_class(_required(record, "CLASS")),
        group=_required(record, "GROUP"),
        team=_required(record, "TEAM"),
        manufacturer=_required(record, "MANUFACTURER"),
    )

    checkpoints_raw = _checkpoint_cells(record)
    checkpoints = None
    if checkpoints_raw is not None:
        checkpoints = {
            checkpoint_id: CheckpointTiming(
                time=parse_duration_or_zero(time_text),
                elapsed=parse_duration_or_zero(elapsed_text),
            )
            for checkpoint_id, (time_text, elapsed_text) in checkpoints_raw.items()
        }

    lap = LapRecord(
        car_number=car_number,
        driver=driver,
        lap_number=lap_number,
        time=time,
        best=time,
        sector_1=sector_1,
        sector_2=sector_2,
        sector_3=sector_3,
        s1_best=sector_1,
        s2_best=sector_2,
        s3_best=sector_3,
        elapsed=elapsed,
        pit_time=pit_time,
        checkpoints=checkpoints,
    )

    extra = ExtraTelemetry(
        driver_number=driver_number,
        lap_improvement=_optional_int(record, "LAP_IMPROVEMENT"),
        crossing_finish_line_in_pit=_cell(record, "CROSSING_FINISH_LINE_IN_PIT") or "",
        s1_improvement=_optional_int(record, "S1_IMPROVEMENT"),
        s2_improvement=_optional_int(record, "S2_IMPROVEMENT"),
        s3_improvement=_optional_int(record, "S3_IMPROVEMENT"),
        kph=_optional_float(record, "KPH"),
        hour=_cell(record, "HOUR") or "",
        top_speed=_cell(record, "TOP_SPEED"),
        pit_time=pit_time,
        s1_raw=s1_raw,
        s2_raw=s2_raw,
        s3_raw=s3_raw,
        checkpoints_raw=checkpoints_raw,
    )

    return ParsedLap(lap=lap, metadata=metadata, extra=extra)


def read_lap_rows(csv_text: str, delimiter: str = CSV_DELIMITER) -> list[ParsedLap]:
    """
    Parse a whole timing export.

    Args:
        csv_text: Export contents, header row first
        delimiter: Field separator

    Returns:
        Parsed laps in the order the rows appear. Rows whose field count differs
        from the header, rows missing required cells and rows with non-integer
        or negative lap/driver numbers are skipped.
    """
    if not csv_text.strip():
        return []

    def _skip_bad_line(fields: list[str]) -> None:
        logger.warning(f"Dropping malformed row with {len(fields)} fields: {fields[:4]}")
        return None

    # The header is read as a plain row so its width fixes the field count;
    # longer data rows then reach the bad-line hook instead of becoming an index
    try:
        raw = pd.read_csv(
            io.StringIO(csv_text),
            sep=delimiter,
            header=None,
            dtype=str,
            keep_default_na=False,
            engine="python",
            on_bad_lines=_skip_bad_line,
        )
    except pd.errors.EmptyDataError:
        return []
    except pd.errors.ParserError as e:
        raise CsvFormatError(f"Cannot read timing export: {e}") from e

    df = raw.iloc[1:]
    df.columns = list(raw.iloc[0])

    # Cells missing from short rows come back as NA; real blank cells are ""
    short = df.isna().any(axis=1).to_numpy()

    parsed = []
    for index, record in enumerate(df.to_dict(orient="records")):
        if short[index]:
            present = sum(isinstance(value, str) for value in record.values())
            logger.warning(
                f"Dropping malformed data row {index + 1}: "
                f"{present} fields, expected {len(df.columns)}"
            )
            continue
        try:
            parsed.append(parse_row(record))
        except RowError as e:
            logger.warning(f"Lap parse error in data row {index + 1}: {e}")

    logger.debug(f"Parsed {len(parsed)} of {len(df)} rows")
    return parsed
