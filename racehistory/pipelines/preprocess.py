"""
Preprocessing pipeline orchestration.

One CSV export runs through: row parsing -> grouping by car -> best-time
stamping -> ranking -> timeline. A batch runs every file independently; a file
that cannot be read or written is recorded and the batch moves on.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from tqdm import tqdm

from racehistory.extractors.lap_rows import CsvFormatError, ParsedLap, read_lap_rows
from racehistory.models.car import Car
from racehistory.models.timeline import TimelineEvent
from racehistory.pipelines.aggregation import group_laps_by_car
from racehistory.pipelines.best_times import apply_best_times
from racehistory.pipelines.output import create_output
from racehistory.pipelines.positions import rank_cars
from racehistory.pipelines.timeline import (
    calc_time_limit,
    calc_timeline_events,
    status_disagreements,
)
from racehistory.types.output_types import RaceDocument
from racehistory.utils.constants import CSV_DELIMITER, CSV_ENCODING
from racehistory.utils.file_operations import atomic_json_write
from racehistory.utils.schema_validation import OutputValidationError, validate_race_document

logger = logging.getLogger(__name__)


@dataclass
class PreprocessResult:
    """Everything the output layer needs from one export."""

    parsed: list[ParsedLap]
    """Rows in export order, untouched by the ranking pass"""
    cars: list[Car]
    time_limit: int
    events: list[TimelineEvent]


def build_cars(parsed: list[ParsedLap]) -> list[Car]:
    """Group, best-stamp and rank."""
    cars = group_laps_by_car(parsed)
    apply_best_times(cars)
    rank_cars(cars)
    return cars


def preprocess_csv(csv_text: str, delimiter: str = CSV_DELIMITER) -> PreprocessResult:
    """Run the full pipeline on one export's text."""
    parsed = read_lap_rows(csv_text, delimiter=delimiter)
    cars = build_cars(parsed)
    time_limit = calc_time_limit(cars)
    events = calc_timeline_events(time_limit, cars)

    mismatches = status_disagreements(cars, time_limit)
    if mismatches:
        logger.debug(
            f"{len(mismatches)} cars have a status that differs from their timeline finish: "
            + ", ".join(f"#{num} {status.label}/{finish.label}" for num, status, finish in mismatches)
        )

    logger.info(f"Read {len(cars)} cars ({len(parsed)} laps) from CSV")
    return PreprocessResult(parsed=parsed, cars=cars, time_limit=time_limit, events=events)


def default_output_path(input_path: Path) -> Path:
    """input.csv -> input.json next to it."""
    return Path(input_path).with_suffix(".json")


def process_file(
    input_path: Path,
    output_path: Path | None = None,
    event_names: dict[str, str] | None = None,
    delimiter: str = CSV_DELIMITER,
    encoding: str = CSV_ENCODING,
    validate: bool = True,
    create_backup: bool = False,
    indent: int = 2,
) -> RaceDocument:
    """
    Preprocess one export file and write its race document.

    The event id is the input file stem.

    Raises:
        FileNotFoundError / OSError / UnicodeDecodeError: Input cannot be read
        CsvFormatError: Input is not tokenizable as CSV
        OutputValidationError: Shaped document fails schema validation
        IOError: Output cannot be written
    """
    input_path = Path(input_path)
    output_path = Path(output_path) if output_path else default_output_path(input_path)

    csv_text = input_path.read_text(encoding=encoding)
    result = preprocess_csv(csv_text, delimiter=delimiter)

    document = create_output(
        input_path.stem, result.parsed, result.cars, result.events, event_names=event_names
    )
    if validate:
        validate_race_document(document, name=input_path.name)

    atomic_json_write(output_path, document, create_backup=create_backup, indent=indent)
    logger.info(f"Wrote JSON to {output_path}")
    return document


@dataclass
class BatchReport:
    written: dict[Path, Path] = field(default_factory=dict)
    """input -> output for every file that succeeded"""
    failed: dict[Path, str] = field(default_factory=dict)
    """input -> error message for every file that did not"""

    @property
    def ok(self) -> bool:
        return not self.failed


def collect_inputs(input_path: Path, pattern: str = "*.csv") -> list[Path]:
    """A file yields itself; a directory yields its matching files, sorted."""
    input_path = Path(input_path)
    if input_path.is_dir():
        return sorted(p for p in input_path.glob(pattern) if p.is_file())
    return [input_path]


def process_batch(
    inputs: list[Path],
    output_path: Path | None = None,
    show_progress: bool = False,
    **options,
) -> BatchReport:
    """
    Preprocess several exports, isolating failures per file.

    Args:
        inputs: Export files
        output_path: Explicit output file; only honored for a single input
        show_progress: Show a tqdm progress bar
        **options: Forwarded to process_file

    Returns:
        BatchReport listing written and failed files
    """
    report = BatchReport()
    if output_path is not None and len(inputs) > 1:
        raise ValueError("An explicit output path needs exactly one input file")

    for path in tqdm(inputs, desc="Preprocessing", disable=not show_progress):
        try:
            target = output_path or default_output_path(path)
            process_file(path, output_path=target, **options)
            report.written[path] = target
        except (OSError, UnicodeDecodeError, CsvFormatError, OutputValidationError) as e:
            logger.error(f"Failed to process {path}: {e}")
            report.failed[path] = str(e)

    logger.info(f"Processed {len(report.written)} files, {len(report.failed)} failed")
    return report
