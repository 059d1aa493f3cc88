"""Output document type definitions."""

from .output_types import (
    DriverEntry,
    MiniSectorEntry,
    PreprocessedCarEntry,
    PreprocessedLapEntry,
    RaceDocument,
    RawLapEntry,
    TimelineEventEntry,
)

__all__ = [
    "DriverEntry",
    "MiniSectorEntry",
    "PreprocessedCarEntry",
    "PreprocessedLapEntry",
    "RaceDocument",
    "RawLapEntry",
    "TimelineEventEntry",
]
