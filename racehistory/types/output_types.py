"""Type definitions for the preprocessed race document."""

from typing import Any, NotRequired, TypedDict

# Keys follow the viewer's field names; records with a "class" key use the
# functional TypedDict form.


class MiniSectorEntry(TypedDict):
    time: str
    elapsed: str
    best: NotRequired[str]


RawLapEntry = TypedDict(
    "RawLapEntry",
    {
        "carNumber": str,
        "driverNumber": int,
        "lapNumber": int,
        "lapTime": str,
        "lapImprovement": int,
        "crossingFinishLineInPit": str,
        "s1": str,
        "s1Improvement": int,
        "s2": str,
        "s2Improvement": int,
        "s3": str,
        "s3Improvement": int,
        "kph": int | float,
        "elapsed": str,
        "hour": str,
        "topSpeed": str,
        "driverName": str,
        "pitTime": str,
        "class": str,
        "group": str,
        "team": str,
        "manufacturer": str,
        "miniSectors": NotRequired[dict[str, MiniSectorEntry]],
    },
)


class DriverEntry(TypedDict):
    name: str
    isCurrentDriver: bool


class PreprocessedLapEntry(TypedDict):
    carNumber: str
    driver: str
    lap: int
    position: int | None
    time: str
    best: str
    sector_1: str
    sector_2: str
    sector_3: str
    s1_best: str
    s2_best: str
    s3_best: str
    elapsed: str
    miniSectors: NotRequired[dict[str, MiniSectorEntry]]


PreprocessedCarEntry = TypedDict(
    "PreprocessedCarEntry",
    {
        "carNumber": str,
        "drivers": list[DriverEntry],
        "class": str,
        "group": str,
        "team": str,
        "manufacturer": str,
        "startPosition": int,
        "laps": list[PreprocessedLapEntry],
    },
)


class TimelineEventEntry(TypedDict):
    event_time: str
    event_type: str | dict[str, Any]


class RaceDocument(TypedDict):
    name: str
    laps: list[RawLapEntry]
    preprocessed: list[PreprocessedCarEntry]
    timeline_events: list[TimelineEventEntry]
