"""
Output document shaping.

Turns the preprocessing result into the three-part JSON document read by the
race viewer: raw laps as exported, preprocessed cars, and the timeline.
"""

from racehistory.extractors.lap_rows import ParsedLap
from racehistory.models.car import Car
from racehistory.models.lap import CheckpointTiming, LapRecord
from racehistory.models.timeline import (
    CarEvent,
    Checkered,
    EventType,
    LapCompleted,
    RaceStart,
    Retirement,
    TimelineEvent,
)
from racehistory.types.output_types import (
    MiniSectorEntry,
    PreprocessedCarEntry,
    PreprocessedLapEntry,
    RaceDocument,
    RawLapEntry,
    TimelineEventEntry,
)
from racehistory.utils.duration import format_duration


def map_event_name(event_id: str, event_names: dict[str, str] | None = None) -> str:
    """Display name for an event id; unknown ids are returned unchanged."""
    return (event_names or {}).get(event_id, event_id)


def checkpoint_key(checkpoint_id: str) -> str:
    """JSON key for a checkpoint id ("A7-1" -> "a7_1")."""
    return checkpoint_id.lower().replace("-", "_")


def format_sector_time(raw_text: str, sector_ms: int) -> str:
    """Blank cells stay blank; anything else is re-formatted from its parsed value."""
    if raw_text == "":
        return ""
    return format_duration(sector_ms)


def format_kph(kph: float) -> int | float:
    """Round to one decimal, dropping a trailing .0."""
    rounded = round(kph * 10.0) / 10.0
    if rounded.is_integer():
        return int(rounded)
    return rounded


def format_top_speed(top_speed: str | None) -> str:
    """Drop a trailing .0 from numeric top speeds ("300.0" -> "300")."""
    if not top_speed:
        return ""
    try:
        speed = float(top_speed)
    except ValueError:
        return top_speed
    if speed.is_integer():
        return str(int(speed))
    return top_speed


def _raw_lap(row: ParsedLap) -> RawLapEntry:
    lap, meta, extra = row.lap, row.metadata, row.extra
    entry: RawLapEntry = {
        "carNumber": lap.car_number,
        "driverNumber": extra.driver_number,
        "lapNumber": lap.lap_number,
        "lapTime": format_duration(lap.time),
        "lapImprovement": extra.lap_improvement,
        "crossingFinishLineInPit": extra.crossing_finish_line_in_pit,
        "s1": format_sector_time(extra.s1_raw, lap.sector_1),
        "s1Improvement": extra.s1_improvement,
        "s2": format_sector_time(extra.s2_raw, lap.sector_2),
        "s2Improvement": extra.s2_improvement,
        "s3": format_sector_time(extra.s3_raw, lap.sector_3),
        "s3Improvement": extra.s3_improvement,
        "kph": format_kph(extra.kph),
        "elapsed": format_duration(lap.elapsed),
        "hour": extra.hour,
        "topSpeed": format_top_speed(extra.top_speed),
        "driverName": lap.driver,
        "pitTime": "" if extra.pit_time is None else format_duration(extra.pit_time),
        "class": meta.race_class.label,
        "group": meta.group,
        "team": meta.team,
        "manufacturer": meta.manufacturer,
    }
    if extra.checkpoints_raw is not None:
        entry["miniSectors"] = {
            checkpoint_key(checkpoint_id): {"time": time_text, "elapsed": elapsed_text}
            for checkpoint_id, (time_text, elapsed_text) in extra.checkpoints_raw.items()
        }
    return entry


def _mini_sector(timing: CheckpointTiming) -> MiniSectorEntry:
    return {
        "time": format_duration(timing.time),
        "elapsed": format_duration(timing.elapsed),
        "best": format_duration(timing.best),
    }


def _preprocessed_lap(lap: LapRecord) -> PreprocessedLapEntry:
    entry: PreprocessedLapEntry = {
        "carNumber": lap.car_number,
        "driver": lap.driver,
        "lap": lap.lap_number,
        "position": lap.position,
        "time": format_duration(lap.time),
        "best": format_duration(lap.best),
        "sector_1": format_duration(lap.sector_1),
        "sector_2": format_duration(lap.sector_2),
        "sector_3": format_duration(lap.sector_3),
        "s1_best": format_duration(lap.s1_best),
        "s2_best": format_duration(lap.s2_best),
        "s3_best": format_duration(lap.s3_best),
        "elapsed": format_duration(lap.elapsed),
    }
    if lap.checkpoints is not None:
        entry["miniSectors"] = {
            checkpoint_key(checkpoint_id): _mini_sector(timing)
            for checkpoint_id, timing in lap.checkpoints.items()
        }
    return entry


def _preprocessed_car(car: Car) -> PreprocessedCarEntry:
    return {
        "carNumber": car.car_number,
        "drivers": [
            {"name": driver.name, "isCurrentDriver": driver.is_current} for driver in car.drivers
        ],
        "class": car.metadata.race_class.label,
        "group": car.metadata.group,
        "team": car.metadata.team,
        "manufacturer": car.metadata.manufacturer,
        "startPosition": car.start_position,
        "laps": [_preprocessed_lap(lap) for lap in car.laps],
    }


def event_type_entry(event_type: EventType) -> str | dict:
    """
    Encode an event type as a tagged value.

    RaceStart -> "RaceStart"
    CarEvent  -> {"CarEvent": ["12", "Retirement"]}
                 {"CarEvent": ["12", {"LapCompleted": 3}]}
    """
    if isinstance(event_type, RaceStart):
        return "RaceStart"
    if isinstance(event_type, CarEvent):
        kind = event_type.kind
        if isinstance(kind, LapCompleted):
            payload = {"LapCompleted": kind.lap_number}
        elif isinstance(kind, Retirement):
            payload = "Retirement"
        elif isinstance(kind, Checkered):
            payload = "Checkered"
        else:
            raise TypeError(f"Unknown car event kind: {kind!r}")
        return {"CarEvent": [event_type.car_number, payload]}
    raise TypeError(f"Unknown event type: {event_type!r}")


def _timeline_event(event: TimelineEvent) -> TimelineEventEntry:
    return {
        "event_time": format_duration(event.event_time),
        "event_type": event_type_entry(event.event_type),
    }


def create_output(
    event_name: str,
    parsed: list[ParsedLap],
    cars: list[Car],
    events: list[TimelineEvent],
    event_names: dict[str, str] | None = None,
) -> RaceDocument:
    """
    Build the race document.

    Args:
        event_name: Event id, usually the input file stem
        parsed: Parsed rows in export order
        cars: Ranked, best-stamped cars
        events: Sorted timeline events
        event_names: Event id -> display name table

    Returns:
        JSON-ready dict
    """
    return {
        "name": map_event_name(event_name, event_names),
        "laps": [_raw_lap(row) for row in parsed],
        "preprocessed": [_preprocessed_car(car) for car in cars],
        "timeline_events": [_timeline_event(event) for event in events],
    }
