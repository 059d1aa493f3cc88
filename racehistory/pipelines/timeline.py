"""
Race timeline synthesis.

Produces one RaceStart, a LapCompleted per lap of every car, and one terminal
event (Retirement or Checkered) per car, ordered by event time.
"""

import logging

from racehistory.models.car import Car, CarStatus
from racehistory.models.timeline import (
    CarEvent,
    Checkered,
    LapCompleted,
    RaceStart,
    Retirement,
    TimelineEvent,
)
from racehistory.utils.constants import MS_PER_HOUR

logger = logging.getLogger(__name__)


def calc_time_limit(cars: list[Car]) -> int:
    """
    Session length: the latest final-lap elapsed time, floored to the hour.

    Returns 0 when no car has a lap.
    """
    final_elapsed = [car.laps[-1].elapsed for car in cars if car.laps]
    if not final_elapsed:
        return 0
    return (max(final_elapsed) // MS_PER_HOUR) * MS_PER_HOUR


def classify_finish(car: Car, time_limit: int) -> CarStatus | None:
    """Retired if the car's last lap ended before the time limit, else Checkered."""
    final_lap = car.final_lap()
    if final_lap is None:
        return None
    return CarStatus.RETIRED if final_lap.elapsed < time_limit else CarStatus.CHECKERED


def calc_timeline_events(time_limit: int, cars: list[Car]) -> list[TimelineEvent]:
    """
    Build the time-ordered race event stream.

    Args:
        time_limit: Session length in ms, see calc_time_limit
        cars: Cars with laps sorted by lap number

    Returns:
        Events sorted ascending by event_time. Events at the same time keep
        generation order: race start, lap completions by car, terminal events.
    """
    events = [TimelineEvent(event_time=0, event_type=RaceStart())]

    for car in cars:
        for lap in car.laps:
            events.append(
                TimelineEvent(
                    event_time=lap.elapsed,
                    event_type=CarEvent(car.car_number, LapCompleted(lap.lap_number)),
                )
            )

    for car in cars:
        final_lap = car.final_lap()
        if final_lap is None:
            continue
        kind = Retirement() if final_lap.elapsed < time_limit else Checkered()
        events.append(
            TimelineEvent(event_time=final_lap.elapsed, event_type=CarEvent(car.car_number, kind))
        )

    return sorted(events, key=lambda event: event.event_time)


def status_disagreements(
    cars: list[Car], time_limit: int
) -> list[tuple[str, CarStatus, CarStatus]]:
    """
    List cars whose status differs from the timeline's finish classification.

    Car.status and the terminal timeline event are computed independently;
    this reports the gap instead of reconciling it.

    Returns:
        (car_number, car.status, classified status) for every mismatch
    """
    mismatches = []
    for car in cars:
        classified = classify_finish(car, time_limit)
        if classified is not None and classified is not car.status:
            mismatches.append((car.car_number, car.status, classified))
    return mismatches
