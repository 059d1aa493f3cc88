"""Race timeline events."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Retirement:
    pass


@dataclass(frozen=True)
class Checkered:
    pass


@dataclass(frozen=True)
class LapCompleted:
    lap_number: int


CarEventType = Retirement | Checkered | LapCompleted


@dataclass(frozen=True)
class RaceStart:
    pass


@dataclass(frozen=True)
class CarEvent:
    car_number: str
    kind: CarEventType


EventType = RaceStart | CarEvent


@dataclass(frozen=True)
class TimelineEvent:
    event_time: int
    """Milliseconds since the start of the session"""
    event_type: EventType
