"""Domain records for laps, cars, drivers and timeline events."""

from .car import Car, CarMetadata, CarStatus, Driver, RaceClass, find_current_driver
from .lap import CheckpointTiming, LapRecord
from .timeline import (
    CarEvent,
    CarEventType,
    Checkered,
    EventType,
    LapCompleted,
    RaceStart,
    Retirement,
    TimelineEvent,
)

__all__ = [
    "Car",
    "CarEvent",
    "CarEventType",
    "CarMetadata",
    "CarStatus",
    "Checkered",
    "CheckpointTiming",
    "Driver",
    "EventType",
    "LapCompleted",
    "LapRecord",
    "RaceClass",
    "RaceStart",
    "Retirement",
    "TimelineEvent",
    "find_current_driver",
]
