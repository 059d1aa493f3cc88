"""
Car aggregate and its metadata.

A Car owns the laps of one car number plus the team/class information taken
from the first row the export shows for that number.
"""

from dataclasses import dataclass, field
from enum import Enum

from racehistory.models.lap import LapRecord
from racehistory.utils.constants import DEFAULT_START_POSITION


class RaceClass(Enum):
    """Race classes seen in the timing exports, valued by their CSV label."""

    NONE = "None"
    HYPERCAR = "HYPERCAR"
    LMP1 = "LMP1"
    LMP2 = "LMP2"
    LMGTE_PRO = "LMGTE Pro"
    LMGTE_AM = "LMGTE Am"
    LMGT3 = "LMGT3"
    INNOVATIVE_CAR = "INNOVATIVE CAR"

    @property
    def label(self) -> str:
        return self.value

    @classmethod
    def from_label(cls, label: str) -> "RaceClass | None":
        """Look up a class by its exact (case-sensitive) CSV label."""
        try:
            return cls(label)
        except ValueError:
            return None

    def hex_color(self, season: int) -> str:
        """Short hex color used for the class in charts."""
        if self is RaceClass.LMGT3:
            # GT3 took over the GTE Pro color from 2025
            return "#060" if season > 2024 else "#f60"
        return _CLASS_COLORS[self]


_CLASS_COLORS = {
    RaceClass.NONE: "#000",
    RaceClass.HYPERCAR: "#f00",
    RaceClass.LMP1: "#f00",
    RaceClass.LMP2: "#00f",
    RaceClass.LMGTE_PRO: "#060",
    RaceClass.LMGTE_AM: "#f60",
    RaceClass.INNOVATIVE_CAR: "#00f",
}


class CarStatus(Enum):
    PRE_RACE = "Pre-Race"
    RACING = "Racing"
    CHECKERED = "Checkered"
    RETIRED = "Retired"

    @property
    def label(self) -> str:
        return self.value


@dataclass(frozen=True)
class CarMetadata:
    race_class: RaceClass
    group: str
    team: str
    manufacturer: str


@dataclass(frozen=True)
class Driver:
    name: str
    is_current: bool = False
    """Set once for the first driver seen for the car, never reassigned"""


def find_current_driver(drivers: list[Driver]) -> Driver | None:
    """Return the driver flagged as current, or None."""
    return next((driver for driver in drivers if driver.is_current), None)


@dataclass
class Car:
    car_number: str
    drivers: list[Driver]
    metadata: CarMetadata
    start_position: int = DEFAULT_START_POSITION
    laps: list[LapRecord] = field(default_factory=list)
    status: CarStatus = CarStatus.PRE_RACE

    def has_retired(self) -> bool:
        return self.status is CarStatus.RETIRED

    def final_lap(self) -> LapRecord | None:
        """Last lap in the car's lap list (highest lap number once sorted)."""
        return self.laps[-1] if self.laps else None

    def lap(self, lap_number: int) -> LapRecord | None:
        """First lap record with the given number, if any."""
        return next((lap for lap in self.laps if lap.lap_number == lap_number), None)

    def __repr__(self):
        return f"Car({self.car_number}, {self.metadata.team}, {len(self.laps)} laps)"
