"""Group parsed laps into cars."""

import logging
from dataclasses import dataclass, field

from racehistory.extractors.lap_rows import ParsedLap
from racehistory.models.car import Car, CarStatus, Driver

logger = logging.getLogger(__name__)


@dataclass
class _CarBucket:
    first_index: int
    rows: list[ParsedLap] = field(default_factory=list)
    driver_names: list[str] = field(default_factory=list)

    def add(self, row: ParsedLap):
        self.rows.append(row)
        if row.lap.driver not in self.driver_names:
            self.driver_names.append(row.lap.driver)


def drivers_from(driver_names: list[str]) -> list[Driver]:
    """Build the driver list, flagging the first-seen driver as current."""
    return [Driver(name=name, is_current=(i == 0)) for i, name in enumerate(driver_names)]


def group_laps_by_car(parsed: list[ParsedLap]) -> list[Car]:
    """
    Group parsed laps by car number.

    Cars come out in order of first appearance in the export, not sorted by
    number. Each car's metadata is taken from its first row; later rows with
    different class/team values are ignored. Laps keep encounter order here;
    the best-time pass sorts them.
    """
    buckets: dict[str, _CarBucket] = {}

    for index, row in enumerate(parsed):
        car_number = row.lap.car_number
        if car_number not in buckets:
            buckets[car_number] = _CarBucket(first_index=index)
        buckets[car_number].add(row)

    cars = []
    for car_number, bucket in sorted(buckets.items(), key=lambda item: item[1].first_index):
        car = Car(
            car_number=car_number,
            drivers=drivers_from(bucket.driver_names),
            metadata=bucket.rows[0].metadata,
            laps=[row.lap for row in bucket.rows],
            status=CarStatus.RACING,
        )
        cars.append(car)

    logger.debug(f"Grouped {len(parsed)} laps into {len(cars)} cars")
    return cars
