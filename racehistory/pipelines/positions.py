"""
Grid and running-order ranking across all cars.

Cars are ordered by cumulative elapsed time. Equal elapsed times keep the
cars' first-appearance order (stable sort); there is no secondary key.
"""

import logging

import numpy as np

from racehistory.models.car import Car
from racehistory.models.lap import LapRecord
from racehistory.utils.constants import POSITION_BASE

logger = logging.getLogger(__name__)


def _stable_order(elapsed: list[int]) -> np.ndarray:
    return np.argsort(np.asarray(elapsed, dtype=np.int64), kind="stable")


def assign_start_positions(cars: list[Car]) -> None:
    """
    Derive the starting grid from lap-1 elapsed times.

    Cars without a lap 1 keep whatever start position they already have.
    """
    entries = [(car, car.lap(1)) for car in cars]
    entries = [(car, lap) for car, lap in entries if lap is not None]
    if not entries:
        return

    order = _stable_order([lap.elapsed for _, lap in entries])
    for rank, entry_index in enumerate(order):
        car, _ = entries[entry_index]
        car.start_position = POSITION_BASE + rank


def assign_lap_positions(cars: list[Car]) -> None:
    """Set each lap's position from the order of elapsed times at that lap number."""
    # First record wins when a car repeats a lap number
    by_lap_number: list[dict[int, LapRecord]] = []
    for car in cars:
        lookup: dict[int, LapRecord] = {}
        for lap in car.laps:
            lookup.setdefault(lap.lap_number, lap)
        by_lap_number.append(lookup)

    max_lap = max((lap_number for lookup in by_lap_number for lap_number in lookup), default=0)

    for lap_number in range(1, max_lap + 1):
        present = [lookup[lap_number] for lookup in by_lap_number if lap_number in lookup]
        if not present:
            continue

        order = _stable_order([lap.elapsed for lap in present])
        for rank, lap_index in enumerate(order):
            present[lap_index].position = POSITION_BASE + rank

    logger.debug(f"Ranked {len(cars)} cars over {max_lap} laps")


def rank_cars(cars: list[Car]) -> list[Car]:
    """Assign starting grid and per-lap positions in place."""
    if not cars:
        return cars
    assign_start_positions(cars)
    assign_lap_positions(cars)
    return cars
