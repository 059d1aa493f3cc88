"""
Progressive best-time tracking.

Each car's laps are folded left to right through an immutable BestTimes
accumulator. A lap is stamped with the car's bests as of and including that
lap. Zero or missing times never set or lower a best.
"""

import itertools
from dataclasses import dataclass, field, replace

from racehistory.models.car import Car
from racehistory.models.lap import CheckpointTiming, LapRecord


def _improve(best: int | None, candidate: int | None) -> int | None:
    if candidate is None or candidate <= 0:
        return best
    if best is None:
        return candidate
    return min(best, candidate)


@dataclass(frozen=True)
class BestTimes:
    """Running minimums for one car."""

    lap: int | None = None
    sector_1: int | None = None
    sector_2: int | None = None
    sector_3: int | None = None
    checkpoints: dict[str, int] = field(default_factory=dict)

    def observe(self, lap: LapRecord) -> "BestTimes":
        """Return the bests after taking ``lap`` into account."""
        checkpoints = dict(self.checkpoints)
        for checkpoint_id, timing in (lap.checkpoints or {}).items():
            improved = _improve(checkpoints.get(checkpoint_id), timing.time)
            if improved is not None:
                checkpoints[checkpoint_id] = improved

        return BestTimes(
            lap=_improve(self.lap, lap.time),
            sector_1=_improve(self.sector_1, lap.sector_1),
            sector_2=_improve(self.sector_2, lap.sector_2),
            sector_3=_improve(self.sector_3, lap.sector_3),
            checkpoints=checkpoints,
        )

    def stamp(self, lap: LapRecord) -> LapRecord:
        """Copy of ``lap`` carrying these bests (0 where none is established)."""
        checkpoints = None
        if lap.checkpoints is not None:
            checkpoints = {
                checkpoint_id: CheckpointTiming(
                    time=timing.time,
                    elapsed=timing.elapsed,
                    best=self.checkpoints.get(checkpoint_id, 0),
                )
                for checkpoint_id, timing in lap.checkpoints.items()
            }

        return replace(
            lap,
            best=self.lap or 0,
            s1_best=self.sector_1 or 0,
            s2_best=self.sector_2 or 0,
            s3_best=self.sector_3 or 0,
            checkpoints=checkpoints,
        )


def stamp_best_times(laps: list[LapRecord]) -> list[LapRecord]:
    """
    Stamp one car's laps with progressive bests.

    Args:
        laps: All laps of a single car, in any order

    Returns:
        New lap records sorted by lap number, each carrying the running best
        lap/sector/checkpoint times up to and including itself.
    """
    ordered = sorted(laps, key=lambda lap: lap.lap_number)
    running = itertools.accumulate(ordered, BestTimes.observe, initial=BestTimes())
    next(running)  # drop the empty seed
    return [bests.stamp(lap) for bests, lap in zip(running, ordered)]


def apply_best_times(cars: list[Car]) -> list[Car]:
    """Replace every car's laps with sorted, best-stamped copies."""
    for car in cars:
        car.laps = stamp_best_times(car.laps)
    return cars
