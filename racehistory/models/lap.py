"""Lap-level timing records."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CheckpointTiming:
    """Timing at one checkpoint (mini-sector) for a single lap."""

    time: int = 0
    elapsed: int = 0
    best: int = 0
    """Car's best time through this checkpoint as of this lap (0 if none yet)"""


@dataclass
class LapRecord:
    """
    One completed lap for one car.

    All times are integer milliseconds. Freshly parsed records carry their own
    lap and sector times in the best fields; the best-time pass stamps copies
    with the running minimums. ``position`` stays None until the ranking pass.
    """

    car_number: str
    driver: str
    lap_number: int
    time: int
    best: int
    sector_1: int
    sector_2: int
    sector_3: int
    s1_best: int
    s2_best: int
    s3_best: int
    elapsed: int
    position: int | None = None
    pit_time: int | None = None
    checkpoints: dict[str, CheckpointTiming] | None = None
