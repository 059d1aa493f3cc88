"""
Racing-time codec.

Lap, sector and elapsed times travel as text ("23.155", "1:35.365",
"7:06:54.321") in the timing exports and as integer milliseconds everywhere
else in the pipeline.
"""

import math
import re

from racehistory.utils.constants import MS_PER_HOUR, MS_PER_MINUTE, MS_PER_SECOND

# Plain decimal or exponent notation only: no digit-group underscores or padding
_SECONDS_PATTERN = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)
_UNSIGNED_PATTERN = re.compile(r"\d+", re.ASCII)


def _round_half_away(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def _parse_unsigned(part: str) -> int | None:
    if not _UNSIGNED_PATTERN.fullmatch(part):
        return None
    return int(part)


def _parse_seconds(part: str) -> int | None:
    if not _SECONDS_PATTERN.fullmatch(part):
        return None

    millis = float(part) * MS_PER_SECOND
    if math.isinf(millis):
        return None

    # Negative text still counts as a number; it collapses to zero
    return max(_round_half_away(millis), 0)


def parse_duration(text: str) -> int | None:
    """
    Parse racing-time text into milliseconds.

    Accepts "S.mmm", "M:SS.mmm" and "H:MM:SS.mmm". The rightmost part is
    floating-point seconds; hours and minutes must be unsigned integers.

    Args:
        text: Duration text as found in the CSV export

    Returns:
        Milliseconds, or None when the text is empty, non-numeric or has more
        than three parts. Negative seconds yield 0.
    """
    if text is None:
        return None

    parts = text.split(":")
    if len(parts) > 3:
        return None

    seconds = _parse_seconds(parts[-1])
    if seconds is None:
        return None

    if len(parts) == 1:
        return seconds

    minutes = _parse_unsigned(parts[-2])
    if minutes is None:
        return None

    if len(parts) == 2:
        return minutes * MS_PER_MINUTE + seconds

    hours = _parse_unsigned(parts[0])
    if hours is None:
        return None

    return hours * MS_PER_HOUR + minutes * MS_PER_MINUTE + seconds


def parse_duration_or_zero(text: str | None) -> int:
    """Parse a duration, degrading missing or malformed text to 0."""
    if text is None:
        return 0
    parsed = parse_duration(text)
    return 0 if parsed is None else parsed


def format_duration(ms: int) -> str:
    """
    Format milliseconds as racing-time text.

    0 -> "0.000", under a minute -> "S.mmm", under an hour -> "M:SS.mmm",
    otherwise "H:MM:SS.mmm".
    """
    if ms < 0:
        raise ValueError(f"Duration must be non-negative, got {ms}")

    total_seconds, millis = divmod(ms, MS_PER_SECOND)

    if total_seconds < 60:
        return f"{total_seconds}.{millis:03d}"

    if total_seconds < 3600:
        minutes, seconds = divmod(total_seconds, 60)
        return f"{minutes}:{seconds:02d}.{millis:03d}"

    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{hours}:{minutes:02d}:{seconds:02d}.{millis:03d}"
