from __future__ import annotations

from datetime import datetime, time, timezone
from typing import Union

TimeLike = Union[str, time]

MINUTES_PER_DAY = 24 * 60


def time_to_minutes(value: TimeLike) -> int:
    """
    Convert a wall-clock time to minutes since midnight.

    Accepts ``datetime.time`` or an ``HH:MM[:SS]`` string; seconds are ignored.
    """
    if isinstance(value, time):
        return value.hour * 60 + value.minute
    hours, minutes = value.split(":")[:2]
    return int(hours) * 60 + int(minutes)


def minutes_to_time_str(minutes: int, *, include_seconds: bool = True) -> str:
    """
    Convert minutes since midnight to ``HH:MM:SS`` (or ``HH:MM``).
    """
    hours, mins = divmod(minutes, 60)
    if include_seconds:
        return f"{hours:02d}:{mins:02d}:00"
    return f"{hours:02d}:{mins:02d}"


def minutes_to_time(minutes: int) -> time:
    """Convert minutes since midnight (0-1439) to ``datetime.time``."""
    if not 0 <= minutes < MINUTES_PER_DAY:
        raise ValueError(f"minutes out of range: {minutes}")
    return time(minutes // 60, minutes % 60)


def format_hhmm(value: TimeLike) -> str:
    """Render a time as ``HH:MM`` for display strings."""
    return minutes_to_time_str(time_to_minutes(value), include_seconds=False)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes (SQLite drops tzinfo on round-trip)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
