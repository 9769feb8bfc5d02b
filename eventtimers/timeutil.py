from __future__ import annotations

import math
from datetime import UTC, datetime


def to_epoch_seconds(dt: datetime) -> int:
    if dt.tzinfo is None:
        raise ValueError("datetime must be timezone-aware")
    return int(dt.timestamp())


def from_epoch_seconds(epoch_seconds: int) -> datetime:
    return datetime.fromtimestamp(int(epoch_seconds), tz=UTC)


def floor_seconds(value: float) -> int:
    return math.floor(value)


def minutes_ceil(seconds: int) -> int:
    """Whole minutes covering ``seconds``, rounded up (61s -> 2)."""
    return (int(seconds) + 59) // 60


def format_local_time(epoch_seconds: int | None) -> str:
    if epoch_seconds is None:
        return ""
    # Convert to local time for display
    return from_epoch_seconds(epoch_seconds).astimezone().strftime("%H:%M")


def format_countdown(seconds_until: int, seconds_into: int) -> str:
    """Short label for an upcoming entry.

    Pending events show the time left ("45s", "12m 30s", "1h 5m"), active
    events show how long ago they started ("3m ago"), and an event that has
    just started shows "NOW".
    """
    if seconds_until <= 0 and seconds_into > 0:
        if seconds_into < 60:
            return f"{seconds_into}s ago"
        if seconds_into < 3600:
            return f"{seconds_into // 60}m ago"
        return f"{seconds_into // 3600}h {(seconds_into % 3600) // 60}m ago"

    if seconds_until <= 0:
        return "NOW"

    if seconds_until < 60:
        return f"{seconds_until}s"
    if seconds_until < 3600:
        minutes, secs = divmod(seconds_until, 60)
        return f"{minutes}m {secs}s" if secs else f"{minutes}m"
    return f"{seconds_until // 3600}h {(seconds_until % 3600) // 60}m"
