from __future__ import annotations

from dataclasses import dataclass

from eventtimers.models import Event
from eventtimers.timeutil import floor_seconds


@dataclass(frozen=True)
class Occurrence:
    absolute_start: int
    seconds_until_start: int
    # -1 while the occurrence is still pending
    seconds_into: int
    occurrence_index: int
    duration: int

    @property
    def is_active(self) -> bool:
        return self.seconds_into >= 0

    @property
    def seconds_remaining(self) -> int:
        if not self.is_active:
            return self.duration
        return self.duration - self.seconds_into


def occurrence(base_time: float, event: Event, now: float) -> Occurrence:
    """Locate the current or next occurrence of ``event`` relative to ``now``.

    Cycle positions use Euclidean modulo, so an anchor in the future, a
    negative start offset and a window that wraps past the end of the cycle
    all behave. An event whose duration covers the whole cycle is reported
    active on every call.
    """
    cycle = event.cycle_duration
    if cycle <= 0:
        raise ValueError(f"cycle_duration must be positive: {cycle}")

    now = floor_seconds(now)
    base = floor_seconds(base_time)
    offset = event.start_offset % cycle
    phase = (now - base) % cycle

    # Modular distance so windows that wrap past the cycle end stay active
    since_start = (phase - offset) % cycle
    if since_start < event.duration:
        start = now - since_start
        return Occurrence(
            absolute_start=start,
            seconds_until_start=0,
            seconds_into=since_start,
            occurrence_index=(start - base - offset) // cycle,
            duration=event.duration,
        )

    delta = (offset - phase) % cycle
    # Only reachable with a zero-length window
    if delta == 0:
        delta = cycle
    start = now + delta
    return Occurrence(
        absolute_start=start,
        seconds_until_start=delta,
        seconds_into=-1,
        occurrence_index=(start - base - offset) // cycle,
        duration=event.duration,
    )
