from __future__ import annotations

from dataclasses import dataclass

from eventtimers.constants import (
    EVENT_COOLDOWN_RETENTION_SECONDS,
    EVENT_COOLDOWN_SECONDS,
    GLOBAL_COOLDOWN_SECONDS,
    NOTIFIED_RETENTION_SECONDS,
)
from eventtimers.models import EventId, Reminder
from eventtimers.occurrence import Occurrence


@dataclass(frozen=True)
class NotifiedKey:
    event_id: EventId
    start_time: int
    minutes_before: int


@dataclass(frozen=True)
class OngoingKey:
    event_id: EventId
    start_time: int


class CooldownLedger:
    """Global, per-event and per-reminder gates. Not thread-safe."""

    def __init__(
        self,
        *,
        global_cooldown: int = GLOBAL_COOLDOWN_SECONDS,
        event_cooldown: int = EVENT_COOLDOWN_SECONDS,
    ) -> None:
        self._global_cooldown = global_cooldown
        self._event_cooldown = event_cooldown

        self._last_toast_time: int | None = None
        self._event_last_notified: dict[EventId, int] = {}
        self._notified: set[NotifiedKey] = set()
        self._ongoing_last_notified: dict[OngoingKey, int] = {}

    def __len__(self) -> int:
        return len(self._notified) + len(self._ongoing_last_notified) + len(self._event_last_notified)

    # ---------- gates ----------

    def global_ready(self, now: int) -> bool:
        if self._last_toast_time is None:
            return True
        return now - self._last_toast_time >= self._global_cooldown

    def event_ready(self, event_id: EventId, now: int) -> bool:
        last = self._event_last_notified.get(event_id)
        if last is None:
            return True
        return now - last >= self._event_cooldown

    def was_notified(self, event_id: EventId, start_time: int, minutes_before: int) -> bool:
        return NotifiedKey(event_id, start_time, minutes_before) in self._notified

    def lead_ready(self, event_id: EventId, occ: Occurrence, reminder: Reminder) -> bool:
        lead_seconds = reminder.minutes_before * 60
        if not 0 < occ.seconds_until_start <= lead_seconds:
            return False
        return not self.was_notified(event_id, occ.absolute_start, reminder.minutes_before)

    def ongoing_ready(self, event_id: EventId, occ: Occurrence, reminder: Reminder, now: int) -> bool:
        if not occ.is_active:
            return False

        interval = max(1, reminder.ongoing_interval_minutes) * 60
        # Never on the final interval, it would be followed by the event ending
        if occ.seconds_remaining <= interval:
            return False

        last = self._ongoing_last_notified.get(OngoingKey(event_id, occ.absolute_start))
        if last is None:
            return True
        return now - last >= interval

    def may_notify(self, event_id: EventId, occ: Occurrence, reminder: Reminder, now: int) -> bool:
        if not self.global_ready(now) or not self.event_ready(event_id, now):
            return False
        if reminder.is_ongoing:
            return self.ongoing_ready(event_id, occ, reminder, now)
        return self.lead_ready(event_id, occ, reminder)

    # ---------- recording ----------

    def record_notified(self, event_id: EventId, occ: Occurrence, reminder: Reminder, now: int) -> None:
        self._last_toast_time = now
        self._event_last_notified[event_id] = now
        if reminder.is_ongoing:
            self._ongoing_last_notified[OngoingKey(event_id, occ.absolute_start)] = now
        else:
            self._notified.add(NotifiedKey(event_id, occ.absolute_start, reminder.minutes_before))

    def collect_garbage(self, now: int) -> int:
        """Drop records that can no longer affect a decision. Returns the count removed."""
        before = len(self)
        cutoff = now - NOTIFIED_RETENTION_SECONDS

        self._notified = {k for k in self._notified if k.start_time > cutoff}
        self._ongoing_last_notified = {
            k: t for k, t in self._ongoing_last_notified.items() if k.start_time > cutoff
        }
        self._event_last_notified = {
            e: t for e, t in self._event_last_notified.items() if now - t < EVENT_COOLDOWN_RETENTION_SECONDS
        }
        return before - len(self)
