from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field

from eventtimers.ledger import CooldownLedger
from eventtimers.models import ConfigSnapshot, Event, EventId, Reminder, Track, UpcomingEntry
from eventtimers.occurrence import Occurrence, occurrence
from eventtimers.store import ConfigStore
from eventtimers.timeutil import floor_seconds, minutes_ceil
from eventtimers.toasts import Toast, ToastQueue

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TickResult:
    refreshed: bool = False
    new_toasts: tuple[Toast, ...] = ()
    removed_one_shots: tuple[EventId, ...] = ()


@dataclass
class _Pass:
    upcoming: list[UpcomingEntry] = field(default_factory=list)
    new_toasts: list[Toast] = field(default_factory=list)
    consumed_one_shots: list[EventId] = field(default_factory=list)


def _toast_minutes(occ: Occurrence, reminder: Reminder) -> int:
    if reminder.is_ongoing:
        return -minutes_ceil(occ.seconds_into)
    return minutes_ceil(occ.seconds_until_start)


class NotificationScheduler:
    """Decides, once per wall-clock second, which subscribed events notify.

    ``tick`` is safe to call every frame: toast fading runs every call, the
    occurrence/ledger pass runs at most once per second. The store lock and
    the scheduler lock are never held together.
    """

    def __init__(
        self,
        store: ConfigStore,
        *,
        ledger: CooldownLedger | None = None,
        toasts: ToastQueue | None = None,
    ) -> None:
        self._store = store
        self._ledger = ledger if ledger is not None else CooldownLedger()
        self._toasts = toasts if toasts is not None else ToastQueue()
        self._lock = threading.Lock()

        self._upcoming: list[UpcomingEntry] = []
        self._last_refresh_second: int | None = None
        self._reported_invalid: set[EventId] = set()

    # ---------- read-only views ----------

    @property
    def ledger(self) -> CooldownLedger:
        return self._ledger

    @property
    def upcoming(self) -> list[UpcomingEntry]:
        with self._lock:
            return list(self._upcoming)

    @property
    def toasts(self) -> list[Toast]:
        with self._lock:
            return list(self._toasts)

    @property
    def preview(self) -> Toast | None:
        with self._lock:
            return self._toasts.preview

    def find_toast(self, toast_id: int) -> Toast | None:
        with self._lock:
            return self._toasts.find(toast_id)

    # ---------- user actions ----------

    def dismiss(self, toast_id: int) -> bool:
        with self._lock:
            return self._toasts.dismiss(toast_id)

    def show_preview(self, reminder: Reminder) -> Toast:
        with self._lock:
            return self._toasts.show_preview(reminder.name, reminder.color)

    def tick_preview(self) -> None:
        duration = self._store.notification_config().toast_duration_seconds
        with self._lock:
            self._toasts.tick_preview(duration)

    # ---------- main loop ----------

    def tick(self, now: float) -> TickResult:
        snapshot = self._store.snapshot()
        config = snapshot.notification

        with self._lock:
            if snapshot.subscriptions.is_empty:
                self._upcoming = []
                return TickResult()

            self._toasts.tick(config.toast_duration_seconds, config.max_visible_toasts)

            second = floor_seconds(now)
            if second == self._last_refresh_second:
                return TickResult()
            self._last_refresh_second = second

            self._ledger.collect_garbage(second)
            result = self._refresh(snapshot, second)
            if result.new_toasts:
                self._toasts.tick(config.toast_duration_seconds, config.max_visible_toasts)

            result.upcoming.sort(key=lambda e: e.seconds_until)
            self._upcoming = result.upcoming[: max(0, config.max_upcoming_events)]

        removed = [e for e in result.consumed_one_shots if self._store.remove_one_shot(e)]
        return TickResult(
            refreshed=True,
            new_toasts=tuple(result.new_toasts),
            removed_one_shots=tuple(removed),
        )

    def _refresh(self, snapshot: ConfigSnapshot, now: int) -> _Pass:
        subscriptions = snapshot.subscriptions
        config = snapshot.notification
        result = _Pass()

        for track in snapshot.tracks:
            if not track.visible:
                continue

            for event in track.events:
                if not event.enabled:
                    continue

                event_id = track.event_id(event)
                if event_id not in subscriptions:
                    continue

                occ = self._occurrence_or_none(track, event, event_id, now)
                if occ is None:
                    continue

                result.upcoming.append(
                    UpcomingEntry(
                        event_id=event_id,
                        start_time=occ.absolute_start,
                        seconds_until=occ.seconds_until_start,
                        seconds_into=max(0, occ.seconds_into),
                        color=event.color,
                        copy_text=event.copy_text,
                    )
                )

                if occ.is_active and event_id in subscriptions.one_shot:
                    if event_id not in result.consumed_one_shots:
                        result.consumed_one_shots.append(event_id)

                if not config.toast_enabled:
                    continue

                for reminder in config.reminders:
                    if not self._ledger.may_notify(event_id, occ, reminder, now):
                        continue
                    toast = self._toasts.push(
                        event_id,
                        occ.absolute_start,
                        _toast_minutes(occ, reminder),
                        reminder_name=reminder.name,
                        reminder_color=reminder.color,
                        copy_text=event.copy_text,
                    )
                    self._ledger.record_notified(event_id, occ, reminder, now)
                    result.new_toasts.append(toast)
                    logger.info("Reminder '%s' for %s (toast %d)", reminder.name, event_id.display_name, toast.id)

        return result

    def _occurrence_or_none(self, track: Track, event: Event, event_id: EventId, now: int) -> Occurrence | None:
        try:
            occ = occurrence(track.base_time, event, now)
        except ValueError as e:
            if event_id not in self._reported_invalid:
                self._reported_invalid.add(event_id)
                logger.warning("Skipping %s: %s", event_id.display_name, e)
            return None

        self._reported_invalid.discard(event_id)
        return occ
