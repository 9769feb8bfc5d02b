from __future__ import annotations

import time
from typing import Callable

from PySide6.QtCore import Property, QObject, QTimer, Signal, Slot

from eventtimers.constants import FRAME_INTERVAL_MS
from eventtimers.models import EventId, UpcomingEntry
from eventtimers.scheduler import NotificationScheduler
from eventtimers.settings import AppSettings
from eventtimers.store import ConfigStore
from eventtimers.timeutil import format_countdown, format_local_time
from eventtimers.toasts import Toast, ToastQueue


def _toast_to_map(toast: Toast) -> dict:
    return {
        "id": toast.id,
        "trackName": toast.event_id.track_name,
        "eventName": toast.event_id.event_name,
        "startTime": toast.event_start_time,
        "minutes": toast.minutes,
        "text": toast.time_text,
        "color": list(toast.reminder_color),
        "copyText": toast.copy_text,
        "opacity": toast.opacity,
    }


def _upcoming_to_map(entry: UpcomingEntry) -> dict:
    return {
        "trackName": entry.event_id.track_name,
        "eventName": entry.event_id.event_name,
        "displayName": entry.event_id.display_name,
        "startTime": entry.start_time,
        "startsAt": format_local_time(entry.start_time),
        "secondsUntil": entry.seconds_until,
        "secondsInto": entry.seconds_into,
        "countdown": format_countdown(entry.seconds_until, entry.seconds_into),
        "active": entry.is_active,
        "color": list(entry.color),
        "copyText": entry.copy_text,
    }


class EventTimersController(QObject):
    toastsChanged = Signal()
    upcomingChanged = Signal()
    statusMessageChanged = Signal()
    subscriptionsChanged = Signal()
    copyRequested = Signal(str)

    def __init__(
        self,
        store: ConfigStore,
        settings: AppSettings | None = None,
        *,
        wall_clock: Callable[[], float] = time.time,
        monotonic: Callable[[], float] = time.monotonic,
        autostart: bool = True,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._store = store
        self._settings = settings
        self._wall_clock = wall_clock
        self._scheduler = NotificationScheduler(store, toasts=ToastQueue(clock=monotonic))
        self._status_message = ""

        self._toast_ids: tuple[int, ...] = ()
        self._upcoming: list[UpcomingEntry] = []

        if self._settings is not None:
            self._settings.apply_to(self._store)

        self._frameTimer = QTimer(self)
        self._frameTimer.timeout.connect(self.tick)
        if autostart:
            self._frameTimer.start(FRAME_INTERVAL_MS)

    # ---------- properties ----------

    @property
    def scheduler(self) -> NotificationScheduler:
        return self._scheduler

    @Property("QVariantList", notify=toastsChanged)
    def toasts(self):
        items = [_toast_to_map(t) for t in self._scheduler.toasts]
        preview = self._scheduler.preview
        if preview is not None:
            items.insert(0, _toast_to_map(preview))
        return items

    @Property("QVariantList", notify=upcomingChanged)
    def upcoming(self):
        return [_upcoming_to_map(e) for e in self._upcoming]

    @Property(str, notify=statusMessageChanged)
    def statusMessage(self) -> str:
        return self._status_message

    # ---------- internal ----------

    def _set_status(self, msg: str) -> None:
        self._status_message = msg
        self.statusMessageChanged.emit()

    def _publish(self) -> None:
        upcoming = self._scheduler.upcoming
        if upcoming != self._upcoming:
            self._upcoming = upcoming
            self.upcomingChanged.emit()

        # Opacity changes every frame while fading
        toasts = self._scheduler.toasts
        ids = tuple(t.id for t in toasts)
        if ids != self._toast_ids or any(t.opacity < 1.0 for t in toasts) or self._scheduler.preview is not None:
            self._toast_ids = ids
            self.toastsChanged.emit()

    # ---------- slots (frame loop) ----------

    @Slot()
    def tick(self) -> None:
        self._scheduler.tick_preview()
        result = self._scheduler.tick(self._wall_clock())
        if result.removed_one_shots:
            self.subscriptionsChanged.emit()
        self._publish()

    # ---------- slots (toasts) ----------

    @Slot(int)
    def dismissToast(self, toast_id: int) -> None:
        if self._scheduler.dismiss(toast_id):
            self.toastsChanged.emit()

    @Slot(int)
    def activateToast(self, toast_id: int) -> None:
        toast = self._scheduler.find_toast(toast_id)
        if toast is None or not toast.copy_text:
            return
        self.copyRequested.emit(toast.copy_text)
        self._set_status("Copied")

    @Slot(int)
    def previewReminder(self, index: int) -> None:
        reminders = self._store.notification_config().reminders
        if not (0 <= index < len(reminders)):
            self._set_status("Invalid reminder")
            return
        self._scheduler.show_preview(reminders[index])
        self.toastsChanged.emit()

    @Slot(bool)
    def setToastEnabled(self, enabled: bool) -> None:
        self._store.set_toast_enabled(enabled)
        self._set_status("Toasts enabled" if enabled else "Toasts disabled")

    # ---------- slots (upcoming / tracking) ----------

    @Slot(str, str)
    def activateUpcoming(self, track_name: str, event_name: str) -> None:
        found = self._store.find_event(EventId(track_name, event_name))
        if found is None:
            return
        _, event = found
        copy_text = event.copy_text
        if not copy_text:
            return
        if self._store.notification_config().copy_with_event_name:
            self.copyRequested.emit(f"{event_name}: {copy_text}")
        else:
            self.copyRequested.emit(copy_text)
        self._set_status("Copied")

    @Slot(str, str, result=bool)
    def toggleTracking(self, track_name: str, event_name: str) -> bool:
        tracked = self._store.toggle_tracking(EventId(track_name, event_name))
        self.subscriptionsChanged.emit()
        self._set_status(f"Tracking {event_name}" if tracked else f"Untracked {event_name}")
        return tracked

    @Slot(str, str, result=bool)
    def toggleOneShot(self, track_name: str, event_name: str) -> bool:
        event_id = EventId(track_name, event_name)
        if self._store.is_tracked(event_id):
            self._set_status(f"{event_name} is already tracked")
            return False
        enabled = self._store.toggle_one_shot(event_id)
        self.subscriptionsChanged.emit()
        self._set_status(f"Tracking next {event_name}" if enabled else f"Cancelled one-shot {event_name}")
        return enabled

    @Slot(str, str)
    def untrackEvent(self, track_name: str, event_name: str) -> None:
        self._store.untrack(EventId(track_name, event_name))
        self.subscriptionsChanged.emit()
        self._set_status(f"Untracked {event_name}")

    # ---------- settings ----------

    @Slot()
    def saveSettings(self) -> None:
        if self._settings is None:
            return
        try:
            self._settings.save_from(self._store)
            self._set_status("Settings saved")
        except Exception as e:
            self._set_status(f"Failed to save settings: {e}")
