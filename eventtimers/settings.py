from __future__ import annotations

import json
import logging

from PySide6.QtCore import QSettings

from eventtimers.constants import (
    APP_NAME,
    APP_ORG,
    DEFAULT_MAX_UPCOMING_EVENTS,
    DEFAULT_MAX_VISIBLE_TOASTS,
    DEFAULT_ONGOING_INTERVAL_MINUTES,
    DEFAULT_TOAST_DURATION_SECONDS,
    MAX_MAX_UPCOMING_EVENTS,
    MAX_MAX_VISIBLE_TOASTS,
    MAX_TOAST_DURATION_SECONDS,
    MIN_MAX_UPCOMING_EVENTS,
    MIN_MAX_VISIBLE_TOASTS,
    MIN_TOAST_DURATION_SECONDS,
)
from eventtimers.models import DEFAULT_REMINDERS, EventId, NotificationConfig, Reminder, Subscriptions
from eventtimers.store import ConfigStore

logger = logging.getLogger(__name__)


def _clamp(value, lo, hi):
    return max(lo, min(hi, value))


def _reminder_to_dict(reminder: Reminder) -> dict:
    return {
        "name": reminder.name,
        "minutes_before": reminder.minutes_before,
        "color": list(reminder.color),
        "ongoing_interval_minutes": reminder.ongoing_interval_minutes,
    }


def _reminder_from_dict(item: dict) -> Reminder:
    if not isinstance(item, dict):
        raise ValueError(f"reminder must be an object: {item!r}")
    color = tuple(float(c) for c in item.get("color", (1.0, 1.0, 1.0, 1.0)))
    if len(color) != 4:
        raise ValueError(f"color must have 4 components: {color}")
    minutes_before = int(item["minutes_before"])
    if minutes_before < 0:
        raise ValueError(f"minutes_before must not be negative: {minutes_before}")
    return Reminder(
        name=str(item["name"]),
        minutes_before=minutes_before,
        color=color,
        ongoing_interval_minutes=int(item.get("ongoing_interval_minutes", DEFAULT_ONGOING_INTERVAL_MINUTES)),
    )


def _json_list(raw: str) -> list:
    items = json.loads(raw)
    if not isinstance(items, list):
        raise ValueError(f"expected a JSON list: {raw!r}")
    return items


def _event_id_from_pair(pair) -> EventId:
    if not isinstance(pair, list) or len(pair) != 2 or not all(isinstance(p, str) for p in pair):
        raise ValueError(f"expected [track, event]: {pair!r}")
    return EventId(pair[0], pair[1])


class AppSettings:
    def __init__(self, qsettings: QSettings | None = None) -> None:
        self._q = qsettings if qsettings is not None else QSettings(APP_ORG, APP_NAME)

    def snapshot(self) -> NotificationConfig:
        return NotificationConfig(
            toast_enabled=self.toast_enabled(),
            toast_duration_seconds=self.toast_duration_seconds(),
            max_visible_toasts=self.max_visible_toasts(),
            max_upcoming_events=self.max_upcoming_events(),
            reminders=self.reminders(),
            copy_with_event_name=self.copy_with_event_name(),
        )

    def sync(self) -> None:
        self._q.sync()

    # ---------- notifications ----------

    def toast_enabled(self) -> bool:
        return bool(self._q.value("notifications/toast_enabled", True, type=bool))

    def set_toast_enabled(self, enabled: bool) -> None:
        self._q.setValue("notifications/toast_enabled", bool(enabled))

    def toast_duration_seconds(self) -> float:
        value = self._q.value("notifications/toast_duration_seconds", DEFAULT_TOAST_DURATION_SECONDS, type=float)
        return _clamp(float(value), MIN_TOAST_DURATION_SECONDS, MAX_TOAST_DURATION_SECONDS)

    def set_toast_duration_seconds(self, seconds: float) -> None:
        seconds = _clamp(float(seconds), MIN_TOAST_DURATION_SECONDS, MAX_TOAST_DURATION_SECONDS)
        self._q.setValue("notifications/toast_duration_seconds", seconds)

    def max_visible_toasts(self) -> int:
        value = self._q.value("notifications/max_visible_toasts", DEFAULT_MAX_VISIBLE_TOASTS, type=int)
        return _clamp(int(value), MIN_MAX_VISIBLE_TOASTS, MAX_MAX_VISIBLE_TOASTS)

    def set_max_visible_toasts(self, count: int) -> None:
        count = _clamp(int(count), MIN_MAX_VISIBLE_TOASTS, MAX_MAX_VISIBLE_TOASTS)
        self._q.setValue("notifications/max_visible_toasts", count)

    def max_upcoming_events(self) -> int:
        value = self._q.value("notifications/max_upcoming_events", DEFAULT_MAX_UPCOMING_EVENTS, type=int)
        return _clamp(int(value), MIN_MAX_UPCOMING_EVENTS, MAX_MAX_UPCOMING_EVENTS)

    def set_max_upcoming_events(self, count: int) -> None:
        count = _clamp(int(count), MIN_MAX_UPCOMING_EVENTS, MAX_MAX_UPCOMING_EVENTS)
        self._q.setValue("notifications/max_upcoming_events", count)

    def copy_with_event_name(self) -> bool:
        return bool(self._q.value("notifications/copy_with_event_name", False, type=bool))

    def set_copy_with_event_name(self, enabled: bool) -> None:
        self._q.setValue("notifications/copy_with_event_name", bool(enabled))

    def reminders(self) -> tuple[Reminder, ...]:
        raw = self._q.value("notifications/reminders", "", type=str)
        if not raw:
            return DEFAULT_REMINDERS
        try:
            return tuple(_reminder_from_dict(item) for item in _json_list(raw))
        except (ValueError, KeyError, TypeError) as e:
            logger.warning("Ignoring malformed reminders setting: %s", e)
            return DEFAULT_REMINDERS

    def set_reminders(self, reminders: tuple[Reminder, ...] | list[Reminder]) -> None:
        self._q.setValue("notifications/reminders", json.dumps([_reminder_to_dict(r) for r in reminders]))

    def save_notification_config(self, config: NotificationConfig) -> None:
        self.set_toast_enabled(config.toast_enabled)
        self.set_toast_duration_seconds(config.toast_duration_seconds)
        self.set_max_visible_toasts(config.max_visible_toasts)
        self.set_max_upcoming_events(config.max_upcoming_events)
        self.set_copy_with_event_name(config.copy_with_event_name)
        self.set_reminders(config.reminders)

    # ---------- subscriptions ----------

    def _event_ids(self, key: str) -> frozenset[EventId]:
        raw = self._q.value(key, "", type=str)
        if not raw:
            return frozenset()
        try:
            return frozenset(_event_id_from_pair(pair) for pair in _json_list(raw))
        except (ValueError, TypeError) as e:
            logger.warning("Ignoring malformed %s setting: %s", key, e)
            return frozenset()

    def _set_event_ids(self, key: str, event_ids) -> None:
        self._q.setValue(key, json.dumps([[e.track_name, e.event_name] for e in sorted(event_ids)]))

    def load_subscriptions(self) -> Subscriptions:
        return Subscriptions(
            persistent=self._event_ids("tracking/persistent"),
            one_shot=self._event_ids("tracking/one_shot"),
        )

    def save_subscriptions(self, subscriptions: Subscriptions) -> None:
        self._set_event_ids("tracking/persistent", subscriptions.persistent)
        self._set_event_ids("tracking/one_shot", subscriptions.one_shot)

    # ---------- store bridge ----------

    def apply_to(self, store: ConfigStore) -> None:
        subscriptions = self.load_subscriptions()
        store.set_notification_config(self.snapshot())
        store.set_subscriptions(subscriptions.persistent, subscriptions.one_shot)

    def save_from(self, store: ConfigStore) -> None:
        self.save_notification_config(store.notification_config())
        self.save_subscriptions(store.subscriptions())
        self.sync()
