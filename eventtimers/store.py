from __future__ import annotations

import logging
import threading
from dataclasses import replace
from typing import Iterable

from eventtimers.models import ConfigSnapshot, EventId, NotificationConfig, Subscriptions, Track

logger = logging.getLogger(__name__)


class ConfigStore:
    """Thread-safe tracks/subscription/config store."""

    def __init__(
        self,
        tracks: Iterable[Track] = (),
        notification: NotificationConfig | None = None,
        persistent: Iterable[EventId] = (),
        one_shot: Iterable[EventId] = (),
    ) -> None:
        self._lock = threading.Lock()
        self._tracks: tuple[Track, ...] = tuple(tracks)
        self._notification = notification or NotificationConfig()
        self._persistent: set[EventId] = set(persistent)
        self._one_shot: set[EventId] = set(one_shot) - self._persistent

    def snapshot(self) -> ConfigSnapshot:
        with self._lock:
            return ConfigSnapshot(
                tracks=self._tracks,
                subscriptions=self._subscriptions_locked(),
                notification=self._notification,
            )

    def _subscriptions_locked(self) -> Subscriptions:
        return Subscriptions(frozenset(self._persistent), frozenset(self._one_shot))

    # --- Tracks ---

    def tracks(self) -> tuple[Track, ...]:
        with self._lock:
            return self._tracks

    def set_tracks(self, tracks: Iterable[Track]) -> None:
        with self._lock:
            self._tracks = tuple(tracks)

    def find_event(self, event_id: EventId):
        """Return (track, event) for the first matching event, or None."""
        with self._lock:
            for track in self._tracks:
                if track.name != event_id.track_name:
                    continue
                for event in track.events:
                    if event.name == event_id.event_name:
                        return track, event
        return None

    # --- Notification settings ---

    def notification_config(self) -> NotificationConfig:
        with self._lock:
            return self._notification

    def set_notification_config(self, config: NotificationConfig) -> None:
        with self._lock:
            self._notification = config

    def set_toast_enabled(self, enabled: bool) -> None:
        with self._lock:
            self._notification = replace(self._notification, toast_enabled=bool(enabled))

    # --- Subscriptions ---

    def subscriptions(self) -> Subscriptions:
        with self._lock:
            return self._subscriptions_locked()

    def set_subscriptions(self, persistent: Iterable[EventId], one_shot: Iterable[EventId]) -> None:
        with self._lock:
            self._persistent = set(persistent)
            self._one_shot = set(one_shot) - self._persistent

    def is_tracked(self, event_id: EventId) -> bool:
        with self._lock:
            return event_id in self._persistent

    def is_one_shot(self, event_id: EventId) -> bool:
        with self._lock:
            return event_id in self._one_shot

    def set_tracking(self, event_id: EventId, tracked: bool) -> None:
        with self._lock:
            if tracked:
                self._persistent.add(event_id)
                self._one_shot.discard(event_id)
            else:
                self._persistent.discard(event_id)
        logger.debug("tracking %s: %s", event_id.display_name, tracked)

    def toggle_tracking(self, event_id: EventId) -> bool:
        """Flip persistent tracking. Returns the new state."""
        with self._lock:
            tracked = event_id not in self._persistent
        self.set_tracking(event_id, tracked)
        return tracked

    def toggle_one_shot(self, event_id: EventId) -> bool:
        """Flip "track next only". Persistently tracked events are left alone.

        Returns whether the event is one-shot tracked afterwards.
        """
        with self._lock:
            if event_id in self._persistent:
                return False
            if event_id in self._one_shot:
                self._one_shot.discard(event_id)
                enabled = False
            else:
                self._one_shot.add(event_id)
                enabled = True
        logger.debug("one-shot %s: %s", event_id.display_name, enabled)
        return enabled

    def remove_one_shot(self, event_id: EventId) -> bool:
        with self._lock:
            if event_id not in self._one_shot:
                return False
            self._one_shot.discard(event_id)
        logger.debug("one-shot %s consumed", event_id.display_name)
        return True

    def untrack(self, event_id: EventId) -> None:
        with self._lock:
            self._persistent.discard(event_id)
            self._one_shot.discard(event_id)
        logger.debug("untracked %s", event_id.display_name)
