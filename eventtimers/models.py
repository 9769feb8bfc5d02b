from __future__ import annotations

from dataclasses import dataclass, field

from eventtimers.constants import (
    DEFAULT_EVENT_COLOR,
    DEFAULT_MAX_UPCOMING_EVENTS,
    DEFAULT_MAX_VISIBLE_TOASTS,
    DEFAULT_ONGOING_INTERVAL_MINUTES,
    DEFAULT_TOAST_DURATION_SECONDS,
)

Color = tuple[float, float, float, float]


@dataclass(frozen=True, order=True)
class EventId:
    track_name: str
    event_name: str

    @property
    def display_name(self) -> str:
        return f"{self.track_name}: {self.event_name}"


@dataclass(frozen=True)
class Event:
    name: str
    start_offset: int
    duration: int
    cycle_duration: int
    color: Color = DEFAULT_EVENT_COLOR
    copy_text: str = ""
    enabled: bool = True


@dataclass(frozen=True)
class Track:
    name: str
    base_time: int
    events: tuple[Event, ...] = ()
    visible: bool = True

    def event_id(self, event: Event) -> EventId:
        return EventId(self.name, event.name)


@dataclass(frozen=True)
class Reminder:
    name: str
    minutes_before: int
    color: Color = (1.0, 1.0, 1.0, 1.0)
    ongoing_interval_minutes: int = DEFAULT_ONGOING_INTERVAL_MINUTES

    @property
    def is_ongoing(self) -> bool:
        return self.minutes_before == 0


DEFAULT_REMINDERS: tuple[Reminder, ...] = (
    Reminder("Starting soon!", 10, (1.0, 0.8, 0.2, 1.0)),
    Reminder("Happening now!", 0, (0.5, 1.0, 0.5, 1.0)),
)


@dataclass(frozen=True)
class NotificationConfig:
    toast_enabled: bool = True
    toast_duration_seconds: float = DEFAULT_TOAST_DURATION_SECONDS
    max_visible_toasts: int = DEFAULT_MAX_VISIBLE_TOASTS
    max_upcoming_events: int = DEFAULT_MAX_UPCOMING_EVENTS
    reminders: tuple[Reminder, ...] = DEFAULT_REMINDERS
    copy_with_event_name: bool = False


@dataclass(frozen=True)
class Subscriptions:
    persistent: frozenset[EventId] = frozenset()
    one_shot: frozenset[EventId] = frozenset()

    def all(self) -> frozenset[EventId]:
        return self.persistent | self.one_shot

    @property
    def is_empty(self) -> bool:
        return not self.persistent and not self.one_shot

    def __contains__(self, event_id: object) -> bool:
        return event_id in self.persistent or event_id in self.one_shot


@dataclass(frozen=True)
class ConfigSnapshot:
    tracks: tuple[Track, ...] = ()
    subscriptions: Subscriptions = field(default_factory=Subscriptions)
    notification: NotificationConfig = field(default_factory=NotificationConfig)


@dataclass(frozen=True)
class UpcomingEntry:
    event_id: EventId
    start_time: int
    seconds_until: int
    # 0 while the event has not started yet
    seconds_into: int
    color: Color
    copy_text: str

    @property
    def is_active(self) -> bool:
        return self.seconds_until == 0
