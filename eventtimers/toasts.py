from __future__ import annotations

import time
from collections import deque
from dataclasses import dataclass
from typing import Callable, Iterator

from eventtimers.constants import (
    PREVIEW_COPY_TEXT,
    PREVIEW_EVENT_NAME,
    PREVIEW_MINUTES,
    PREVIEW_TRACK_NAME,
    TOAST_FADE_SECONDS,
)
from eventtimers.models import Color, EventId


@dataclass
class Toast:
    id: int
    event_id: EventId
    event_start_time: int
    # > 0 minutes until start, < 0 minutes since start, 0 "now"
    minutes: int
    created_at: float
    reminder_name: str
    reminder_color: Color
    copy_text: str = ""
    opacity: float = 1.0
    dismissed: bool = False

    @property
    def time_text(self) -> str:
        if self.minutes > 0:
            return f"{self.reminder_name} ({self.minutes} min)"
        if self.minutes < 0:
            return f"{self.reminder_name} ({-self.minutes} min ago)"
        return f"{self.reminder_name} (now!)"


def _faded_opacity(toast: Toast, now: float, duration: float) -> float:
    elapsed = now - toast.created_at
    if toast.dismissed or elapsed > duration:
        return 0.0
    if elapsed > duration - TOAST_FADE_SECONDS:
        return max(0.0, min(1.0, (duration - elapsed) / TOAST_FADE_SECONDS))
    return 1.0


class ToastQueue:
    """Visible toasts, oldest first, plus a single preview slot.

    Toasts fade out during their last second and are dropped once fully
    transparent. Timing uses ``clock`` (monotonic by default), independent of
    the wall clock the scheduler runs on.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._queue: deque[Toast] = deque()
        self._next_id = 0
        self._preview: Toast | None = None

    def __len__(self) -> int:
        return len(self._queue)

    def __iter__(self) -> Iterator[Toast]:
        return iter(list(self._queue))

    @property
    def preview(self) -> Toast | None:
        return self._preview

    def _allocate_id(self) -> int:
        toast_id = self._next_id
        self._next_id += 1
        return toast_id

    def push(
        self,
        event_id: EventId,
        event_start_time: int,
        minutes: int,
        *,
        reminder_name: str,
        reminder_color: Color,
        copy_text: str = "",
    ) -> Toast:
        toast = Toast(
            id=self._allocate_id(),
            event_id=event_id,
            event_start_time=event_start_time,
            minutes=minutes,
            created_at=self._clock(),
            reminder_name=reminder_name,
            reminder_color=reminder_color,
            copy_text=copy_text,
        )
        self._queue.append(toast)
        return toast

    def find(self, toast_id: int) -> Toast | None:
        if self._preview is not None and self._preview.id == toast_id:
            return self._preview
        for toast in self._queue:
            if toast.id == toast_id:
                return toast
        return None

    def dismiss(self, toast_id: int) -> bool:
        toast = self.find(toast_id)
        if toast is None:
            return False
        toast.dismissed = True
        return True

    def tick(self, duration: float, max_visible: int) -> None:
        now = self._clock()
        for toast in self._queue:
            toast.opacity = _faded_opacity(toast, now, duration)

        self._queue = deque(t for t in self._queue if t.opacity > 0.0)

        # Newest toasts stay visible
        while len(self._queue) > max(0, max_visible):
            self._queue.popleft()

    # ---------- preview ----------

    def show_preview(self, reminder_name: str, reminder_color: Color) -> Toast:
        self._preview = Toast(
            id=self._allocate_id(),
            event_id=EventId(PREVIEW_TRACK_NAME, PREVIEW_EVENT_NAME),
            event_start_time=0,
            minutes=PREVIEW_MINUTES,
            created_at=self._clock(),
            reminder_name=reminder_name,
            reminder_color=reminder_color,
            copy_text=PREVIEW_COPY_TEXT,
        )
        return self._preview

    def tick_preview(self, duration: float) -> None:
        if self._preview is None:
            return
        self._preview.opacity = _faded_opacity(self._preview, self._clock(), duration)
        if self._preview.opacity <= 0.0:
            self._preview = None
