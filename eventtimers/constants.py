from __future__ import annotations

APP_ORG = "EventTimers"
APP_NAME = "EventTimers"

# Cooldown gates (seconds)
GLOBAL_COOLDOWN_SECONDS = 2
EVENT_COOLDOWN_SECONDS = 30

# Ledger retention (seconds)
NOTIFIED_RETENTION_SECONDS = 86_400
EVENT_COOLDOWN_RETENTION_SECONDS = 300

# Toast fade starts this many seconds before the toast expires
TOAST_FADE_SECONDS = 1.0

DEFAULT_TOAST_DURATION_SECONDS = 5.0
MIN_TOAST_DURATION_SECONDS = 1.0
MAX_TOAST_DURATION_SECONDS = 60.0

DEFAULT_MAX_VISIBLE_TOASTS = 3
MIN_MAX_VISIBLE_TOASTS = 1
MAX_MAX_VISIBLE_TOASTS = 10

DEFAULT_MAX_UPCOMING_EVENTS = 10
MIN_MAX_UPCOMING_EVENTS = 1
MAX_MAX_UPCOMING_EVENTS = 50

DEFAULT_ONGOING_INTERVAL_MINUTES = 5

PREVIEW_TRACK_NAME = "Example Track"
PREVIEW_EVENT_NAME = "Example Event"
PREVIEW_COPY_TEXT = "[&Example]"
PREVIEW_MINUTES = 5

DEFAULT_EVENT_COLOR = (0.2, 0.6, 0.8, 1.0)

# UI
FRAME_INTERVAL_MS = 16
