from eventtimers.controller import EventTimersController
from eventtimers.models import EventId, NotificationConfig, Reminder
from eventtimers.settings import AppSettings
from eventtimers.store import ConfigStore

from conftest import FakeClock


def _controller(store, wall, mono, settings=None):
    return EventTimersController(store, settings, wall_clock=wall, monotonic=mono, autostart=False)


def test_tick_publishes_toasts_and_upcoming(qapp, store):
    wall, mono = FakeClock(6600), FakeClock(0)
    controller = _controller(store, wall, mono)
    toasts_changed, upcoming_changed = [], []
    controller.toastsChanged.connect(lambda: toasts_changed.append(True))
    controller.upcomingChanged.connect(lambda: upcoming_changed.append(True))

    controller.tick()

    assert toasts_changed and upcoming_changed
    toasts = controller.toasts
    assert len(toasts) == 1
    assert toasts[0]["eventName"] == "Boss"
    assert toasts[0]["text"] == "Soon (10 min)"

    upcoming = controller.upcoming
    assert upcoming[0]["displayName"] == "World: Boss"
    assert upcoming[0]["countdown"] == "10m"
    assert upcoming[0]["active"] is False


def test_activate_toast_requests_copy(qapp, store):
    controller = _controller(store, FakeClock(6600), FakeClock(0))
    copied = []
    controller.copyRequested.connect(copied.append)

    controller.tick()
    controller.activateToast(controller.toasts[0]["id"])
    assert copied == ["[&BossWP]"]
    assert controller.statusMessage == "Copied"


def test_activate_upcoming_with_event_name(qapp, boss_track, boss_id):
    store = ConfigStore(
        tracks=[boss_track],
        notification=NotificationConfig(copy_with_event_name=True),
        persistent=[boss_id],
    )
    controller = _controller(store, FakeClock(100), FakeClock(0))
    copied = []
    controller.copyRequested.connect(copied.append)

    controller.tick()
    controller.activateUpcoming("World", "Boss")
    assert copied == ["Boss: [&BossWP]"]


def test_dismiss_toast(qapp, store):
    mono = FakeClock(0)
    controller = _controller(store, FakeClock(6600), mono)
    controller.tick()
    controller.dismissToast(controller.toasts[0]["id"])
    controller.tick()
    assert controller.toasts == []


def test_tracking_slots(qapp, store, boss_id):
    controller = _controller(store, FakeClock(0), FakeClock(0))
    changes = []
    controller.subscriptionsChanged.connect(lambda: changes.append(True))

    assert controller.toggleTracking("World", "Boss") is False
    assert controller.toggleOneShot("World", "Boss") is True
    assert store.is_one_shot(boss_id)

    controller.toggleTracking("World", "Boss")
    assert controller.toggleOneShot("World", "Boss") is False
    assert controller.statusMessage == "Boss is already tracked"

    controller.untrackEvent("World", "Boss")
    assert store.subscriptions().is_empty
    assert len(changes) == 4


def test_one_shot_consumption_signals(qapp, boss_track, boss_id):
    store = ConfigStore(tracks=[boss_track], one_shot=[boss_id])
    wall = FakeClock(7200)
    controller = _controller(store, wall, FakeClock(0))
    changes = []
    controller.subscriptionsChanged.connect(lambda: changes.append(True))

    controller.tick()
    assert changes == [True]
    assert not store.is_one_shot(boss_id)


def test_preview_reminder(qapp, store):
    mono = FakeClock(0)
    controller = _controller(store, FakeClock(0), mono)
    controller.previewReminder(0)
    assert controller.toasts[0]["eventName"] == "Example Event"

    controller.previewReminder(5)
    assert controller.statusMessage == "Invalid reminder"

    mono.advance(6)
    controller.tick()
    assert controller.toasts == []


def test_settings_loaded_and_saved(qapp, qsettings, boss_track):
    settings = AppSettings(qsettings)
    settings.set_reminders([Reminder("Heads up", 3)])
    settings.save_subscriptions(ConfigStore(persistent=[EventId("World", "Boss")]).subscriptions())

    store = ConfigStore(tracks=[boss_track])
    controller = _controller(store, FakeClock(0), FakeClock(0), settings=settings)
    assert store.is_tracked(EventId("World", "Boss"))
    assert store.notification_config().reminders == (Reminder("Heads up", 3),)

    controller.setToastEnabled(False)
    controller.saveSettings()
    assert controller.statusMessage == "Settings saved"
    assert AppSettings(qsettings).toast_enabled() is False


def test_activate_upcoming_resolves_current_copy_text(qapp, store):
    controller = _controller(store, FakeClock(100), FakeClock(0))
    copied = []
    controller.copyRequested.connect(copied.append)

    controller.activateUpcoming("World", "Boss")
    controller.activateUpcoming("World", "Missing")
    assert copied == ["[&BossWP]"]
