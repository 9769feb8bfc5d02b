import pytest
from PySide6.QtCore import QCoreApplication, QSettings

from eventtimers.models import Event, EventId, NotificationConfig, Reminder, Track
from eventtimers.store import ConfigStore


class FakeClock:
    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(scope="session")
def qapp():
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


@pytest.fixture
def clock():
    return FakeClock(1000.0)


@pytest.fixture
def qsettings(tmp_path):
    return QSettings(str(tmp_path / "settings.ini"), QSettings.Format.IniFormat)


@pytest.fixture
def boss_event():
    # Two-hour cycle, five-minute window at the top of the cycle
    return Event("Boss", start_offset=0, duration=300, cycle_duration=7200, copy_text="[&BossWP]")


@pytest.fixture
def boss_track(boss_event):
    return Track("World", base_time=0, events=(boss_event,))


@pytest.fixture
def boss_id():
    return EventId("World", "Boss")


@pytest.fixture
def lead_config():
    return NotificationConfig(reminders=(Reminder("Soon", 10),))


@pytest.fixture
def store(boss_track, boss_id, lead_config):
    return ConfigStore(tracks=[boss_track], notification=lead_config, persistent=[boss_id])
