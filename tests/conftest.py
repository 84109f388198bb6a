import json

import pytest

from utils.medicine_data import MedicineCatalog
from utils.models import Medicine
from utils.reminder import ReminderStore


class FakeTimer:
    def __init__(self, clock, interval, function, args=None, kwargs=None):
        self.clock = clock
        self.interval = interval
        self.function = function
        self.args = args or ()
        self.kwargs = kwargs or {}
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True
        self.clock.timers.append(self)

    def cancel(self):
        self.cancelled = True


class FakeTimers:
    """Timer factory whose timers only run when advanced by hand."""

    def __init__(self):
        self.timers = []

    def __call__(self, interval, function, args=None, kwargs=None):
        return FakeTimer(self, interval, function, args, kwargs)

    @property
    def active(self):
        return [t for t in self.timers if t.started and not t.cancelled]

    def run_all(self):
        for timer in self.active:
            timer.cancelled = True
            timer.function(*timer.args, **timer.kwargs)


RAW_MEDICINES = [
    {"id": 1, "name": "Paracetamol", "uses": ["Fever", "Pain"], "sideEffects": ["Nausea"],
     "substitutes": ["Crocin"], "Chemical Class": "Aniline", "Habit Forming": "No",
     "Therapeutic Class": "PAIN ANALGESICS", "Action Class": "Analgesic"},
    {"id": 2, "name": "Ibuprofen", "uses": ["Pain", "Inflammation", "Fever"], "sideEffects": [],
     "substitutes": [], "Chemical Class": "", "Habit Forming": "No",
     "Therapeutic Class": "PAIN ANALGESICS", "Action Class": "NSAID"},
    {"id": 3, "name": "Cetirizine", "uses": ["Allergy", "Itching"]},
    {"id": 4, "name": "Feverfew Extract", "uses": ["Migraine"]},
]


@pytest.fixture
def timers():
    return FakeTimers()


@pytest.fixture
def raw_medicines():
    return [dict(item) for item in RAW_MEDICINES]


@pytest.fixture
def medicines(raw_medicines):
    return [Medicine.from_dict(item) for item in raw_medicines]


@pytest.fixture
def data_file(tmp_path, raw_medicines):
    path = tmp_path / "processed_medicine_data.json"
    path.write_text(json.dumps(raw_medicines), encoding="utf-8")
    return path


@pytest.fixture
def catalog(data_file):
    return MedicineCatalog(url="", path=str(data_file))


@pytest.fixture
def store_path(tmp_path):
    return tmp_path / "reminders" / "medicine_reminders.json"


@pytest.fixture
def store(store_path):
    ticks = iter(range(1700000000, 1800000000))
    reminder_store = ReminderStore(path=str(store_path), clock=lambda: next(ticks))
    reminder_store.load()
    return reminder_store
