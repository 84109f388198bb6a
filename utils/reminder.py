import json
import os
import threading
import time as time_module
from datetime import datetime
from typing import List, Optional

from utils.config import Config
from utils.models import Medicine, Reminder
from utils.utils import setup_logger, ensure_directory

logger = setup_logger(__name__)

DEFAULT_REMINDER_TIME = "09:00"
UPDATABLE_FIELDS = ("medicine_name", "time", "medicine_id", "last_triggered")


class ReminderStore:
    """
    Ordered list of reminders mirrored into a JSON file. The whole list is
    rewritten on every change; a failed write leaves memory authoritative.
    """

    def __init__(self, path: Optional[str] = None, clock=None):
        self.path = path or Config.REMINDER_STORE_PATH
        self.clock = clock or time_module.time
        self._reminders: List[Reminder] = []
        self._lock = threading.RLock()

    def load(self) -> List[Reminder]:
        with self._lock:
            self._reminders = self._read()
            logger.info(f"Loaded {len(self._reminders)} reminders from {self.path}")
            return list(self._reminders)

    def _read(self) -> List[Reminder]:
        if not os.path.exists(self.path):
            return []
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to parse reminders from {self.path}: {e}")
            return []

        if not isinstance(raw, list):
            logger.error(f"Reminder file {self.path} does not hold a list")
            return []

        reminders = []
        seen = set()
        for item in raw:
            try:
                reminder = Reminder.from_dict(item)
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed reminder {item!r}: {e}")
                continue
            if reminder.id in seen:
                logger.warning(f"Skipping duplicate reminder id {reminder.id}")
                continue
            seen.add(reminder.id)
            reminders.append(reminder)
        return reminders

    def save(self) -> bool:
        with self._lock:
            payload = [r.to_dict() for r in self._reminders]
            try:
                ensure_directory(os.path.dirname(self.path))
                with open(self.path, "w", encoding="utf-8") as f:
                    json.dump(payload, f)
                return True
            except (OSError, TypeError) as e:
                logger.error(f"Failed to save reminders to {self.path}: {e}")
                return False

    def list(self) -> List[Reminder]:
        with self._lock:
            return list(self._reminders)

    def get(self, reminder_id: int) -> Optional[Reminder]:
        with self._lock:
            return next((r for r in self._reminders if r.id == reminder_id), None)

    def _next_id(self) -> int:
        candidate = int(self.clock() * 1000)
        taken = {r.id for r in self._reminders}
        while candidate in taken:
            candidate += 1
        return candidate

    def add(self, medicine_name: str, time: str = DEFAULT_REMINDER_TIME, medicine_id: Optional[int] = None) -> Reminder:
        with self._lock:
            reminder = Reminder(
                id=self._next_id(),
                medicine_name=medicine_name,
                time=time,
                medicine_id=medicine_id,
            )
            self._reminders.append(reminder)
            self.save()
        logger.info(f"Reminder added for {medicine_name} at {time}")
        return reminder

    def add_for_medicine(self, medicine: Medicine, time: str = DEFAULT_REMINDER_TIME) -> Reminder:
        return self.add(medicine.name, time, medicine_id=medicine.id)

    def remove(self, reminder_id: int) -> bool:
        with self._lock:
            remaining = [r for r in self._reminders if r.id != reminder_id]
            if len(remaining) == len(self._reminders):
                return False
            self._reminders = remaining
            self.save()
        logger.info(f"Reminder {reminder_id} deleted")
        return True

    def update(self, reminder_id: int, **changes) -> Optional[Reminder]:
        with self._lock:
            reminder = self.get(reminder_id)
            if reminder is None:
                return None
            invalid = sorted(k for k in changes if k not in UPDATABLE_FIELDS)
            if invalid:
                raise ValueError(f"Cannot update reminder fields: {', '.join(invalid)}")
            for key, value in changes.items():
                setattr(reminder, key, value)
            self.save()
            return reminder

    def mark_triggered(self, reminder_id: int, when: datetime) -> Optional[Reminder]:
        return self.update(reminder_id, last_triggered=when.isoformat())
