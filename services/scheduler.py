from datetime import datetime, timedelta
from typing import List, Optional, Tuple

from apscheduler.schedulers.background import BackgroundScheduler
import atexit

from services.notifier import NotificationCenter
from utils.config import Config
from utils.models import Reminder
from utils.reminder import ReminderStore
from utils.utils import setup_logger

logger = setup_logger(__name__)

MATCH_WINDOW = timedelta(minutes=1)
JOB_ID = "medicine_reminders"


def parse_time(value) -> Optional[Tuple[int, int]]:
    """Parse "HH:MM" into (hour, minute); anything else yields None."""
    if not isinstance(value, str):
        return None
    parts = value.strip().split(":")
    if len(parts) < 2:
        return None
    try:
        hour, minute = int(parts[0]), int(parts[1])
    except ValueError:
        return None
    if not (0 <= hour < 24 and 0 <= minute < 60):
        return None
    return hour, minute


def _parse_timestamp(value) -> Optional[datetime]:
    if not value:
        return None
    try:
        stamp = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None
    if stamp.tzinfo is not None:
        stamp = stamp.astimezone().replace(tzinfo=None)
    return stamp


def fired_today(reminder: Reminder, now: datetime) -> bool:
    last = _parse_timestamp(reminder.last_triggered)
    return last is not None and last.date() == now.date()


def is_due(reminder: Reminder, now: datetime) -> bool:
    """
    A reminder is due when now is within a minute of today's instance of
    its time and it has not fired today nor within the last minute.
    """
    parsed = parse_time(reminder.time)
    if parsed is None:
        return False
    hour, minute = parsed
    target = now.replace(hour=hour, minute=minute, second=0, microsecond=0)
    if abs(now - target) >= MATCH_WINDOW or now.date() != target.date():
        return False

    last = _parse_timestamp(reminder.last_triggered)
    if last is None:
        return True
    if last.date() == now.date():
        return False
    return now - last > MATCH_WINDOW


def reminder_message(reminder: Reminder) -> str:
    return f"Time to take {reminder.medicine_name}!"


class ReminderScheduler:
    def __init__(self, store: ReminderStore, notifier: NotificationCenter, clock=None, interval_seconds: int = None):
        self.store = store
        self.notifier = notifier
        self.clock = clock or datetime.now
        self.interval = interval_seconds or Config.REMINDER_POLL_SECONDS
        self.scheduler = None
        atexit.register(self.shutdown)

    def tick(self, now: Optional[datetime] = None) -> List[Reminder]:
        """Evaluate every reminder once, in stored order."""
        now = now or self.clock()
        fired = []
        for reminder in self.store.list():
            if not is_due(reminder, now):
                continue
            if self.store.mark_triggered(reminder.id, now) is None:
                # deleted since the tick started
                continue
            self.notifier.notify(reminder_message(reminder))
            fired.append(reminder)

        if fired:
            logger.info(f"Fired {len(fired)} reminders at {now.strftime('%H:%M:%S')}")
        return fired

    def _check_reminders(self):
        try:
            self.tick()
        except Exception as e:
            logger.error(f"Scheduler Job Error: {e}")

    def start(self):
        if self.scheduler is not None:
            return
        self.scheduler = BackgroundScheduler()
        self.scheduler.start()
        self.scheduler.add_job(
            func=self._check_reminders,
            trigger="interval",
            seconds=self.interval,
            id=JOB_ID,
            replace_existing=True,
            coalesce=True,
            max_instances=1,
        )
        logger.info(f"Scheduler started: reminder check every {self.interval}s.")

    def shutdown(self):
        if self.scheduler is None:
            return
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
        self.scheduler = None
        logger.info("Scheduler stopped.")

    @property
    def running(self) -> bool:
        return self.scheduler is not None and self.scheduler.running
