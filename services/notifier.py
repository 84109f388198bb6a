import threading
from typing import Dict

from utils.config import Config
from utils.utils import setup_logger

logger = setup_logger(__name__)


def _daemon_timer(interval, function, args=None):
    timer = threading.Timer(interval, function, args=args)
    timer.daemon = True
    return timer


class NotificationCenter:
    """Holds the single visible notification and auto-dismisses it."""

    def __init__(self, timeout_seconds: float = None, timer_factory=None):
        self.timeout = timeout_seconds if timeout_seconds is not None else Config.NOTIFICATION_TIMEOUT_SECONDS
        self.timer_factory = timer_factory or _daemon_timer
        self._message = ""
        self._show = False
        self._timer = None
        self._generation = 0
        self._lock = threading.Lock()

    def notify(self, message: str):
        with self._lock:
            self._message = message
            self._show = True
            if self._timer is not None:
                self._timer.cancel()
            self._generation += 1
            self._timer = self.timer_factory(self.timeout, self._expire, args=(self._generation,))
            self._timer.start()
        logger.info(f"Notification: {message}")

    def _expire(self, generation):
        with self._lock:
            # an older timer that woke before being cancelled must not hide a newer message
            if generation != self._generation:
                return
            self._show = False
            self._timer = None

    def dismiss(self):
        with self._lock:
            self._show = False
            self._generation += 1
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def current(self) -> Dict:
        with self._lock:
            return {"message": self._message, "show": self._show}

    def close(self):
        self.dismiss()
