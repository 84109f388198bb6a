import threading
from functools import wraps


def _daemon_timer(interval, function, args=None, kwargs=None):
    timer = threading.Timer(interval, function, args=args, kwargs=kwargs)
    timer.daemon = True
    return timer


class Debouncer:
    """
    Collapse rapid calls into one trailing call after `wait` seconds of
    quiet. Only the arguments of the last call are used.
    """

    def __init__(self, func, wait, timer_factory=None):
        self.func = func
        self.wait = wait
        self.timer_factory = timer_factory or _daemon_timer
        self._timer = None
        self._pending = None
        self._generation = 0
        self._lock = threading.Lock()

    def __call__(self, *args, **kwargs):
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._generation += 1
            self._pending = (args, kwargs)
            self._timer = self.timer_factory(self.wait, self._fire, args=(self._generation,))
            self._timer.start()

    @property
    def pending(self):
        return self._pending is not None

    def _fire(self, generation=None):
        with self._lock:
            # a timer cancelled too late must not run a newer call early
            if generation is not None and generation != self._generation:
                return
            call = self._pending
            self._pending = None
            self._timer = None
        if call is not None:
            args, kwargs = call
            self.func(*args, **kwargs)

    def flush(self):
        """Run the pending call now, if any."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
        self._fire()

    def cancel(self):
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = None
            self._pending = None


def debounce(wait, timer_factory=None):
    def decorator(func):
        debouncer = Debouncer(func, wait, timer_factory=timer_factory)

        @wraps(func)
        def wrapper(*args, **kwargs):
            debouncer(*args, **kwargs)

        wrapper.cancel = debouncer.cancel
        wrapper.flush = debouncer.flush
        return wrapper
    return decorator
