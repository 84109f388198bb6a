import threading

from utils.debounce import Debouncer, debounce


def test_rapid_calls_collapse_to_last(timers):
    calls = []
    debounced = Debouncer(lambda *a, **kw: calls.append((a, kw)), 0.3, timer_factory=timers)

    for i in range(5):
        debounced(i, tag=f"call-{i}")

    assert calls == []
    assert len(timers.active) == 1

    timers.run_all()
    assert calls == [((4,), {"tag": "call-4"})]


def test_each_quiet_period_runs_once(timers):
    calls = []
    debounced = Debouncer(calls.append, 0.3, timer_factory=timers)

    debounced("a")
    timers.run_all()
    debounced("b")
    debounced("c")
    timers.run_all()
    timers.run_all()

    assert calls == ["a", "c"]


def test_stale_timer_does_not_fire_new_call(timers):
    calls = []
    debounced = Debouncer(calls.append, 0.3, timer_factory=timers)

    debounced("first")
    stale = timers.timers[0]
    debounced("second")
    # simulate the first timer having already started running
    stale.function(*stale.args)

    assert calls == []
    timers.run_all()
    assert calls == ["second"]


def test_cancel_and_flush(timers):
    calls = []
    debounced = Debouncer(calls.append, 0.3, timer_factory=timers)

    debounced("dropped")
    debounced.cancel()
    timers.run_all()
    assert calls == []

    debounced("now")
    debounced.flush()
    assert calls == ["now"]
    assert not debounced.pending


def test_decorator_returns_nothing(timers):
    seen = []

    @debounce(0.3, timer_factory=timers)
    def record(value):
        seen.append(value)
        return value

    assert record("x") is None
    assert record("y") is None
    timers.run_all()
    assert seen == ["y"]


def test_real_timer_fires_after_quiet_period():
    done = threading.Event()
    calls = []

    def record(value):
        calls.append(value)
        done.set()

    debounced = Debouncer(record, 0.05)
    for value in range(10):
        debounced(value)

    assert done.wait(2)
    assert calls == [9]
