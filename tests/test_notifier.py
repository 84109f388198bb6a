from services.notifier import NotificationCenter


def test_notify_shows_and_auto_dismisses(timers):
    center = NotificationCenter(timeout_seconds=5, timer_factory=timers)
    center.notify("Time to take A!")
    assert center.current() == {"message": "Time to take A!", "show": True}
    assert timers.active[0].interval == 5

    timers.run_all()
    assert center.current()["show"] is False


def test_new_message_overwrites_and_restarts_timer(timers):
    center = NotificationCenter(timeout_seconds=5, timer_factory=timers)
    center.notify("Time to take A!")
    first = timers.active[0]
    center.notify("Time to take B!")

    assert first.cancelled
    assert len(timers.active) == 1
    assert center.current()["message"] == "Time to take B!"


def test_dismiss_clears_visible_state_only(timers):
    center = NotificationCenter(timeout_seconds=5, timer_factory=timers)
    center.notify("Time to take A!")
    center.dismiss()
    assert center.current() == {"message": "Time to take A!", "show": False}
    assert timers.active == []


def test_stale_dismiss_timer_keeps_new_message(timers):
    center = NotificationCenter(timeout_seconds=5, timer_factory=timers)
    center.notify("Time to take A!")
    stale = timers.timers[0]
    center.notify("Time to take B!")
    # the first timer had already woken when it was cancelled
    stale.function(*stale.args)

    assert center.current() == {"message": "Time to take B!", "show": True}
    timers.run_all()
    assert center.current()["show"] is False
