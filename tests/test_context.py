import threading

from lrclib_fetch.context import Context


def test_background_context():
    ctx = Context.background()

    assert not ctx.cancelled
    assert ctx.remaining() is None


def test_cancel_runs_callbacks_once():
    ctx = Context()
    calls = []
    ctx.on_cancel(lambda: calls.append("first"))
    ctx.on_cancel(lambda: calls.append("second"))

    ctx.cancel()
    ctx.cancel()

    assert ctx.cancelled
    assert calls == ["first", "second"]


def test_on_cancel_after_cancel_runs_immediately():
    ctx = Context()
    ctx.cancel()
    calls = []

    ctx.on_cancel(lambda: calls.append("late"))

    assert calls == ["late"]


def test_unregister():
    ctx = Context()
    calls = []
    unregister = ctx.on_cancel(lambda: calls.append("removed"))

    unregister()
    ctx.cancel()

    assert calls == []


def test_failing_callback_does_not_stop_the_others():
    ctx = Context()
    calls = []

    def fail():
        raise RuntimeError

    ctx.on_cancel(fail)
    ctx.on_cancel(lambda: calls.append("ok"))
    ctx.cancel()

    assert calls == ["ok"]


def test_deadline():
    ctx = Context(timeout=60)

    assert not ctx.cancelled
    assert 0 < ctx.remaining() <= 60

    ctx.cancel()


def test_expired_deadline():
    ctx = Context(timeout=0)

    assert ctx.cancelled
    assert ctx.remaining() == 0


def test_deadline_fires_callbacks():
    ctx = Context(timeout=0.05)
    fired = threading.Event()
    ctx.on_cancel(fired.set)

    assert fired.wait(5)
    assert ctx.cancelled


def test_cancel_from_another_thread():
    ctx = Context()
    fired = threading.Event()
    ctx.on_cancel(fired.set)

    thread = threading.Thread(target=ctx.cancel)
    thread.start()
    thread.join()

    assert fired.is_set()
    assert ctx.cancelled


def test_timer_starts_with_the_first_callback_and_stops_on_cancel():
    ctx = Context(timeout=60)
    assert ctx._timer is None

    ctx.on_cancel(lambda: None)
    timer = ctx._timer
    assert timer is not None
    assert timer.is_alive()

    ctx.cancel()
    timer.join(5)
    assert not timer.is_alive()


def test_on_cancel_after_deadline_runs_immediately():
    ctx = Context(timeout=0)
    calls = []

    ctx.on_cancel(lambda: calls.append("expired"))

    assert calls == ["expired"]
    assert ctx._timer is None
