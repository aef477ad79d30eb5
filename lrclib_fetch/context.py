"""A cancellation signal that can be passed to the lyrics fetcher."""

import logging
import threading
from collections.abc import Callable
from time import monotonic

logger = logging.getLogger(__name__)


class Context:
    """
    A cancellation signal with an optional deadline.

    A `Context` is cancelled explicitly with `cancel()` or implicitly when its deadline passes.
    Callbacks registered with `on_cancel` run once, on the thread that cancels the context.

    The deadline timer only runs once a callback is registered and stops when the context is cancelled,
    so call `cancel()` when you are done with a context that has a deadline.
    """

    def __init__(self, timeout: float | None = None) -> None:
        """Create a new `Context`, expiring after `timeout` seconds if given."""
        self._lock = threading.Lock()
        self._cancelled = False
        self._callbacks: list[Callable[[], object]] = []
        self._timer: threading.Timer | None = None
        self.deadline = monotonic() + timeout if timeout is not None else None

    @classmethod
    def background(cls) -> "Context":
        """Return a context that is never cancelled unless asked to."""
        return cls()

    @property
    def cancelled(self) -> bool:
        """Return `True` if the context was cancelled or its deadline passed."""
        if self._cancelled:
            return True
        return self.deadline is not None and monotonic() >= self.deadline

    def remaining(self) -> float | None:
        """Return the number of seconds before the deadline, or `None` if there is no deadline."""
        if self.deadline is None:
            return None
        return max(self.deadline - monotonic(), 0.0)

    def cancel(self) -> None:
        """Cancel the context and run the registered callbacks (only the first time)."""
        with self._lock:
            if self._cancelled:
                return
            self._cancelled = True
            callbacks = self._callbacks
            self._callbacks = []
            if self._timer is not None:
                self._timer.cancel()

        for callback in callbacks:
            try:
                callback()
            except Exception:  # noqa: BLE001
                logger.debug("Error in cancel callback %r", callback, exc_info=True)

    def on_cancel(self, callback: Callable[[], object]) -> Callable[[], None]:
        """
        Run `callback` when the context is cancelled. Return a function that unregisters it.

        If the context is already cancelled (or its deadline passed), the callback runs immediately.
        """
        if self.cancelled:
            self.cancel()

        with self._lock:
            if not self._cancelled:
                self._callbacks.append(callback)
                if self.deadline is not None and self._timer is None:
                    self._timer = threading.Timer(self.remaining(), self.cancel)
                    self._timer.daemon = True
                    self._timer.start()

                def unregister() -> None:
                    with self._lock:
                        if callback in self._callbacks:
                            self._callbacks.remove(callback)

                return unregister

        callback()
        return lambda: None

    def __repr__(self) -> str:
        """Return the debug representation of the context."""
        state = "cancelled" if self.cancelled else "active"
        remaining = self.remaining()
        return f"<Context {state}" + (f" {remaining:.1f} s left>" if remaining is not None else ">")
