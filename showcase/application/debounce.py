"""Coalesce bursts of calls into a single deferred call."""

import threading
from typing import Any, Callable, Optional


class Debouncer:
    """Runs ``func`` once calls stop arriving for ``delay_s`` seconds.

    Each call cancels the pending timer and schedules a new one, so only the
    arguments of the last call in a burst are used.
    """

    def __init__(
        self,
        func: Callable[..., Any],
        delay_s: float,
        timer_factory: Callable[..., Any] = threading.Timer,
    ):
        self.func = func
        self.delay_s = delay_s
        self._timer_factory = timer_factory
        self._timer: Optional[Any] = None
        self._pending: Optional[tuple] = None
        self._mu = threading.Lock()

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def __call__(self, *args: Any, **kwargs: Any) -> None:
        with self._mu:
            if self._timer is not None:
                self._timer.cancel()
            self._pending = (args, kwargs)
            self._timer = self._timer_factory(self.delay_s, self._fire)
            self._timer.daemon = True
            self._timer.start()

    def _fire(self) -> None:
        with self._mu:
            call = self._pending
            self._pending = None
            self._timer = None
        if call is not None:
            args, kwargs = call
            self.func(*args, **kwargs)

    def flush(self) -> None:
        """Run the pending call now, if any."""
        with self._mu:
            if self._timer is not None:
                self._timer.cancel()
        self._fire()

    def cancel(self) -> None:
        """Drop the pending call without running it."""
        with self._mu:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = None
            self._pending = None
