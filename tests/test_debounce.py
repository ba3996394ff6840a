"""
Unit tests for Debouncer.
"""

import threading

from showcase.application.debounce import Debouncer


class TestDebouncer:
    """Test cases for cancellation-by-replacement debouncing."""

    def test_burst_runs_once_with_last_arguments(self, manual_timers):
        calls = []
        debounced = Debouncer(calls.append, 0.18, timer_factory=manual_timers)

        for text in ["r", "ru", "rus", "rust"]:
            debounced(text)

        timers = manual_timers.created
        assert len(timers) == 4
        assert all(t.cancelled for t in timers[:-1])
        assert timers[-1].interval == 0.18
        for timer in timers:
            timer.fire()
        assert calls == ["rust"]

    def test_separate_bursts_run_separately(self, manual_timers):
        calls = []
        debounced = Debouncer(calls.append, 0.18, timer_factory=manual_timers)

        debounced("a")
        manual_timers.created[-1].fire()
        debounced("b")
        manual_timers.created[-1].fire()

        assert calls == ["a", "b"]

    def test_flush_runs_pending_call_now(self, manual_timers):
        calls = []
        debounced = Debouncer(calls.append, 0.18, timer_factory=manual_timers)

        debounced("now")
        debounced.flush()
        manual_timers.created[-1].fire()

        assert calls == ["now"]
        assert not debounced.pending

    def test_cancel_drops_pending_call(self, manual_timers):
        calls = []
        debounced = Debouncer(calls.append, 0.18, timer_factory=manual_timers)

        debounced("never")
        debounced.cancel()
        debounced.flush()

        assert calls == []

    def test_real_timer_fires_once(self):
        calls = []
        done = threading.Event()

        def record(value):
            calls.append(value)
            done.set()

        debounced = Debouncer(record, 0.05)
        for value in range(5):
            debounced(value)

        assert done.wait(timeout=5)
        assert calls == [4]
