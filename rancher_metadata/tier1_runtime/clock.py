"""
rancher_metadata.tier1_runtime.clock
──────────────────────────────────────
Mockable time source and sleep. Code that waits between polls calls
``get_clock().sleep()`` rather than ``time.sleep()`` so tests can run the
convergence watcher without wall-clock delays.
"""
from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Callable


# ── Clock implementation ───────────────────────────────────────────────────

class Clock:
    """Mockable clock. Override now_fn / sleep_fn to control time in tests."""

    def __init__(
        self,
        now_fn: Callable[[], datetime] | None = None,
        sleep_fn: Callable[[float], None] | None = None,
    ) -> None:
        self._now_fn = now_fn or (lambda: datetime.now(tz=timezone.utc))
        self._sleep_fn = sleep_fn or time.sleep

    def now(self) -> datetime:
        """Return the current UTC datetime."""
        return self._now_fn()

    def timestamp(self) -> float:
        """Return the current Unix timestamp (float seconds)."""
        return self.now().timestamp()

    def sleep(self, seconds: float) -> None:
        """Block the calling thread for *seconds*."""
        self._sleep_fn(seconds)


class ManualClock(Clock):
    """
    Clock whose time only moves when ``sleep`` is called. Records every
    requested sleep so tests can assert on the polling cadence.
    """

    def __init__(self, start: datetime | None = None) -> None:
        self._current = start or datetime(2016, 1, 1, tzinfo=timezone.utc)
        self.sleeps: list[float] = []
        super().__init__(now_fn=lambda: self._current, sleep_fn=self._advance)

    def _advance(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self._current = datetime.fromtimestamp(
            self._current.timestamp() + seconds, tz=timezone.utc
        )


# ── Module-level singleton ─────────────────────────────────────────────────

_clock = Clock()


def get_clock() -> Clock:
    """Return the global clock instance."""
    return _clock


def set_clock(clock: Clock) -> None:
    """Replace the global clock (use in tests)."""
    global _clock
    _clock = clock


__all__ = ["Clock", "ManualClock", "get_clock", "set_clock"]
