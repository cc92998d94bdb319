"""Time sources for the ledger.

The ledger never reads wall time itself; a clock is injected at
construction so billing stays deterministic under test.
"""

from __future__ import annotations

import time
from typing import Protocol, runtime_checkable


@runtime_checkable
class Clock(Protocol):
    """Monotonic clock abstraction.

    Instants are seconds as floats; subtracting two instants yields a
    duration in seconds. Clocks returning datetimes also work, their
    differences are timedeltas.
    """

    def now(self) -> float:
        """Return monotonic seconds."""
        ...


class MonotonicClock:
    """Production clock backed by time.monotonic()."""

    def now(self) -> float:
        return time.monotonic()


class ManualClock:
    """Clock whose "now" only moves when told to.

    Each instance owns its own time, so tests can run side by side.
    """

    def __init__(self, start: float = 0.0) -> None:
        self._now = float(start)

    def now(self) -> float:
        return self._now

    def set_now(self, seconds: float) -> None:
        """Jump to an absolute instant."""
        self._now = float(seconds)

    def advance(self, seconds: float) -> None:
        if seconds < 0:
            raise ValueError("cannot advance a clock by a negative amount")
        self._now += float(seconds)

    def __repr__(self) -> str:
        return f"ManualClock(now={self._now})"
