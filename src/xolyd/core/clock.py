# src/xolyd/core/clock.py
"""Clock abstraction for testable trace timestamps.

Production code uses SystemClock (the default).
Tests inject xolyd.testing.MockClock to pin the time.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Protocol


class Clock(Protocol):
    """Source of wall-clock time for trace line prefixes."""

    def now(self) -> datetime:
        """Return the current time as an aware UTC datetime."""
        ...


class SystemClock:
    """Production clock reading the system time in UTC."""

    def now(self) -> datetime:
        return datetime.now(tz=UTC)


DEFAULT_CLOCK: Clock = SystemClock()
