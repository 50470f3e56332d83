"""Clock adapters."""

from __future__ import annotations

import threading
from datetime import date, datetime, timedelta, tzinfo

from circulation.interfaces.clock import Clock


class SystemClock(Clock):
    """Wall-clock date, optionally in a given timezone (local time by default)."""

    def __init__(self, tz: tzinfo | None = None) -> None:
        self._tz = tz

    def today(self) -> date:
        if self._tz is None:
            return date.today()
        return datetime.now(self._tz).date()


class FixedClock(Clock):
    """A clock that only moves when told to.

    Used by tests and by the CLI when ``CIRCULATION_TODAY`` pins the date.
    """

    def __init__(self, today: date) -> None:
        self._today = today
        self._lock = threading.Lock()

    def today(self) -> date:
        with self._lock:
            return self._today

    def set(self, today: date) -> None:
        """Jump to ``today``."""
        with self._lock:
            self._today = today

    def advance(self, days: int = 1) -> date:
        """Move forward by ``days`` and return the new date."""
        with self._lock:
            self._today += timedelta(days=days)
            return self._today
