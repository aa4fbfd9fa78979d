"""
Turn window arithmetic.

The clock never schedules anything: expiry is evaluated on demand when a
request arrives, and a stale turn only advances through an explicit skip.
"""

from datetime import datetime, timedelta
from typing import NamedTuple

from duel.logic.settings import TimingSettings


class TurnWindow(NamedTuple):
    start: datetime
    deadline: datetime


class TurnClock:
    def __init__(self, timing: TimingSettings | None = None) -> None:
        self._timing = timing or TimingSettings()

    @property
    def turn_duration(self) -> timedelta:
        return timedelta(seconds=self._timing.turn_seconds)

    def open_window(self, now: datetime) -> TurnWindow:
        """Start a fresh turn window at now."""
        return TurnWindow(start=now, deadline=now + self.turn_duration)

    @staticmethod
    def expired(deadline: datetime, now: datetime) -> bool:
        return now >= deadline

    @staticmethod
    def remaining(deadline: datetime, now: datetime) -> float:
        """Seconds left in the window, never negative."""
        return max(0.0, (deadline - now).total_seconds())
