"""
Inactivity thresholds for room reclamation.

A room's age is measured from last_activity while waiting or playing, and
from finished_at once finished. Thresholds are strict: a room exactly at the
limit survives.
"""

import math
from datetime import datetime

from duel.logic.enums import RoomStatus
from duel.logic.settings import TimingSettings
from duel.logic.types import CleanupStatus, Room


def _age_and_limits(room: Room, now: datetime, timing: TimingSettings) -> tuple[float, float, float]:
    """Return (age_seconds, ttl_seconds, warning_seconds) for the room's status."""
    if room.status == RoomStatus.WAITING:
        age = (now - room.last_activity).total_seconds()
        return age, timing.waiting_ttl_seconds, timing.waiting_warning_seconds
    if room.status == RoomStatus.PLAYING:
        age = (now - room.last_activity).total_seconds()
        return age, timing.playing_ttl_seconds, timing.playing_warning_seconds
    finished_at = room.finished_at or room.last_activity
    age = (now - finished_at).total_seconds()
    return age, timing.finished_ttl_seconds, timing.finished_warning_seconds


def should_delete(room: Room, now: datetime, timing: TimingSettings) -> bool:
    age, ttl, _warning = _age_and_limits(room, now, timing)
    return age > ttl


def cleanup_status(room: Room, now: datetime, timing: TimingSettings) -> CleanupStatus:
    age, ttl, warning = _age_and_limits(room, now, timing)
    remaining = max(0.0, ttl - age)
    return CleanupStatus(warning=0 < remaining <= warning, seconds_remaining=math.floor(remaining))
