"""Per-viewer projection of a room for API responses."""

import math
from datetime import datetime
from typing import Any

from duel.logic.clock import TurnClock
from duel.logic.cleanup import cleanup_status
from duel.logic.enums import RoomStatus
from duel.logic.settings import TimingSettings
from duel.logic.types import Room


def room_view(room: Room, viewer_id: str | None, now: datetime, timing: TimingSettings) -> dict[str, Any]:
    """
    Serialize a room as the given viewer may see it.

    The password never leaves the server. Secrets are revealed only to their
    owner until the room is finished. Adds the turn countdown and the
    inactivity warning clients display.
    """
    data = room.to_json()
    data.pop("password", None)
    data["hasPassword"] = room.password is not None

    if room.status != RoomStatus.FINISHED:
        for player in data["players"]:
            if player["id"] != viewer_id:
                player["secretNumber"] = None

    if room.status == RoomStatus.PLAYING and room.turn_deadline is not None:
        data["turnSecondsRemaining"] = math.ceil(TurnClock.remaining(room.turn_deadline, now))
    else:
        data["turnSecondsRemaining"] = None

    data["cleanup"] = cleanup_status(room, now, timing).to_json()
    return data
