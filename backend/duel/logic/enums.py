"""
String enum definitions for duel concepts.
"""

from enum import StrEnum


class RoomStatus(StrEnum):
    """Lifecycle of a room. FINISHED is terminal."""

    WAITING = "waiting"
    PLAYING = "playing"
    FINISHED = "finished"


class MatchResult(StrEnum):
    WIN = "win"
    LOSS = "loss"


class ErrorCode(StrEnum):
    """Error codes sent to clients for rejected actions."""

    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"
    ROOM_FULL = "room_full"
    ALREADY_JOINED = "already_joined"
    GAME_NOT_IN_PROGRESS = "game_not_in_progress"
    NOT_YOUR_TURN = "not_your_turn"
    INVALID_GUESS_LENGTH = "invalid_guess_length"
    TURN_NOT_EXPIRED = "turn_not_expired"
    SECRET_ALREADY_SET = "secret_already_set"  # noqa: S105
    VALIDATION_ERROR = "validation_error"
