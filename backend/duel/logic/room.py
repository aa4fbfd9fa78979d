"""
Room state machine: waiting -> playing -> finished.

Each transition is a pure function over a frozen Room. It validates the
whole request first and raises a DuelError subclass on rejection, then
returns a new Room with last_activity refreshed. Persisting the result,
locking, the public listing and stats bookkeeping belong to the session
layer.
"""

from dataclasses import dataclass
from datetime import datetime

from duel.logic.clock import TurnClock
from duel.logic.enums import RoomStatus
from duel.logic.exceptions import (
    AlreadyJoinedError,
    ForbiddenError,
    GameNotInProgressError,
    InvalidGuessLengthError,
    NotYourTurnError,
    RoomFullError,
    SecretAlreadySetError,
    TurnNotExpiredError,
)
from duel.logic.scoring import is_winning, score
from duel.logic.settings import clamp_digit_count
from duel.logic.types import GuessResult, Player, PublicRoomSummary, Room, UserProfile

DEFAULT_PLAYER_NAME = "Player"


@dataclass(frozen=True)
class GuessOutcome:
    room: Room
    feedback: GuessResult
    is_winner: bool


def new_player(user_id: str, profile: UserProfile | None) -> Player:
    """Seat entry for a user, copying display fields from their profile if they have one."""
    if profile is None:
        return Player(id=user_id, full_name=DEFAULT_PLAYER_NAME)
    return Player(id=user_id, full_name=profile.full_name, profile_picture=profile.profile_picture)


def create_room(  # noqa: PLR0913
    room_id: str,
    owner: Player,
    *,
    name: str,
    password: str | None,
    is_public: bool,
    digit_count: int | None,
    now: datetime,
) -> Room:
    return Room(
        id=room_id,
        name=name,
        password=password or None,
        is_public=is_public,
        created_by=owner.id,
        digit_count=clamp_digit_count(digit_count),
        players=(owner,),
        created_at=now,
        last_activity=now,
    )


def summarize(room: Room, owner_name: str) -> PublicRoomSummary:
    return PublicRoomSummary(
        id=room.id,
        name=room.name,
        player_count=room.player_count,
        created_by=owner_name,
        digit_count=room.digit_count,
    )


def _require_player(room: Room, user_id: str) -> int:
    index = room.player_index(user_id)
    if index is None:
        raise ForbiddenError("not in this room")
    return index


def _replace_player(room: Room, index: int, **updates: object) -> tuple[Player, ...]:
    players = list(room.players)
    players[index] = room.players[index].model_copy(update=updates)
    return tuple(players)


def _next_turn(room: Room, clock: TurnClock, now: datetime) -> dict[str, object]:
    """Field updates that hand the turn to the other slot and open a new window.

    The round advances when the turn returns to slot 0, i.e. after both
    slots have moved once.
    """
    next_turn = 1 - room.current_turn
    window = clock.open_window(now)
    return {
        "current_turn": next_turn,
        "round": room.round + 1 if next_turn == 0 else room.round,
        "turn_start_time": window.start,
        "turn_deadline": window.deadline,
    }


def join(room: Room, player: Player, password: str | None, now: datetime) -> Room:
    if room.is_full:
        raise RoomFullError("room is full")
    if room.password and room.password != password:
        raise ForbiddenError("incorrect password")
    if room.player_index(player.id) is not None:
        raise AlreadyJoinedError("already in room")

    return room.model_copy(update={"players": (*room.players, player), "last_activity": now})


def set_ready(room: Room, user_id: str, *, ready: bool, now: datetime) -> Room:
    index = _require_player(room, user_id)
    return room.model_copy(
        update={"players": _replace_player(room, index, ready=ready), "last_activity": now},
    )


def set_secret_number(room: Room, user_id: str, secret: str, clock: TurnClock, now: datetime) -> Room:
    """
    Record a player's secret. Starts the game once both players have one.

    Args:
        room: Current room state
        user_id: Player setting their secret
        secret: Digit string of exactly room.digit_count digits
        clock: Turn clock used to open the first turn window
        now: Current time

    Returns:
        New Room, in PLAYING status if this completed the second secret

    """
    index = _require_player(room, user_id)
    if room.players[index].secret_number is not None:
        raise SecretAlreadySetError("secret number already set")
    if len(secret) != room.digit_count:
        raise InvalidGuessLengthError(f"secret number must be exactly {room.digit_count} digits")

    players = _replace_player(room, index, secret_number=secret)
    updates: dict[str, object] = {"players": players, "last_activity": now}

    if len(players) == 2 and all(p.secret_number is not None for p in players):  # noqa: PLR2004
        window = clock.open_window(now)
        updates.update(
            status=RoomStatus.PLAYING,
            started_at=now,
            current_turn=0,
            round=1,
            turn_start_time=window.start,
            turn_deadline=window.deadline,
        )

    return room.model_copy(update=updates)


def guess(room: Room, user_id: str, guess_str: str, clock: TurnClock, now: datetime) -> GuessOutcome:
    """
    Score a guess against the opponent's secret and advance the match.

    A winning guess finishes the room; any other guess hands the turn to the
    opponent with a fresh window.
    """
    if room.status != RoomStatus.PLAYING:
        raise GameNotInProgressError("game not in progress")
    index = _require_player(room, user_id)
    if room.current_turn != index:
        raise NotYourTurnError("not your turn")
    if len(guess_str) != room.digit_count:
        raise InvalidGuessLengthError(f"guess must be exactly {room.digit_count} digits")

    opponent = room.players[1 - index]
    # invariant: both secrets are set while PLAYING
    result = score(guess_str, opponent.secret_number or "")
    feedback = GuessResult(
        guess=guess_str,
        correct_position=result.correct_position,
        correct_digit=result.correct_digit,
        timestamp=now,
    )
    players = _replace_player(room, index, guesses=(*room.players[index].guesses, feedback))
    updates: dict[str, object] = {"players": players, "last_activity": now}

    won = is_winning(result, room.digit_count)
    if won:
        updates.update(
            status=RoomStatus.FINISHED,
            winner=user_id,
            finished_at=now,
            turn_start_time=None,
            turn_deadline=None,
        )
    else:
        updates.update(_next_turn(room, clock, now))

    return GuessOutcome(room=room.model_copy(update=updates), feedback=feedback, is_winner=won)


def skip_turn(room: Room, clock: TurnClock, now: datetime) -> Room:
    """Advance past an expired turn. Records no guess for the skipped player."""
    if room.status != RoomStatus.PLAYING:
        raise GameNotInProgressError("game not in progress")
    if room.turn_deadline is None or not clock.expired(room.turn_deadline, now):
        raise TurnNotExpiredError("turn has not expired yet")

    updates = _next_turn(room, clock, now)
    updates["last_activity"] = now
    return room.model_copy(update=updates)
