"""
Pydantic models for rooms, players, profiles and match history.

All models are frozen; transitions return new instances via model_copy.
Field names are snake_case in Python and camelCase on the wire and in the
store.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from duel.logic.enums import MatchResult, RoomStatus
from duel.logic.settings import MAX_PLAYERS


class DuelModel(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    def to_json(self) -> dict:
        """Dump to the JSON-compatible camelCase form used by the store and the API."""
        return self.model_dump(mode="json", by_alias=True)


class GuessResult(DuelModel):
    """Feedback for a single guess. Immutable once appended."""

    guess: str
    correct_position: int
    correct_digit: int
    timestamp: datetime


class Player(DuelModel):
    id: str
    full_name: str
    profile_picture: str | None = None
    ready: bool = False
    secret_number: str | None = None
    guesses: tuple[GuessResult, ...] = ()


class Room(DuelModel):
    """One match session between up to two players.

    players is ordered by join order; the index is the player's turn slot.
    """

    id: str
    name: str
    password: str | None = None
    is_public: bool = True
    created_by: str
    digit_count: int
    players: tuple[Player, ...] = ()
    status: RoomStatus = RoomStatus.WAITING
    current_turn: int = 0
    round: int = 1
    turn_start_time: datetime | None = None
    turn_deadline: datetime | None = None
    winner: str | None = None
    created_at: datetime
    started_at: datetime | None = None
    finished_at: datetime | None = None
    last_activity: datetime

    @property
    def player_count(self) -> int:
        return len(self.players)

    @property
    def is_full(self) -> bool:
        return self.player_count >= MAX_PLAYERS

    def player_index(self, user_id: str) -> int | None:
        """Return the turn slot of user_id, or None if they are not in the room."""
        for index, player in enumerate(self.players):
            if player.id == user_id:
                return index
        return None


class PublicRoomSummary(DuelModel):
    """Listing entry derived from a public Room. Room stays authoritative."""

    id: str
    name: str
    player_count: int
    created_by: str
    digit_count: int


class UserProfile(DuelModel):
    id: str
    email: str | None = None
    full_name: str
    profile_picture: str | None = None
    level: int = 1
    wins: int = 0
    losses: int = 0
    total_games: int = 0
    accuracy: float = 0.0
    created_at: datetime | None = None


class UserStats(DuelModel):
    wins: int
    losses: int
    total_games: int
    accuracy: float
    level: int


class GameHistoryRecord(DuelModel):
    """Per-user entry written once per finished match."""

    id: str
    room_id: str
    opponent_id: str
    opponent_name: str
    result: MatchResult
    rounds: int
    timestamp: datetime


class CleanupResult(DuelModel):
    cleaned_count: int
    cleaned_room_ids: tuple[str, ...] = ()


class CleanupStatus(DuelModel):
    """Inactivity countdown for a room, shown to clients before deletion."""

    warning: bool
    seconds_remaining: int
