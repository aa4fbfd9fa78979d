"""
Match result bookkeeping: cumulative counters and per-user history records.
"""

from collections.abc import Callable
from datetime import datetime
from uuid import uuid4

from duel.logic.enums import MatchResult
from duel.logic.types import GameHistoryRecord, Room, UserProfile, UserStats


def record_win(profile: UserProfile) -> UserProfile:
    wins = profile.wins + 1
    total_games = profile.total_games + 1
    return profile.model_copy(update={"wins": wins, "total_games": total_games, "accuracy": wins / total_games})


def record_loss(profile: UserProfile) -> UserProfile:
    # accuracy is the share of games won, so a loss only grows the denominator
    losses = profile.losses + 1
    total_games = profile.total_games + 1
    return profile.model_copy(
        update={"losses": losses, "total_games": total_games, "accuracy": profile.wins / total_games},
    )


def to_stats(profile: UserProfile) -> UserStats:
    return UserStats(
        wins=profile.wins,
        losses=profile.losses,
        total_games=profile.total_games,
        accuracy=profile.accuracy,
        level=profile.level,
    )


def build_records(
    room: Room,
    winner_index: int,
    now: datetime,
    id_factory: Callable[[], str] = lambda: str(uuid4()),
) -> tuple[GameHistoryRecord, GameHistoryRecord]:
    """Return (winner_record, loser_record) for a finished room.

    rounds counts the guesses the record's owner made in the match.
    """
    winner = room.players[winner_index]
    loser = room.players[1 - winner_index]
    winner_record = GameHistoryRecord(
        id=id_factory(),
        room_id=room.id,
        opponent_id=loser.id,
        opponent_name=loser.full_name,
        result=MatchResult.WIN,
        rounds=len(winner.guesses),
        timestamp=now,
    )
    loser_record = GameHistoryRecord(
        id=id_factory(),
        room_id=room.id,
        opponent_id=winner.id,
        opponent_name=winner.full_name,
        result=MatchResult.LOSS,
        rounds=len(loser.guesses),
        timestamp=now,
    )
    return winner_record, loser_record


def prepend(history: list[GameHistoryRecord], record: GameHistoryRecord) -> list[GameHistoryRecord]:
    """History logs are newest-first."""
    return [record, *history]
