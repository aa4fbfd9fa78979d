from __future__ import annotations

import asyncio
from collections.abc import Callable
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any
from uuid import uuid4

import structlog

from duel.logic import history, room as room_logic
from duel.logic.cleanup import should_delete
from duel.logic.clock import TurnClock
from duel.logic.exceptions import NotFoundError
from duel.logic.settings import TimingSettings
from duel.logic.types import (
    CleanupResult,
    GameHistoryRecord,
    PublicRoomSummary,
    Room,
    UserProfile,
    UserStats,
)
from duel.session.locks import KeyedLocks
from shared.storage import PUBLIC_ROOMS_KEY, ROOM_INDEX_KEY, history_key, room_key, user_key

if TYPE_CHECKING:
    from duel.logic.room import GuessOutcome
    from shared.storage import KeyValueStore

logger = structlog.get_logger()

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(tz=UTC)


def generate_room_id() -> str:
    return uuid4().hex[:8].upper()


class RoomManager:
    """Coordinate room transitions against the keyed store.

    Store calls run in a worker thread so file I/O never blocks the event
    loop, which means other requests interleave between a read and its
    write. Every mutation is therefore a read-modify-write under the room's
    lock, so two requests racing on one room (e.g. two guesses) apply one
    after the other and the second sees the first's result. Locks for the
    public listing, the room index and user records are only ever taken
    after a room lock, never before one.
    """

    def __init__(
        self,
        store: KeyValueStore,
        timing: TimingSettings | None = None,
        clock: Clock = utc_now,
        room_id_factory: Callable[[], str] = generate_room_id,
    ) -> None:
        self._store = store
        self._timing = timing or TimingSettings()
        self._clock = clock
        self._turn_clock = TurnClock(self._timing)
        self._room_id_factory = room_id_factory
        self._locks = KeyedLocks()

    @property
    def timing(self) -> TimingSettings:
        return self._timing

    def now(self) -> datetime:
        return self._clock()

    # --- store access ---

    async def _read(self, key: str) -> Any | None:  # noqa: ANN401
        return await asyncio.to_thread(self._store.get, key)

    async def _write(self, key: str, value: Any) -> None:  # noqa: ANN401
        await asyncio.to_thread(self._store.set, key, value)

    async def _remove(self, key: str) -> None:
        await asyncio.to_thread(self._store.delete, key)

    # --- profiles ---

    async def _load_profile(self, user_id: str) -> UserProfile | None:
        data = await self._read(user_key(user_id))
        return UserProfile.model_validate(data) if data is not None else None

    async def upsert_profile(
        self,
        user_id: str,
        *,
        full_name: str,
        email: str | None = None,
        profile_picture: str | None = None,
    ) -> UserProfile:
        """Create the caller's profile, or update its display fields keeping stats intact."""
        key = user_key(user_id)
        async with self._locks.hold(key):
            existing = await self._load_profile(user_id)
            if existing is None:
                profile = UserProfile(
                    id=user_id,
                    email=email,
                    full_name=full_name,
                    profile_picture=profile_picture,
                    created_at=self.now(),
                )
                logger.info("profile created", user_id=user_id)
            else:
                profile = existing.model_copy(
                    update={
                        "full_name": full_name,
                        "email": email if email is not None else existing.email,
                        "profile_picture": profile_picture,
                    }
                )
            await self._write(key, profile.to_json())
        return profile

    async def get_profile(self, user_id: str) -> UserProfile:
        profile = await self._load_profile(user_id)
        if profile is None:
            raise NotFoundError("profile not found")
        return profile

    # --- rooms ---

    async def _load_room(self, room_id: str) -> Room:
        data = await self._read(room_key(room_id))
        if data is None:
            raise NotFoundError("room not found")
        return Room.model_validate(data)

    async def _save_room(self, room: Room) -> None:
        await self._write(room_key(room.id), room.to_json())

    async def _load_listing(self) -> list[PublicRoomSummary]:
        return [PublicRoomSummary.model_validate(r) for r in await self._read(PUBLIC_ROOMS_KEY) or []]

    async def _save_listing(self, listing: list[PublicRoomSummary]) -> None:
        await self._write(PUBLIC_ROOMS_KEY, [r.to_json() for r in listing])

    async def _unused_room_id(self) -> str:
        room_id = self._room_id_factory()
        while await self._read(room_key(room_id)) is not None:
            room_id = self._room_id_factory()
        return room_id

    async def create_room(  # noqa: PLR0913
        self,
        owner_id: str,
        *,
        name: str,
        password: str | None = None,
        is_public: bool = True,
        digit_count: int | None = None,
    ) -> Room:
        profile = await self._load_profile(owner_id)
        owner = room_logic.new_player(owner_id, profile)
        room_id = await self._unused_room_id()

        async with self._locks.hold(room_key(room_id)):
            room = room_logic.create_room(
                room_id,
                owner,
                name=name,
                password=password,
                is_public=is_public,
                digit_count=digit_count,
                now=self.now(),
            )
            await self._save_room(room)
            async with self._locks.hold(PUBLIC_ROOMS_KEY, ROOM_INDEX_KEY):
                index = await self._read(ROOM_INDEX_KEY) or []
                await self._write(ROOM_INDEX_KEY, [*index, room_id])
                if room.is_public:
                    listing = await self._load_listing()
                    listing.append(room_logic.summarize(room, owner.full_name))
                    await self._save_listing(listing)

        logger.info(
            "room created",
            room_id=room_id,
            owner_id=owner_id,
            is_public=room.is_public,
            digit_count=room.digit_count,
        )
        return room

    async def list_public_rooms(self) -> list[PublicRoomSummary]:
        return await self._load_listing()

    async def get_room(self, room_id: str) -> Room:
        return await self._load_room(room_id)

    async def _sync_listing_count(self, room: Room) -> None:
        if not room.is_public:
            return
        async with self._locks.hold(PUBLIC_ROOMS_KEY):
            listing = [
                r.model_copy(update={"player_count": room.player_count}) if r.id == room.id else r
                for r in await self._load_listing()
            ]
            await self._save_listing(listing)

    async def join_room(self, room_id: str, user_id: str, password: str | None = None) -> Room:
        async with self._locks.hold(room_key(room_id)):
            room = await self._load_room(room_id)
            player = room_logic.new_player(user_id, await self._load_profile(user_id))
            room = room_logic.join(room, player, password, self.now())
            await self._save_room(room)
            await self._sync_listing_count(room)

        logger.info("player joined room", room_id=room_id, user_id=user_id)
        return room

    async def set_ready(self, room_id: str, user_id: str, *, ready: bool) -> Room:
        async with self._locks.hold(room_key(room_id)):
            room = await self._load_room(room_id)
            room = room_logic.set_ready(room, user_id, ready=ready, now=self.now())
            await self._save_room(room)

        logger.info("player ready changed", room_id=room_id, user_id=user_id, ready=ready)
        return room

    async def set_secret_number(self, room_id: str, user_id: str, secret: str) -> Room:
        async with self._locks.hold(room_key(room_id)):
            before = await self._load_room(room_id)
            room = room_logic.set_secret_number(before, user_id, secret, self._turn_clock, self.now())
            await self._save_room(room)

        if room.status != before.status:
            logger.info("match started", room_id=room_id, first_player=room.players[0].id)
        return room

    async def guess(self, room_id: str, user_id: str, guess_str: str) -> GuessOutcome:
        async with self._locks.hold(room_key(room_id)):
            room = await self._load_room(room_id)
            now = self.now()
            outcome = room_logic.guess(room, user_id, guess_str, self._turn_clock, now)
            await self._save_room(outcome.room)
            if outcome.is_winner:
                await self._finish_match(outcome.room, now)

        feedback = outcome.feedback
        if outcome.is_winner:
            logger.info("match won", room_id=room_id, winner=user_id, round=outcome.room.round)
        else:
            logger.info(
                "guess scored",
                room_id=room_id,
                user_id=user_id,
                correct_position=feedback.correct_position,
                correct_digit=feedback.correct_digit,
                round=outcome.room.round,
            )
        return outcome

    async def _finish_match(self, room: Room, now: datetime) -> None:
        """Record results for both participants and drop the room from the public listing.

        Must be called under the room lock, once per finished room.
        """
        winner_index = room.player_index(room.winner or "")
        if winner_index is None:
            return
        winner = room.players[winner_index]
        loser = room.players[1 - winner_index]
        winner_record, loser_record = history.build_records(room, winner_index, now)

        keys = [user_key(winner.id), user_key(loser.id), history_key(winner.id), history_key(loser.id)]
        async with self._locks.hold(*keys):
            for player, update, record in (
                (winner, history.record_win, winner_record),
                (loser, history.record_loss, loser_record),
            ):
                profile = await self._load_profile(player.id)
                if profile is not None:
                    await self._write(user_key(player.id), update(profile).to_json())
                log = await self._load_history(player.id)
                await self._write(history_key(player.id), [r.to_json() for r in history.prepend(log, record)])

        if room.is_public:
            async with self._locks.hold(PUBLIC_ROOMS_KEY):
                await self._save_listing([r for r in await self._load_listing() if r.id != room.id])

    async def skip_turn(self, room_id: str) -> Room:
        async with self._locks.hold(room_key(room_id)):
            room = await self._load_room(room_id)
            room = room_logic.skip_turn(room, self._turn_clock, self.now())
            await self._save_room(room)

        logger.info("turn skipped", room_id=room_id, current_turn=room.current_turn, round=room.round)
        return room

    # --- cleanup ---

    async def cleanup_rooms(self) -> CleanupResult:
        """
        Delete rooms idle past their status threshold.

        Scans both the public listing and the room index, so private and
        finished rooms are reclaimed too. Listing or index entries pointing
        at rooms that no longer exist are dropped as well.
        """
        now = self.now()
        listed = [r.id for r in await self._load_listing()]
        indexed = await self._read(ROOM_INDEX_KEY) or []
        candidates = list(dict.fromkeys([*listed, *indexed]))

        cleaned: list[str] = []
        gone: set[str] = set()
        for room_id in candidates:
            key = room_key(room_id)
            async with self._locks.hold(key):
                data = await self._read(key)
                if data is None:
                    gone.add(room_id)
                    continue
                if should_delete(Room.model_validate(data), now, self._timing):
                    await self._remove(key)
                    cleaned.append(room_id)
                    gone.add(room_id)

        if gone:
            async with self._locks.hold(PUBLIC_ROOMS_KEY, ROOM_INDEX_KEY):
                await self._save_listing([r for r in await self._load_listing() if r.id not in gone])
                index = await self._read(ROOM_INDEX_KEY) or []
                await self._write(ROOM_INDEX_KEY, [i for i in index if i not in gone])

        if cleaned:
            logger.info("inactive rooms cleaned up", cleaned_count=len(cleaned), room_ids=cleaned)
        return CleanupResult(cleaned_count=len(cleaned), cleaned_room_ids=tuple(cleaned))

    # --- history ---

    async def _load_history(self, user_id: str) -> list[GameHistoryRecord]:
        return [GameHistoryRecord.model_validate(r) for r in await self._read(history_key(user_id)) or []]

    async def get_history(self, user_id: str) -> list[GameHistoryRecord]:
        return await self._load_history(user_id)

    async def get_stats(self, user_id: str) -> UserStats:
        return history.to_stats(await self.get_profile(user_id))
