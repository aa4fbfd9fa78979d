from __future__ import annotations

import contextlib
from typing import TYPE_CHECKING

import structlog
from starlette.applications import Starlette
from starlette.middleware.authentication import AuthenticationMiddleware
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse
from starlette.routing import Route

from duel.auth import BearerTokenBackend, protected_api, public_route, validate_route_auth_policy
from duel.logic.exceptions import DuelError
from duel.server.scheduler import CleanupScheduler
from duel.server.settings import DuelServerSettings
from duel.session.manager import RoomManager
from duel.views import (
    cleanup_rooms,
    create_room,
    get_history,
    get_profile,
    get_room,
    get_stats,
    join_room,
    list_rooms,
    make_guess,
    set_ready,
    set_secret,
    skip_turn,
    upsert_profile,
)
from duel.views.common import duel_error_handler
from shared.logging import setup_logging
from shared.storage import FileKeyValueStore, InMemoryKeyValueStore

logger = structlog.get_logger()

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from starlette.requests import Request

    from shared.storage import KeyValueStore


async def health(_request: Request) -> JSONResponse:
    return JSONResponse({"status": "ok"})


def _default_store(settings: DuelServerSettings) -> KeyValueStore:
    if settings.store_dir:
        return FileKeyValueStore(settings.store_dir)
    return InMemoryKeyValueStore()


def create_app(
    settings: DuelServerSettings | None = None,
    room_manager: RoomManager | None = None,
) -> Starlette:
    if settings is None:  # pragma: no cover
        settings = DuelServerSettings()
    if room_manager is None:
        room_manager = RoomManager(_default_store(settings))

    routes = [
        Route("/rooms", protected_api(create_room), methods=["POST"], name="create_room"),
        Route("/rooms/{room_id}/join", protected_api(join_room), methods=["POST"], name="join_room"),
        Route("/rooms/{room_id}/ready", protected_api(set_ready), methods=["POST"], name="set_ready"),
        Route("/rooms/{room_id}/secret", protected_api(set_secret), methods=["POST"], name="set_secret"),
        Route("/rooms/{room_id}/guess", protected_api(make_guess), methods=["POST"], name="make_guess"),
        Route("/profile", protected_api(upsert_profile), methods=["PUT"], name="upsert_profile"),
        Route("/stats", protected_api(get_stats), methods=["GET"], name="get_stats"),
        Route("/history", protected_api(get_history), methods=["GET"], name="get_history"),
        # Public routes
        Route("/health", public_route(health), methods=["GET"], name="health"),
        Route("/rooms", public_route(list_rooms), methods=["GET"], name="list_rooms"),
        Route("/rooms/{room_id}", public_route(get_room), methods=["GET"], name="get_room"),
        Route("/rooms/{room_id}/skip-turn", public_route(skip_turn), methods=["POST"], name="skip_turn"),
        Route("/profile/{user_id}", public_route(get_profile), methods=["GET"], name="get_profile"),
        Route("/cleanup-rooms", public_route(cleanup_rooms), methods=["POST"], name="cleanup_rooms"),
    ]
    validate_route_auth_policy(routes)

    @contextlib.asynccontextmanager
    async def lifespan(_app: Starlette) -> AsyncGenerator[None]:
        scheduler = None
        if settings.cleanup_interval_seconds > 0:
            scheduler = CleanupScheduler(room_manager, settings.cleanup_interval_seconds)
            scheduler.start()
        yield
        if scheduler is not None:
            await scheduler.stop()

    app = Starlette(
        routes=routes,
        lifespan=lifespan,
        exception_handlers={DuelError: duel_error_handler},
    )
    app.add_middleware(AuthenticationMiddleware, backend=BearerTokenBackend(settings.token_secret))  # type: ignore[arg-type]
    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT"],
        allow_headers=["Authorization", "Content-Type"],
    )

    app.state.settings = settings
    app.state.room_manager = room_manager

    logger.info("duel server ready", store="file" if settings.store_dir else "memory")
    return app


def get_app() -> Starlette:  # pragma: no cover
    """Factory function for uvicorn --factory duel.server.app:get_app."""
    s = DuelServerSettings()
    setup_logging(log_dir=s.log_dir, log_format=s.log_format, log_level=s.log_level)
    return create_app(settings=s)
