"""Profile, stats and match history endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from starlette.responses import JSONResponse

from duel.server.types import ProfileRequest
from duel.views.common import parse_body, room_manager

if TYPE_CHECKING:
    from starlette.requests import Request


async def upsert_profile(request: Request) -> JSONResponse:
    """PUT /profile - create the caller's profile or update its display fields."""
    req = await parse_body(request, ProfileRequest)
    profile = await room_manager(request).upsert_profile(
        request.user.user_id,
        full_name=req.full_name,
        email=req.email,
        profile_picture=req.profile_picture,
    )
    return JSONResponse({"profile": profile.to_json()})


async def get_profile(request: Request) -> JSONResponse:
    profile = await room_manager(request).get_profile(request.path_params["user_id"])
    return JSONResponse({"profile": profile.to_json()})


async def get_stats(request: Request) -> JSONResponse:
    stats = await room_manager(request).get_stats(request.user.user_id)
    return JSONResponse({"stats": stats.to_json()})


async def get_history(request: Request) -> JSONResponse:
    """GET /history - the caller's finished matches, newest first."""
    records = await room_manager(request).get_history(request.user.user_id)
    return JSONResponse({"history": [r.to_json() for r in records]})
