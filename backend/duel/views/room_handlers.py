"""Room endpoints: create, list, join, ready, secret, guess, skip and cleanup."""

from __future__ import annotations

from http import HTTPStatus
from typing import TYPE_CHECKING

from starlette.responses import JSONResponse

from duel.auth.policy import current_user_id
from duel.server.types import CreateRoomRequest, GuessRequest, JoinRoomRequest, SetReadyRequest, SetSecretRequest
from duel.views.common import parse_body, room_manager, room_response

if TYPE_CHECKING:
    from starlette.requests import Request


async def create_room(request: Request) -> JSONResponse:
    """POST /rooms - open a room with the caller seated in slot 0."""
    user_id = request.user.user_id
    req = await parse_body(request, CreateRoomRequest)
    room = await room_manager(request).create_room(
        user_id,
        name=req.name,
        password=req.password,
        is_public=req.is_public,
        digit_count=req.digit_count,
    )
    return room_response(request, room, user_id, status_code=HTTPStatus.CREATED)


async def list_rooms(request: Request) -> JSONResponse:
    """GET /rooms - the public listing, oldest first."""
    rooms = await room_manager(request).list_public_rooms()
    return JSONResponse({"rooms": [r.to_json() for r in rooms]})


async def get_room(request: Request) -> JSONResponse:
    """GET /rooms/{room_id} - anonymous callers see no secrets at all."""
    room = await room_manager(request).get_room(request.path_params["room_id"])
    return room_response(request, room, current_user_id(request))


async def join_room(request: Request) -> JSONResponse:
    user_id = request.user.user_id
    req = await parse_body(request, JoinRoomRequest)
    room = await room_manager(request).join_room(request.path_params["room_id"], user_id, req.password)
    return room_response(request, room, user_id)


async def set_ready(request: Request) -> JSONResponse:
    user_id = request.user.user_id
    req = await parse_body(request, SetReadyRequest)
    room = await room_manager(request).set_ready(request.path_params["room_id"], user_id, ready=req.ready)
    return room_response(request, room, user_id)


async def set_secret(request: Request) -> JSONResponse:
    user_id = request.user.user_id
    req = await parse_body(request, SetSecretRequest)
    room = await room_manager(request).set_secret_number(request.path_params["room_id"], user_id, req.secret)
    return room_response(request, room, user_id)


async def make_guess(request: Request) -> JSONResponse:
    """POST /rooms/{room_id}/guess - score a guess and report the feedback."""
    user_id = request.user.user_id
    req = await parse_body(request, GuessRequest)
    outcome = await room_manager(request).guess(request.path_params["room_id"], user_id, req.guess)
    return room_response(
        request,
        outcome.room,
        user_id,
        feedback=outcome.feedback.to_json(),
        isWinner=outcome.is_winner,
    )


async def skip_turn(request: Request) -> JSONResponse:
    """POST /rooms/{room_id}/skip-turn - any client may advance an expired turn."""
    room = await room_manager(request).skip_turn(request.path_params["room_id"])
    return room_response(request, room, current_user_id(request), skipped=True)


async def cleanup_rooms(request: Request) -> JSONResponse:
    """POST /cleanup-rooms - sweep inactive rooms, for cron-style external callers."""
    result = await room_manager(request).cleanup_rooms()
    return JSONResponse(result.to_json())
