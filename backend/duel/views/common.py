"""Request parsing and response helpers shared by the view handlers."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, TypeVar

from pydantic import BaseModel, ValidationError
from starlette.responses import JSONResponse

from duel.logic.exceptions import InvalidRequestError
from duel.logic.views import room_view

if TYPE_CHECKING:
    from starlette.requests import Request

    from duel.logic.exceptions import DuelError
    from duel.logic.types import Room
    from duel.session.manager import RoomManager

RequestModel = TypeVar("RequestModel", bound=BaseModel)


def room_manager(request: Request) -> RoomManager:
    return request.app.state.room_manager


async def parse_body(request: Request, model: type[RequestModel]) -> RequestModel:
    """Validate the JSON body against ``model``. An empty body counts as ``{}``."""
    raw_body = await request.body()
    if not raw_body.strip():
        body = {}
    else:
        try:
            body = json.loads(raw_body)
        except (ValueError, json.JSONDecodeError) as e:
            raise InvalidRequestError("Invalid JSON body") from e
    if not isinstance(body, dict):
        raise InvalidRequestError("JSON body must be an object")
    try:
        return model.model_validate(body)
    except ValidationError as e:
        raise InvalidRequestError(str(e)) from e


def room_response(
    request: Request,
    room: Room,
    viewer_id: str | None,
    status_code: int = 200,
    **extra: object,
) -> JSONResponse:
    """Render ``room`` as ``viewer_id`` may see it, plus any extra top-level fields."""
    manager = room_manager(request)
    view = room_view(room, viewer_id, manager.now(), manager.timing)
    return JSONResponse({"room": view, **extra}, status_code=status_code)


async def duel_error_handler(_request: Request, exc: DuelError) -> JSONResponse:
    return JSONResponse({"error": str(exc), "code": exc.code.value}, status_code=exc.status)
