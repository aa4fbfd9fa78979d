"""Route auth policy helpers.

Each helper wraps an endpoint and sets the ``AUTH_POLICY_ATTR`` marker so
that ``create_app`` can refuse to start with a route nobody classified.
"""

from __future__ import annotations

import functools
from typing import TYPE_CHECKING

from starlette.authentication import has_required_scope
from starlette.routing import Route

from duel.logic.exceptions import UnauthorizedError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from starlette.requests import Request
    from starlette.responses import Response
    from starlette.routing import BaseRoute

    Endpoint = Callable[[Request], Awaitable[Response]]

AUTH_POLICY_ATTR = "__auth_policy__"


def protected_api(endpoint: Endpoint) -> Endpoint:
    """Require a verified bearer token; unauthenticated calls fail with UnauthorizedError."""

    @functools.wraps(endpoint)
    async def wrapper(request: Request) -> Response:
        if not has_required_scope(request, ["authenticated"]):
            raise UnauthorizedError("a valid bearer token is required")
        return await endpoint(request)

    setattr(wrapper, AUTH_POLICY_ATTR, "protected_api")
    return wrapper


def public_route(endpoint: Endpoint) -> Endpoint:
    """Mark an endpoint as callable without a token.

    The marker lives on a thin wrapper so reusing the bare function on
    another route does not silently inherit the policy.
    """

    @functools.wraps(endpoint)
    async def wrapper(request: Request) -> Response:
        return await endpoint(request)

    setattr(wrapper, AUTH_POLICY_ATTR, "public")
    return wrapper


def current_user_id(request: Request) -> str | None:
    """The authenticated caller's user id, or None for anonymous requests."""
    if not has_required_scope(request, ["authenticated"]):
        return None
    return request.user.user_id


def validate_route_auth_policy(routes: list[BaseRoute]) -> None:
    """Raise RuntimeError naming every Route without an auth policy marker."""
    unclassified = [
        f"{route.path} ({route.name})"
        for route in routes
        if isinstance(route, Route) and not hasattr(route.endpoint, AUTH_POLICY_ATTR)
    ]
    if unclassified:
        raise RuntimeError(f"Unclassified routes missing auth policy: {', '.join(unclassified)}")
