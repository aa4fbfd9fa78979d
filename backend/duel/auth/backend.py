"""Starlette AuthenticationBackend that validates signed bearer tokens."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from starlette.authentication import AuthCredentials, AuthenticationBackend

from duel.auth.models import AuthenticatedPlayer
from shared.auth import verify_access_token

if TYPE_CHECKING:
    from starlette.requests import HTTPConnection

logger = structlog.get_logger()

BEARER_SCHEME = "bearer"


def bearer_token(authorization: str | None) -> str | None:
    """Extract the credential from an ``Authorization: Bearer <token>`` header value."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != BEARER_SCHEME:
        return None
    return token.strip() or None


class BearerTokenBackend(AuthenticationBackend):
    """Authenticate requests carrying an HMAC-signed access token.

    A missing or invalid token leaves the request anonymous. Routes wrapped
    with ``protected_api`` turn that into a 401, public routes carry on.
    """

    def __init__(self, token_secret: str) -> None:
        self._token_secret = token_secret

    async def authenticate(
        self,
        conn: HTTPConnection,
    ) -> tuple[AuthCredentials, AuthenticatedPlayer] | None:
        raw = bearer_token(conn.headers.get("authorization"))
        if raw is None:
            return None
        token = verify_access_token(raw, self._token_secret)
        if token is None:
            logger.debug("rejected bearer token", path=conn.url.path)
            return None
        return AuthCredentials(["authenticated"]), AuthenticatedPlayer(token.user_id)
