"""User model for Starlette AuthenticationMiddleware integration."""

from __future__ import annotations

from starlette.authentication import BaseUser


class AuthenticatedPlayer(BaseUser):
    """The player behind a verified bearer token, exposed as ``request.user``."""

    def __init__(self, user_id: str) -> None:
        self._user_id = user_id

    @property
    def is_authenticated(self) -> bool:
        return True

    @property
    def display_name(self) -> str:
        return self._user_id

    @property
    def identity(self) -> str:
        return self._user_id

    @property
    def user_id(self) -> str:
        return self._user_id
