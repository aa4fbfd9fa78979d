"""Signed access tokens shared by the duel server and whatever issues sign-ins."""

from shared.auth.access_token import (
    ACCESS_TOKEN_TTL_SECONDS,
    AccessToken,
    create_access_token,
    sign_access_token,
    verify_access_token,
)

__all__ = [
    "ACCESS_TOKEN_TTL_SECONDS",
    "AccessToken",
    "create_access_token",
    "sign_access_token",
    "verify_access_token",
]
