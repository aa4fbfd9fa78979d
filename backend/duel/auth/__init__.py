"""Duel API authentication: Starlette backend, user model, and route policy."""

from duel.auth.backend import BearerTokenBackend, bearer_token
from duel.auth.models import AuthenticatedPlayer
from duel.auth.policy import current_user_id, protected_api, public_route, validate_route_auth_policy

__all__ = [
    "AuthenticatedPlayer",
    "BearerTokenBackend",
    "bearer_token",
    "current_user_id",
    "protected_api",
    "public_route",
    "validate_route_auth_policy",
]
