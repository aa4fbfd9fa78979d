"""HMAC-SHA256 signed bearer tokens identifying a player to the duel API.

Tokens are minted by whatever sign-in front end the deployment uses, which
shares the signing secret with the duel server. The server checks the
signature and expiry locally, so authenticating a request never needs a
network call.

Token format: base64url(json_payload_bytes).base64url(hmac_sha256_signature)
"""

import base64
import binascii
import hashlib
import hmac
import json
import math
import time
from dataclasses import asdict, dataclass

import structlog

logger = structlog.get_logger()

_TOKEN_PARTS = 2

ACCESS_TOKEN_TTL_SECONDS = 12 * 3600
MAX_TOKEN_TTL_SECONDS = 7 * 86400
CLOCK_SKEW_SECONDS = 60


@dataclass
class AccessToken:
    """Claims carried by a signed access token."""

    user_id: str
    issued_at: float
    expires_at: float


def create_access_token(
    user_id: str,
    secret: str,
    ttl_seconds: float = ACCESS_TOKEN_TTL_SECONDS,
) -> str:
    """Mint a token for ``user_id`` valid for ``ttl_seconds`` from now."""
    if ttl_seconds <= 0 or ttl_seconds > MAX_TOKEN_TTL_SECONDS:
        raise ValueError(f"ttl_seconds must be in (0, {MAX_TOKEN_TTL_SECONDS}], got {ttl_seconds}")
    now = time.time()
    token = AccessToken(user_id=user_id, issued_at=now, expires_at=now + ttl_seconds)
    return sign_access_token(token, secret)


def sign_access_token(token: AccessToken, secret: str) -> str:
    payload_bytes = json.dumps(asdict(token), sort_keys=True).encode()
    sig = hmac.new(secret.encode(), payload_bytes, hashlib.sha256).digest()
    return f"{base64.urlsafe_b64encode(payload_bytes).decode()}.{base64.urlsafe_b64encode(sig).decode()}"


def verify_access_token(raw: str, secret: str) -> AccessToken | None:
    """Check signature, claims and expiry. Returns None on any failure."""
    parts = raw.split(".")
    if len(parts) != _TOKEN_PARTS:
        return None

    try:
        payload_bytes = base64.urlsafe_b64decode(parts[0])
        provided_sig = base64.urlsafe_b64decode(parts[1])
    except (ValueError, binascii.Error):
        return None

    expected_sig = hmac.new(secret.encode(), payload_bytes, hashlib.sha256).digest()
    if not hmac.compare_digest(provided_sig, expected_sig):
        logger.debug("access token signature mismatch")
        return None

    try:
        token = AccessToken(**json.loads(payload_bytes))
    except (ValueError, TypeError):
        logger.debug("access token malformed payload")
        return None

    if not isinstance(token.user_id, str) or not token.user_id:
        logger.debug("access token without user id")
        return None

    if not _timestamps_valid(token):
        return None
    return token


def _is_finite_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _timestamps_valid(token: AccessToken) -> bool:
    if not _is_finite_number(token.issued_at) or not _is_finite_number(token.expires_at):
        logger.debug("access token non-finite timestamp")
        return False

    now = time.time()
    if token.issued_at > now + CLOCK_SKEW_SECONDS:
        logger.debug("access token issued in the future")
        return False
    if token.expires_at <= token.issued_at:
        logger.debug("access token expires before it is issued")
        return False
    if token.expires_at - token.issued_at > MAX_TOKEN_TTL_SECONDS + CLOCK_SKEW_SECONDS:
        logger.debug("access token lifetime too long")
        return False
    if now > token.expires_at:
        logger.debug("access token expired", user_id=token.user_id)
        return False
    return True
