"""
HS256 session tokens.

The session cookie holds a signed JWT naming the logged-in account. Device
bindings remain the fallback identity when the cookie is missing or invalid.
"""

from __future__ import annotations

import secrets
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt
import structlog

from photoquest.config import get_settings

logger = structlog.get_logger()

_ALGORITHM = "HS256"
_secret: str | None = None


def _load_secret() -> str:
    """Return the signing secret, generating a per-process one if none is configured."""
    global _secret  # noqa: PLW0603
    if _secret is None:
        configured = get_settings().session_secret
        if configured:
            _secret = configured
        else:
            logger.warning("session_secret_missing", consequence="sessions end on restart")
            _secret = secrets.token_urlsafe(32)
    return _secret


def reset_secret() -> None:
    """Reset the cached secret (useful for testing)."""
    global _secret  # noqa: PLW0603
    _secret = None


def create_session_token(account_id: int, username: str) -> str:
    """Create a session token valid for ``session_expire_days``."""
    settings = get_settings()
    now = datetime.now(timezone.utc)
    payload: dict[str, Any] = {
        "sub": str(account_id),
        "username": username,
        "iat": now,
        "exp": now + timedelta(days=settings.session_expire_days),
        "iss": settings.session_issuer,
        "type": "session",
    }
    return jwt.encode(payload, _load_secret(), algorithm=_ALGORITHM)


def verify_session_token(token: str) -> dict[str, Any]:
    """
    Verify and decode a session token.

    Raises:
        jwt.InvalidTokenError: If the token is invalid, expired, or not a session token.
    """
    settings = get_settings()
    try:
        payload: dict[str, Any] = jwt.decode(
            token,
            _load_secret(),
            algorithms=[_ALGORITHM],
            issuer=settings.session_issuer,
        )
    except jwt.ExpiredSignatureError:
        msg = "Session has expired"
        raise jwt.InvalidTokenError(msg) from None

    if payload.get("type") != "session":
        msg = f"Expected token type 'session', got '{payload.get('type')}'"
        raise jwt.InvalidTokenError(msg)

    return payload
