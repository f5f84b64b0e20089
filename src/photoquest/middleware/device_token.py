"""Device token middleware: every browser carries an opaque device cookie."""

import re
import secrets
from typing import Any

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = structlog.get_logger()

# Probes never mint a device
_EXEMPT_PATHS = frozenset({"/healthz", "/ready", "/version"})

_TOKEN_PATTERN = re.compile(r"[0-9a-f]{32}")


def mint_device_token() -> str:
    """Return a fresh random device token (32 hex chars)."""
    return secrets.token_hex(16)


def is_valid_device_token(token: str | None) -> bool:
    """True for tokens of the shape this service mints."""
    return token is not None and _TOKEN_PATTERN.fullmatch(token) is not None


def is_secure_request(request: Request) -> bool:
    """True when the request arrived over https, directly or behind a proxy."""
    return request.url.scheme == "https" or request.headers.get("x-forwarded-proto") == "https"


class DeviceTokenMiddleware(BaseHTTPMiddleware):
    """Expose the device token on ``request.state`` and issue one when missing or malformed."""

    def __init__(self, app: Any, cookie_name: str = "device_token", max_age_seconds: int = 157_680_000) -> None:  # noqa: ANN401
        super().__init__(app)
        self.cookie_name = cookie_name
        self.max_age_seconds = max_age_seconds

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        """Read the device cookie, minting and setting a new one if absent or malformed."""
        if request.url.path in _EXEMPT_PATHS:
            return await call_next(request)

        token = request.cookies.get(self.cookie_name)
        # Unknown shapes (tampered or foreign cookies) are replaced
        minted = not is_valid_device_token(token)
        if minted:
            token = mint_device_token()
            logger.debug("device_token_minted")
        request.state.device_token = token

        response = await call_next(request)
        if minted:
            response.set_cookie(
                self.cookie_name,
                token,
                max_age=self.max_age_seconds,
                httponly=True,
                secure=is_secure_request(request),
                samesite="lax",
            )
        return response
