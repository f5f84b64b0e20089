"""FastAPI identity and access dependencies.

Three tiers: anyone may view, uploaders (logged-in accounts or passphrase-
authorized devices) may upload, admins may moderate.
"""

from __future__ import annotations

import jwt
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from photoquest.auth.service import Identity, resolve_identity
from photoquest.auth.session import verify_session_token
from photoquest.config import get_settings
from photoquest.database import get_session
from photoquest.db.models import Account
from photoquest.errors import ForbiddenError, LoginRequiredError
from photoquest.middleware.device_token import mint_device_token


def _session_account_id(request: Request) -> int | None:
    """Account id from a valid session cookie, or None."""
    token = request.cookies.get(get_settings().session_cookie_name)
    if not token:
        return None
    try:
        return int(verify_session_token(token)["sub"])
    except (jwt.InvalidTokenError, KeyError, ValueError):
        return None


async def get_identity(
    request: Request,
    db: AsyncSession = Depends(get_session),
) -> Identity:
    """Resolve the device (and account, if any) behind the request."""
    device_token = getattr(request.state, "device_token", None) or mint_device_token()
    return await resolve_identity(db, device_token, _session_account_id(request))


async def require_login(identity: Identity = Depends(get_identity)) -> Identity:
    """Soft gate: identities that cannot upload are redirected to the landing page."""
    if not identity.can_upload:
        raise LoginRequiredError
    return identity


async def require_uploader(identity: Identity = Depends(get_identity)) -> Identity:
    """Hard gate for uploads."""
    if not identity.can_upload:
        raise ForbiddenError("You must be logged in to upload")
    return identity


async def require_admin(identity: Identity = Depends(get_identity)) -> Account:
    """Hard gate for admin routes. Returns the admin account."""
    if not identity.is_admin or identity.account is None:
        raise ForbiddenError("Admin access required")
    return identity.account
