"""Authentication router: login, logout and the shared-passphrase challenge."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from photoquest.auth.dependencies import get_identity
from photoquest.auth.schemas import (
    AccountResponse,
    AuthorizeRequest,
    AuthorizeStatusResponse,
    LoginRequest,
    LoginResponse,
)
from photoquest.auth.service import Identity, authenticate, authorize_device, unbind_device
from photoquest.auth.session import create_session_token
from photoquest.config import get_settings
from photoquest.database import get_session
from photoquest.db.models import Account
from photoquest.middleware.device_token import is_secure_request

router = APIRouter(tags=["Authentication"])


def account_response(account: Account) -> AccountResponse:
    """Build an AccountResponse from an Account model."""
    return AccountResponse(
        id=account.id,
        username=account.username,
        is_admin=account.is_admin,
        avatar_url=account.avatar_url,
        created_at=account.created_at,
    )


@router.get("/authorize", response_model=AuthorizeStatusResponse)
async def authorize_status(identity: Identity = Depends(get_identity)) -> AuthorizeStatusResponse:
    """Report whether this device may upload."""
    return AuthorizeStatusResponse(
        authorized=identity.can_upload,
        passphrase_enabled=bool(get_settings().admin_passphrase),
    )


@router.post("/authorize", response_model=AuthorizeStatusResponse)
async def authorize(
    body: AuthorizeRequest,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_session),
) -> AuthorizeStatusResponse:
    """Check the shared passphrase and grant this device upload permission."""
    await authorize_device(db, identity.device, body.code)
    return AuthorizeStatusResponse(authorized=True, passphrase_enabled=True)


@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    request: Request,
    response: Response,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_session),
) -> LoginResponse:
    """Verify credentials, bind this device to the account, and set the session cookie."""
    settings = get_settings()
    account = await authenticate(db, identity, body.username, body.password)
    response.set_cookie(
        settings.session_cookie_name,
        create_session_token(account.id, account.username),
        max_age=settings.session_expire_days * 24 * 60 * 60,
        httponly=True,
        secure=is_secure_request(request),
        samesite="lax",
    )
    return LoginResponse(account=account_response(account))


@router.get("/logout")
async def logout(
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_session),
) -> RedirectResponse:
    """Clear the session cookie and release this device's account bindings."""
    await unbind_device(db, identity.device)
    response = RedirectResponse(url="/", status_code=303)
    response.delete_cookie(get_settings().session_cookie_name)
    return response
