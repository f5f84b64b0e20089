"""Request/response schemas for authentication endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Username + password login."""

    username: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=1, max_length=128)


class AuthorizeRequest(BaseModel):
    """Shared passphrase challenge."""

    code: str = Field(..., min_length=1, max_length=256)


class AccountResponse(BaseModel):
    """Public view of an account."""

    id: int
    username: str
    is_admin: bool
    avatar_url: str | None = None
    created_at: datetime | None = None


class LoginResponse(BaseModel):
    account: AccountResponse


class AuthorizeStatusResponse(BaseModel):
    authorized: bool
    passphrase_enabled: bool
