"""
Identity and authentication logic.

Resolves device tokens to devices and accounts, binds devices on login, and
handles the shared-passphrase upload authorization.
"""

from __future__ import annotations

import hmac
from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError

from photoquest.auth.password import (
    PasswordStrengthError,
    check_needs_rehash,
    hash_password,
    validate_password_strength,
    verify_password,
)
from photoquest.config import get_settings
from photoquest.db.models import Account, AccountDevice, Device
from photoquest.errors import AuthError, ClientError, ConflictError, ForbiddenError

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()


@dataclass
class Identity:
    """Who is making the request: always a device, sometimes an account."""

    device: Device
    account: Account | None = None

    @property
    def can_upload(self) -> bool:
        return self.account is not None or self.device.can_upload

    @property
    def is_admin(self) -> bool:
        return self.account is not None and self.account.is_admin


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


async def get_account_by_id(db: AsyncSession, account_id: int) -> Account | None:
    """Fetch an account by ID."""
    result = await db.execute(select(Account).where(Account.id == account_id))
    return result.scalar_one_or_none()


async def get_account_by_username(db: AsyncSession, username: str) -> Account | None:
    """Fetch an account by exact username."""
    result = await db.execute(select(Account).where(Account.username == username))
    return result.scalar_one_or_none()


async def get_device_by_token(db: AsyncSession, token: str) -> Device | None:
    """Fetch a device by exact token match."""
    result = await db.execute(select(Device).where(Device.token == token))
    return result.scalar_one_or_none()


async def get_account_by_device(db: AsyncSession, device: Device) -> Account | None:
    """Return the account bound to a device, lowest account id first."""
    result = await db.execute(
        select(Account)
        .join(AccountDevice, AccountDevice.account_id == Account.id)
        .where(AccountDevice.device_id == device.id)
        .order_by(Account.id)
        .limit(1)
    )
    return result.scalar_one_or_none()


# ---------------------------------------------------------------------------
# Identity resolution
# ---------------------------------------------------------------------------


async def get_or_create_device(db: AsyncSession, token: str) -> tuple[Device, bool]:
    """
    Get the device for a token, persisting it on first sight.

    Two requests racing on a fresh token may both try the insert; the loser
    rolls back and reads the winner's row.

    Returns:
        Tuple of (device, created).
    """
    device = await get_device_by_token(db, token)
    if device is not None:
        return device, False

    device = Device(token=token)
    db.add(device)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        device = await get_device_by_token(db, token)
        if device is None:
            raise
        return device, False
    logger.info("device_created", device_id=device.id)
    return device, True


async def resolve_identity(
    db: AsyncSession,
    device_token: str,
    session_account_id: int | None = None,
) -> Identity:
    """
    Resolve the request identity.

    The session account wins when it still exists; otherwise the first account
    bound to the device token is used.
    """
    device, _ = await get_or_create_device(db, device_token)

    account = None
    if session_account_id is not None:
        account = await get_account_by_id(db, session_account_id)
    if account is None:
        account = await get_account_by_device(db, device)
    return Identity(device=device, account=account)


# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------


async def create_account(
    db: AsyncSession,
    username: str,
    password: str,
    *,
    is_admin: bool = False,
    avatar_url: str | None = None,
) -> Account:
    """
    Create an account (admin action or bootstrap).

    Raises:
        ClientError: If the password breaks the length rules.
        ConflictError: If the username is taken.
    """
    username = username.strip()
    try:
        validate_password_strength(password)
    except PasswordStrengthError as e:
        raise ClientError(str(e)) from e

    if await get_account_by_username(db, username) is not None:
        msg = f"Username '{username}' is already taken"
        raise ConflictError(msg)

    account = Account(
        username=username,
        password_hash=hash_password(password),
        is_admin=is_admin,
        avatar_url=avatar_url,
    )
    db.add(account)
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        msg = f"Username '{username}' is already taken"
        raise ConflictError(msg) from e
    logger.info("account_created", account_id=account.id, username=username, is_admin=is_admin)
    return account


async def bind_device(db: AsyncSession, account: Account, device: Device) -> bool:
    """Append a device binding if absent. Returns True if a binding was added."""
    existing = await db.execute(
        select(AccountDevice.id).where(
            AccountDevice.account_id == account.id,
            AccountDevice.device_id == device.id,
        )
    )
    if existing.scalar_one_or_none() is not None:
        return False
    db.add(AccountDevice(account_id=account.id, device_id=device.id))
    await db.flush()
    logger.info("device_bound", account_id=account.id, device_id=device.id)
    return True


async def unbind_device(db: AsyncSession, device: Device) -> int:
    """Remove every account binding of a device. Returns the number removed."""
    result = await db.execute(delete(AccountDevice).where(AccountDevice.device_id == device.id))
    await db.commit()
    removed = result.rowcount or 0
    if removed:
        logger.info("device_unbound", device_id=device.id, bindings=removed)
    return removed


async def authenticate(db: AsyncSession, identity: Identity, username: str, password: str) -> Account:
    """
    Check credentials and bind the requesting device to the account.

    Existing bindings of the device to other accounts are kept.

    Raises:
        AuthError: On unknown username or wrong password.
    """
    account = await get_account_by_username(db, username.strip())
    valid = verify_password(password, account.password_hash if account is not None else None)
    if account is None or not valid:
        logger.info("login_failed", username=username)
        raise AuthError("Invalid username or password")

    if check_needs_rehash(account.password_hash):
        account.password_hash = hash_password(password)

    await bind_device(db, account, identity.device)
    await db.commit()
    logger.info("login_succeeded", account_id=account.id)
    return account


# ---------------------------------------------------------------------------
# Shared passphrase (device upload permission)
# ---------------------------------------------------------------------------


async def authorize_device(db: AsyncSession, device: Device, code: str) -> Device:
    """
    Grant a device permanent upload permission if ``code`` matches the passphrase.

    Raises:
        ForbiddenError: If no passphrase is configured.
        AuthError: If the code is wrong.
    """
    secret = get_settings().admin_passphrase
    if not secret:
        raise ForbiddenError("Passphrase access is disabled")
    if not hmac.compare_digest(code.encode(), secret.encode()):
        logger.info("passphrase_rejected", device_id=device.id)
        raise AuthError("Invalid code")

    if not device.can_upload:
        device.can_upload = True
        await db.commit()
        logger.info("device_authorized", device_id=device.id)
    return device
