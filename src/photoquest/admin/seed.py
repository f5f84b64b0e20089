"""Startup seeding: bootstrap admin account and the global progress row."""

from __future__ import annotations

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from photoquest.auth.service import create_account, get_account_by_username
from photoquest.config import Settings
from photoquest.quests.service import get_or_create_progress

logger = structlog.get_logger()


async def seed_bootstrap_admin(db: AsyncSession, settings: Settings) -> bool:
    """Create the configured admin account if it does not exist. Returns True if created."""
    username = settings.bootstrap_admin_username.strip()
    if not username or not settings.bootstrap_admin_password:
        return False
    if await get_account_by_username(db, username) is not None:
        return False
    await create_account(db, username, settings.bootstrap_admin_password, is_admin=True)
    logger.info("bootstrap_admin_created", username=username)
    return True


async def seed_progress(db: AsyncSession) -> None:
    """Make sure the single progress row exists."""
    await get_or_create_progress(db)
    await db.commit()
