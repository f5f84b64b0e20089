"""Account administration."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from sqlalchemy import delete, select

from photoquest.auth.service import get_account_by_id
from photoquest.db.models import Account, AccountDevice, GalleryPhoto, PendingPhoto
from photoquest.errors import ClientError, NotFoundError
from photoquest.storage.blob_store import purge_blob

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from photoquest.storage.blob_store import BaseBlobStore

logger = structlog.get_logger()


async def list_accounts(db: AsyncSession) -> list[Account]:
    """All accounts, oldest first."""
    result = await db.execute(select(Account).order_by(Account.id))
    return list(result.scalars().all())


async def delete_account(
    db: AsyncSession,
    blob_store: BaseBlobStore,
    account_id: int,
    *,
    acting_admin: Account,
) -> int:
    """
    Delete an account together with its device bindings and photos.

    Stored blobs of the removed photos are purged afterwards, best-effort.
    Returns the number of photos removed.

    Raises:
        NotFoundError: No such account.
        ClientError: An admin tried to delete their own account.
    """
    if account_id == acting_admin.id:
        raise ClientError("You cannot delete your own account")
    account = await get_account_by_id(db, account_id)
    if account is None:
        raise NotFoundError("User not found")

    gallery_blobs = (
        await db.execute(select(GalleryPhoto.blob_id).where(GalleryPhoto.account_id == account_id))
    ).scalars().all()
    pending_blobs = (
        await db.execute(select(PendingPhoto.blob_id).where(PendingPhoto.account_id == account_id))
    ).scalars().all()

    await db.execute(delete(GalleryPhoto).where(GalleryPhoto.account_id == account_id))
    await db.execute(delete(PendingPhoto).where(PendingPhoto.account_id == account_id))
    await db.execute(delete(AccountDevice).where(AccountDevice.account_id == account_id))
    await db.execute(delete(Account).where(Account.id == account_id))
    await db.commit()

    blob_ids = [*gallery_blobs, *pending_blobs]
    logger.info("account_deleted", account_id=account_id, photos=len(blob_ids))
    for blob_id in blob_ids:
        await purge_blob(blob_store, blob_id)
    return len(blob_ids)
