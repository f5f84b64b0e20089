"""
Moderation pipeline.

A pending photo is decided exactly once: approval promotes it to the gallery
and credits its quest's points, rejection discards it. Approval runs as one
transaction holding a row lock on the pending photo, so two concurrent
approvals of the same id resolve as one success and one NotFoundError.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog
from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError

from photoquest.db.models import GalleryPhoto, PendingPhoto
from photoquest.errors import DependencyError, NotFoundError
from photoquest.quests.service import credit_points, get_quest_points, get_total_points
from photoquest.storage.blob_store import purge_blob

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from photoquest.storage.blob_store import BaseBlobStore

logger = structlog.get_logger()


@dataclass
class ApprovalResult:
    photo: GalleryPhoto
    points_awarded: int
    total_points: int


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


async def list_pending(db: AsyncSession) -> list[PendingPhoto]:
    """Pending queue, oldest first."""
    result = await db.execute(select(PendingPhoto).order_by(PendingPhoto.created_at, PendingPhoto.id))
    return list(result.scalars().all())


async def list_gallery(db: AsyncSession, limit: int) -> list[GalleryPhoto]:
    """Public gallery, most recently taken (or uploaded) first."""
    result = await db.execute(
        select(GalleryPhoto)
        .order_by(
            func.coalesce(GalleryPhoto.taken_at, GalleryPhoto.uploaded_at).desc(),
            GalleryPhoto.id.desc(),
        )
        .limit(limit)
    )
    return list(result.scalars().all())


# ---------------------------------------------------------------------------
# Decisions
# ---------------------------------------------------------------------------


async def approve_pending(db: AsyncSession, pending_id: int) -> ApprovalResult:
    """
    Promote a pending photo to the gallery and credit its quest points.

    Insert, credit and delete commit together or not at all.

    Raises:
        NotFoundError: No such pending photo (including one approved concurrently).
        DependencyError: The transaction failed and was rolled back.
    """
    try:
        pending = (
            await db.execute(
                select(PendingPhoto).where(PendingPhoto.id == pending_id).with_for_update()
            )
        ).scalar_one_or_none()
        if pending is None:
            raise NotFoundError("Pending photo not found")

        quest_id = pending.quest_id
        points = await get_quest_points(db, quest_id)

        photo = GalleryPhoto(
            blob_id=pending.blob_id,
            url=pending.url,
            account_id=pending.account_id,
            taken_at=pending.taken_at,
        )
        db.add(photo)
        await db.flush()

        if points > 0:
            total = await credit_points(db, points)
        else:
            total = await get_total_points(db)

        removed = await db.execute(delete(PendingPhoto).where(PendingPhoto.id == pending_id))
        if removed.rowcount != 1:
            raise NotFoundError("Pending photo not found")

        await db.commit()
    except NotFoundError:
        await db.rollback()
        raise
    except SQLAlchemyError as e:
        await db.rollback()
        logger.exception("approval_failed", pending_id=pending_id)
        raise DependencyError("Approval failed, nothing was changed") from e

    logger.info(
        "photo_approved",
        pending_id=pending_id,
        photo_id=photo.id,
        quest_id=quest_id,
        points=points,
        total_points=total,
    )
    return ApprovalResult(photo=photo, points_awarded=points, total_points=total)


async def reject_pending(
    db: AsyncSession,
    blob_store: BaseBlobStore,
    pending_id: int,
    *,
    purge: bool = True,
) -> bool:
    """
    Discard a pending photo, then optionally purge its blob.

    Returns True if the blob was purged.

    Raises:
        NotFoundError: No such pending photo.
    """
    pending = (
        await db.execute(select(PendingPhoto).where(PendingPhoto.id == pending_id))
    ).scalar_one_or_none()
    if pending is None:
        raise NotFoundError("Pending photo not found")
    blob_id = pending.blob_id

    removed = await db.execute(delete(PendingPhoto).where(PendingPhoto.id == pending_id))
    if removed.rowcount != 1:
        await db.rollback()
        raise NotFoundError("Pending photo not found")
    await db.commit()
    logger.info("photo_rejected", pending_id=pending_id)

    return await purge_blob(blob_store, blob_id) if purge else False


async def delete_gallery_photo(db: AsyncSession, blob_store: BaseBlobStore, photo_id: int) -> bool:
    """
    Remove a photo from the public gallery.

    The blob is purged first, best-effort; the row goes regardless.
    Returns True if the blob was purged.

    Raises:
        NotFoundError: No such gallery photo.
    """
    photo = (
        await db.execute(select(GalleryPhoto).where(GalleryPhoto.id == photo_id))
    ).scalar_one_or_none()
    if photo is None:
        raise NotFoundError("Photo not found")

    purged = await purge_blob(blob_store, photo.blob_id)

    await db.execute(delete(GalleryPhoto).where(GalleryPhoto.id == photo_id))
    await db.commit()
    logger.info("gallery_photo_deleted", photo_id=photo_id, blob_purged=purged)
    return purged
