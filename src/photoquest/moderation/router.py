"""Moderation endpoints: pending queue decisions and gallery removal (admin only)."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from photoquest.auth.dependencies import require_admin
from photoquest.config import get_settings
from photoquest.database import get_session
from photoquest.db.models import Account, GalleryPhoto
from photoquest.moderation.schemas import (
    ApprovalResponse,
    GalleryPhotoResponse,
    PhotoDeletionResponse,
    RejectionResponse,
)
from photoquest.moderation.service import (
    approve_pending,
    delete_gallery_photo,
    list_pending,
    reject_pending,
)
from photoquest.storage.blob_store import BaseBlobStore, get_blob_store
from photoquest.uploads.router import pending_photo_response
from photoquest.uploads.schemas import PendingPhotoResponse

router = APIRouter(prefix="/admin", tags=["Moderation"])


def gallery_photo_response(photo: GalleryPhoto) -> GalleryPhotoResponse:
    return GalleryPhotoResponse(
        id=photo.id,
        url=photo.url,
        account_id=photo.account_id,
        taken_at=photo.taken_at,
        uploaded_at=photo.uploaded_at,
    )


@router.get("/pending", response_model=list[PendingPhotoResponse])
async def pending_queue(
    _admin: Account = Depends(require_admin),
    db: AsyncSession = Depends(get_session),
) -> list[PendingPhotoResponse]:
    """Pending uploads, oldest first."""
    return [pending_photo_response(p) for p in await list_pending(db)]


@router.post("/pending/{pending_id}/approve", response_model=ApprovalResponse)
async def approve(
    pending_id: int,
    _admin: Account = Depends(require_admin),
    db: AsyncSession = Depends(get_session),
) -> ApprovalResponse:
    """Publish a pending photo and credit its quest points."""
    result = await approve_pending(db, pending_id)
    return ApprovalResponse(
        photo=gallery_photo_response(result.photo),
        points_awarded=result.points_awarded,
        total_points=result.total_points,
    )


@router.post("/pending/{pending_id}/reject", response_model=RejectionResponse)
async def reject(
    pending_id: int,
    _admin: Account = Depends(require_admin),
    db: AsyncSession = Depends(get_session),
    blob_store: BaseBlobStore = Depends(get_blob_store),
) -> RejectionResponse:
    """Discard a pending photo."""
    purged = await reject_pending(db, blob_store, pending_id, purge=get_settings().purge_rejected_blobs)
    return RejectionResponse(rejected=pending_id, blob_purged=purged)


@router.post("/photo/{photo_id}/delete", response_model=PhotoDeletionResponse)
async def delete_photo(
    photo_id: int,
    _admin: Account = Depends(require_admin),
    db: AsyncSession = Depends(get_session),
    blob_store: BaseBlobStore = Depends(get_blob_store),
) -> PhotoDeletionResponse:
    """Remove a photo from the public gallery."""
    purged = await delete_gallery_photo(db, blob_store, photo_id)
    return PhotoDeletionResponse(deleted=photo_id, blob_purged=purged)
