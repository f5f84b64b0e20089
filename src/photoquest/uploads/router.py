"""Upload endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from photoquest.auth.dependencies import require_uploader
from photoquest.auth.service import Identity
from photoquest.database import get_session
from photoquest.db.models import PendingPhoto
from photoquest.errors import ClientError
from photoquest.storage.blob_store import BaseBlobStore, get_blob_store
from photoquest.uploads.schemas import PendingPhotoResponse
from photoquest.uploads.service import check_content_type, intake_upload, read_upload

router = APIRouter(tags=["Uploads"])


def pending_photo_response(pending: PendingPhoto) -> PendingPhotoResponse:
    return PendingPhotoResponse(
        id=pending.id,
        url=pending.url,
        account_id=pending.account_id,
        quest_id=pending.quest_id,
        taken_at=pending.taken_at,
        created_at=pending.created_at,
    )


@router.post("/upload", response_model=PendingPhotoResponse, status_code=201)
async def upload(
    image: UploadFile | None = File(None),
    quest_id: str | None = Form(None),
    identity: Identity = Depends(require_uploader),
    db: AsyncSession = Depends(get_session),
    blob_store: BaseBlobStore = Depends(get_blob_store),
) -> PendingPhotoResponse:
    """Upload a JPEG/PNG (optionally for a quest). It stays pending until an admin decides."""
    if image is None:
        raise ClientError("No image provided")
    content_type = check_content_type(image.content_type)
    data = await read_upload(image)
    pending = await intake_upload(db, blob_store, identity, data, content_type, quest_id)
    return pending_photo_response(pending)
