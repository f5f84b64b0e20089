"""Response models for moderation and gallery endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class GalleryPhotoResponse(BaseModel):
    id: int
    url: str
    account_id: int | None = None
    taken_at: datetime | None = None
    uploaded_at: datetime | None = None


class ApprovalResponse(BaseModel):
    photo: GalleryPhotoResponse
    points_awarded: int
    total_points: int


class RejectionResponse(BaseModel):
    rejected: int
    blob_purged: bool


class PhotoDeletionResponse(BaseModel):
    deleted: int
    blob_purged: bool
