"""Response models for uploads."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class PendingPhotoResponse(BaseModel):
    id: int
    url: str
    account_id: int | None = None
    quest_id: int | None = None
    taken_at: datetime | None = None
    created_at: datetime | None = None
