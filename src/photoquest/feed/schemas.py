"""Response models for the public feed pages."""

from __future__ import annotations

from pydantic import BaseModel

from photoquest.auth.schemas import AccountResponse
from photoquest.moderation.schemas import GalleryPhotoResponse
from photoquest.quests.schemas import QuestResponse, RewardProgressResponse, RewardTierResponse


class LandingResponse(BaseModel):
    account: AccountResponse | None = None
    can_upload: bool
    is_admin: bool
    photos: list[GalleryPhotoResponse]


class QuestFeedResponse(BaseModel):
    account: AccountResponse | None = None
    photos: list[GalleryPhotoResponse]
    quests: list[QuestResponse]
    rewards: list[RewardTierResponse]
    progress: RewardProgressResponse
