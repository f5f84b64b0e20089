"""Request/response schemas for the admin dashboard."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from photoquest.auth.schemas import AccountResponse
from photoquest.quests.schemas import QuestResponse, RewardTierResponse
from photoquest.uploads.schemas import PendingPhotoResponse


class AccountCreateRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=50)
    password: str = Field(..., min_length=1, max_length=128)
    is_admin: bool = False
    avatar_url: str | None = None

    @field_validator("username")
    @classmethod
    def strip_username(cls, v: str) -> str:
        """Usernames are stored trimmed."""
        v = v.strip()
        if len(v) < 3:
            msg = "Username must be at least 3 characters"
            raise ValueError(msg)
        return v


class AdminDashboardResponse(BaseModel):
    pending: list[PendingPhotoResponse]
    users: list[AccountResponse]
    quests: list[QuestResponse]
    rewards: list[RewardTierResponse]
    total_points: int


class DeletedResponse(BaseModel):
    deleted: int


class AccountDeletedResponse(BaseModel):
    deleted: int
    photos_removed: int
