"""Pydantic models for quests, reward tiers and progress."""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, Field

from photoquest.db.models import QuestType


class QuestCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=120)
    description: str = Field("", max_length=2000)
    type: QuestType
    points: int = Field(..., ge=0)
    start_at: date | None = None
    end_at: date | None = None


class QuestResponse(BaseModel):
    id: int
    title: str
    description: str
    type: QuestType
    points: int
    start_at: date | None = None
    end_at: date | None = None
    active: bool


class RewardTierCreateRequest(BaseModel):
    points_required: int = Field(..., ge=0)
    description: str = Field("", max_length=255)
    icon_url: str | None = None


class RewardTierResponse(BaseModel):
    id: int
    points_required: int
    description: str
    icon_url: str | None = None


class RewardProgressResponse(BaseModel):
    total: int
    percent: float
    label: str
    prev: RewardTierResponse | None = None
    next: RewardTierResponse | None = None


class ProgressCorrectionRequest(BaseModel):
    total_points: int = Field(..., ge=0)


class ProgressResponse(BaseModel):
    total_points: int
