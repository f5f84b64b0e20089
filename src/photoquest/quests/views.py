"""Conversions from quest ORM rows to response models."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from photoquest.db.models import Quest, QuestType, RewardTier
from photoquest.quests.schemas import QuestResponse, RewardProgressResponse, RewardTierResponse


def quest_response(quest: Quest) -> QuestResponse:
    return QuestResponse(
        id=quest.id,
        title=quest.title,
        description=quest.description,
        type=QuestType(quest.type),
        points=quest.points,
        start_at=quest.start_at,
        end_at=quest.end_at,
        active=quest.active,
    )


def reward_tier_response(tier: RewardTier) -> RewardTierResponse:
    return RewardTierResponse(
        id=tier.id,
        points_required=tier.points_required,
        description=tier.description,
        icon_url=tier.icon_url,
    )


def reward_progress_response(progress: dict[str, Any]) -> RewardProgressResponse:
    """Wrap the dict returned by compute_reward_progress()."""
    prev: RewardTier | None = progress["prev"]
    next_tier: RewardTier | None = progress["next"]
    return RewardProgressResponse(
        total=progress["total"],
        percent=progress["percent"],
        label=progress["label"],
        prev=reward_tier_response(prev) if prev is not None else None,
        next=reward_tier_response(next_tier) if next_tier is not None else None,
    )


def reward_tier_responses(tiers: Sequence[RewardTier]) -> list[RewardTierResponse]:
    return [reward_tier_response(t) for t in tiers]
