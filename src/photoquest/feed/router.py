"""Public feed endpoints: landing page and the quest app."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from photoquest.auth.dependencies import get_identity, require_login
from photoquest.auth.router import account_response
from photoquest.auth.service import Identity
from photoquest.config import get_settings
from photoquest.database import get_session
from photoquest.feed.schemas import LandingResponse, QuestFeedResponse
from photoquest.moderation.router import gallery_photo_response
from photoquest.moderation.service import list_gallery
from photoquest.quests.progress import compute_reward_progress
from photoquest.quests.service import get_total_points, list_active_quests, list_reward_tiers
from photoquest.quests.views import quest_response, reward_progress_response, reward_tier_responses

router = APIRouter(tags=["Feed"])


@router.get("/", response_model=LandingResponse)
async def landing(
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_session),
) -> LandingResponse:
    """Landing page: who is here and the public gallery."""
    photos = await list_gallery(db, get_settings().feed_limit)
    return LandingResponse(
        account=account_response(identity.account) if identity.account is not None else None,
        can_upload=identity.can_upload,
        is_admin=identity.is_admin,
        photos=[gallery_photo_response(p) for p in photos],
    )


@router.get("/toilet-app", response_model=QuestFeedResponse)
async def quest_app(
    identity: Identity = Depends(require_login),
    db: AsyncSession = Depends(get_session),
) -> QuestFeedResponse:
    """Gallery, open quests and the shared reward progress."""
    photos = await list_gallery(db, get_settings().feed_limit)
    quests = await list_active_quests(db)
    tiers = await list_reward_tiers(db)
    total = await get_total_points(db)
    return QuestFeedResponse(
        account=account_response(identity.account) if identity.account is not None else None,
        photos=[gallery_photo_response(p) for p in photos],
        quests=[quest_response(q) for q in quests],
        rewards=reward_tier_responses(tiers),
        progress=reward_progress_response(compute_reward_progress(total, tiers)),
    )
