"""Admin endpoints: dashboard, users, quests, reward tiers, progress correction."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from photoquest.admin.schemas import (
    AccountCreateRequest,
    AccountDeletedResponse,
    AdminDashboardResponse,
    DeletedResponse,
)
from photoquest.admin.service import delete_account, list_accounts
from photoquest.auth.dependencies import require_admin
from photoquest.auth.router import account_response
from photoquest.auth.schemas import AccountResponse
from photoquest.auth.service import create_account
from photoquest.database import get_session
from photoquest.db.models import Account
from photoquest.moderation.service import list_pending
from photoquest.quests.schemas import (
    ProgressCorrectionRequest,
    ProgressResponse,
    QuestCreateRequest,
    QuestResponse,
    RewardTierCreateRequest,
    RewardTierResponse,
)
from photoquest.quests.service import (
    create_quest,
    create_reward_tier,
    delete_quest,
    delete_reward_tier,
    get_total_points,
    list_quests,
    list_reward_tiers,
    set_total_points,
)
from photoquest.quests.views import quest_response, reward_tier_response, reward_tier_responses
from photoquest.storage.blob_store import BaseBlobStore, get_blob_store
from photoquest.uploads.router import pending_photo_response

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get("", response_model=AdminDashboardResponse)
async def dashboard(
    _admin: Account = Depends(require_admin),
    db: AsyncSession = Depends(get_session),
) -> AdminDashboardResponse:
    """Everything the admin page shows."""
    quests = await list_quests(db)
    return AdminDashboardResponse(
        pending=[pending_photo_response(p) for p in await list_pending(db)],
        users=[account_response(a) for a in await list_accounts(db)],
        quests=[quest_response(q) for q in quests],
        rewards=reward_tier_responses(await list_reward_tiers(db)),
        total_points=await get_total_points(db),
    )


# ── Users ──


@router.post("/users/create", response_model=AccountResponse, status_code=201)
async def create_user(
    body: AccountCreateRequest,
    _admin: Account = Depends(require_admin),
    db: AsyncSession = Depends(get_session),
) -> AccountResponse:
    """Create an account."""
    account = await create_account(
        db,
        body.username,
        body.password,
        is_admin=body.is_admin,
        avatar_url=body.avatar_url,
    )
    return account_response(account)


@router.post("/users/{account_id}/delete", response_model=AccountDeletedResponse)
async def delete_user(
    account_id: int,
    admin: Account = Depends(require_admin),
    db: AsyncSession = Depends(get_session),
    blob_store: BaseBlobStore = Depends(get_blob_store),
) -> AccountDeletedResponse:
    """Delete an account and its photos."""
    removed = await delete_account(db, blob_store, account_id, acting_admin=admin)
    return AccountDeletedResponse(deleted=account_id, photos_removed=removed)


# ── Quests ──


@router.post("/quests/create", response_model=QuestResponse, status_code=201)
async def create_quest_route(
    body: QuestCreateRequest,
    _admin: Account = Depends(require_admin),
    db: AsyncSession = Depends(get_session),
) -> QuestResponse:
    """Create a quest."""
    quest = await create_quest(
        db,
        title=body.title,
        description=body.description,
        quest_type=body.type,
        points=body.points,
        start_at=body.start_at,
        end_at=body.end_at,
    )
    return quest_response(quest)


@router.post("/quests/{quest_id}/delete", response_model=DeletedResponse)
async def delete_quest_route(
    quest_id: int,
    _admin: Account = Depends(require_admin),
    db: AsyncSession = Depends(get_session),
) -> DeletedResponse:
    """Delete a quest."""
    await delete_quest(db, quest_id)
    return DeletedResponse(deleted=quest_id)


# ── Reward tiers ──


@router.post("/rewards/create", response_model=RewardTierResponse, status_code=201)
async def create_reward_route(
    body: RewardTierCreateRequest,
    _admin: Account = Depends(require_admin),
    db: AsyncSession = Depends(get_session),
) -> RewardTierResponse:
    """Create a reward tier."""
    tier = await create_reward_tier(
        db,
        points_required=body.points_required,
        description=body.description,
        icon_url=body.icon_url,
    )
    return reward_tier_response(tier)


@router.post("/rewards/{tier_id}/delete", response_model=DeletedResponse)
async def delete_reward_route(
    tier_id: int,
    _admin: Account = Depends(require_admin),
    db: AsyncSession = Depends(get_session),
) -> DeletedResponse:
    """Delete a reward tier."""
    await delete_reward_tier(db, tier_id)
    return DeletedResponse(deleted=tier_id)


# ── Progress ──


@router.post("/progress", response_model=ProgressResponse)
async def correct_progress(
    body: ProgressCorrectionRequest,
    _admin: Account = Depends(require_admin),
    db: AsyncSession = Depends(get_session),
) -> ProgressResponse:
    """Overwrite the global point total."""
    return ProgressResponse(total_points=await set_total_points(db, body.total_points))
