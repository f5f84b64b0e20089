"""Quest, reward tier and global progress service."""

from __future__ import annotations

from datetime import date, datetime, timezone

import structlog
from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from photoquest.db.models import GlobalProgress, Quest, QuestType, RewardTier
from photoquest.errors import ClientError, NotFoundError

logger = structlog.get_logger()

PROGRESS_ROW_ID = 1


# ---------------------------------------------------------------------------
# Quest activity
# ---------------------------------------------------------------------------


def weekly_window_contains(start_at: date | None, end_at: date | None, today: date) -> bool:
    """True if ``today`` lies in [start_at, end_at]. An open bound never matches."""
    if start_at is None or end_at is None:
        return False
    return start_at <= today <= end_at


def today_utc() -> date:
    return datetime.now(timezone.utc).date()


async def refresh_quest_activity(db: AsyncSession, today: date | None = None) -> int:
    """Recompute the active flag of every weekly quest. Returns how many flags changed."""
    today = today or today_utc()
    result = await db.execute(select(Quest).where(Quest.type == QuestType.WEEKLY.value))
    changed = 0
    for quest in result.scalars():
        active = weekly_window_contains(quest.start_at, quest.end_at, today)
        if quest.active != active:
            quest.active = active
            changed += 1
    if changed:
        await db.commit()
        logger.info("quest_activity_refreshed", changed=changed, today=today.isoformat())
    return changed


async def list_quests(db: AsyncSession, today: date | None = None) -> list[Quest]:
    """All quests, weekly flags refreshed first."""
    await refresh_quest_activity(db, today)
    result = await db.execute(select(Quest).order_by(Quest.id))
    return list(result.scalars().all())


async def list_active_quests(db: AsyncSession, today: date | None = None) -> list[Quest]:
    """Quests currently open for submissions, weekly flags refreshed first."""
    await refresh_quest_activity(db, today)
    result = await db.execute(select(Quest).where(Quest.active.is_(True)).order_by(Quest.id))
    return list(result.scalars().all())


async def create_quest(
    db: AsyncSession,
    *,
    title: str,
    description: str,
    quest_type: QuestType,
    points: int,
    start_at: date | None = None,
    end_at: date | None = None,
    today: date | None = None,
) -> Quest:
    """
    Create a quest. Only weekly quests keep an active window.

    Raises:
        ClientError: If a weekly quest lacks a valid window or points are negative.
    """
    if points < 0:
        raise ClientError("Points must not be negative")

    if quest_type is QuestType.WEEKLY:
        if start_at is None or end_at is None:
            raise ClientError("Weekly quests need a start and an end date")
        if start_at > end_at:
            raise ClientError("Quest start date must not be after its end date")
        active = weekly_window_contains(start_at, end_at, today or today_utc())
    else:
        start_at = end_at = None
        active = True

    quest = Quest(
        title=title.strip(),
        description=description.strip(),
        type=quest_type.value,
        points=points,
        start_at=start_at,
        end_at=end_at,
        active=active,
    )
    db.add(quest)
    await db.commit()
    logger.info("quest_created", quest_id=quest.id, type=quest.type, points=points)
    return quest


async def delete_quest(db: AsyncSession, quest_id: int) -> None:
    """Delete a quest. Pending uploads referencing it lose their points."""
    result = await db.execute(delete(Quest).where(Quest.id == quest_id))
    if not result.rowcount:
        await db.rollback()
        raise NotFoundError("Quest not found")
    await db.commit()
    logger.info("quest_deleted", quest_id=quest_id)


async def get_quest_points(db: AsyncSession, quest_id: int | None) -> int:
    """Point value of a quest; 0 when there is no quest or it no longer exists."""
    if quest_id is None:
        return 0
    result = await db.execute(select(Quest.points).where(Quest.id == quest_id))
    points = result.scalar_one_or_none()
    return max(points or 0, 0)


# ---------------------------------------------------------------------------
# Reward tiers
# ---------------------------------------------------------------------------


async def list_reward_tiers(db: AsyncSession) -> list[RewardTier]:
    """Reward tiers, ascending by threshold."""
    result = await db.execute(select(RewardTier).order_by(RewardTier.points_required, RewardTier.id))
    return list(result.scalars().all())


async def create_reward_tier(
    db: AsyncSession,
    *,
    points_required: int,
    description: str = "",
    icon_url: str | None = None,
) -> RewardTier:
    """Create a reward tier."""
    if points_required < 0:
        raise ClientError("Threshold must not be negative")
    tier = RewardTier(points_required=points_required, description=description.strip(), icon_url=icon_url)
    db.add(tier)
    await db.commit()
    logger.info("reward_tier_created", tier_id=tier.id, points_required=points_required)
    return tier


async def delete_reward_tier(db: AsyncSession, tier_id: int) -> None:
    """Delete a reward tier."""
    result = await db.execute(delete(RewardTier).where(RewardTier.id == tier_id))
    if not result.rowcount:
        await db.rollback()
        raise NotFoundError("Reward tier not found")
    await db.commit()
    logger.info("reward_tier_deleted", tier_id=tier_id)


# ---------------------------------------------------------------------------
# Global progress
# ---------------------------------------------------------------------------


async def get_or_create_progress(db: AsyncSession, *, lock: bool = False) -> GlobalProgress:
    """Get the single progress row, creating it (total 0) if missing."""
    stmt = select(GlobalProgress).where(GlobalProgress.id == PROGRESS_ROW_ID)
    if lock:
        stmt = stmt.with_for_update()
    progress = (await db.execute(stmt)).scalar_one_or_none()
    if progress is None:
        progress = GlobalProgress(id=PROGRESS_ROW_ID, total_points=0)
        db.add(progress)
        await db.flush()
    return progress


async def get_total_points(db: AsyncSession) -> int:
    """Current global point total (0 before anything was credited)."""
    result = await db.execute(
        select(GlobalProgress.total_points).where(GlobalProgress.id == PROGRESS_ROW_ID)
    )
    return result.scalar_one_or_none() or 0


async def credit_points(db: AsyncSession, amount: int) -> int:
    """
    Add ``amount`` to the global total inside the caller's transaction.

    The row is locked and incremented in SQL; nothing is committed here.
    Returns the new total.
    """
    await get_or_create_progress(db, lock=True)
    await db.execute(
        update(GlobalProgress)
        .where(GlobalProgress.id == PROGRESS_ROW_ID)
        .values(
            total_points=GlobalProgress.total_points + amount,
            updated_at=datetime.now(timezone.utc),
        )
    )
    return await get_total_points(db)


async def set_total_points(db: AsyncSession, total: int) -> int:
    """Admin correction of the global total. The only write that may lower it."""
    if total < 0:
        raise ClientError("Total must not be negative")
    progress = await get_or_create_progress(db, lock=True)
    previous = progress.total_points
    await db.execute(
        update(GlobalProgress)
        .where(GlobalProgress.id == PROGRESS_ROW_ID)
        .values(total_points=total, updated_at=datetime.now(timezone.utc))
    )
    await db.commit()
    logger.info("progress_corrected", previous=previous, total=total)
    return total
