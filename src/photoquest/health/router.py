"""Liveness, readiness and version endpoints. None of them touch the device cookie."""

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import AsyncSession

from photoquest.config import get_settings
from photoquest.database import get_session
from photoquest.db.models import GlobalProgress
from photoquest.quests.service import PROGRESS_ROW_ID

router = APIRouter()


@router.get("/healthz", response_class=PlainTextResponse)
async def healthz() -> str:
    """Liveness probe: a fixed ``ok`` while the process serves requests."""
    return "ok"


@router.get("/ready")
async def readiness(
    db: AsyncSession = Depends(get_session),  # noqa: B008
) -> dict[str, object]:
    """Readiness probe: database reachable and the progress row seeded."""
    checks: dict[str, object] = {}

    try:
        await db.execute(text("SELECT 1"))
        checks["database"] = "ok"
        seeded = await db.execute(select(GlobalProgress.id).where(GlobalProgress.id == PROGRESS_ROW_ID))
        checks["progress"] = "ok" if seeded.scalar_one_or_none() is not None else "missing"
    except Exception as exc:  # noqa: BLE001
        checks.setdefault("database", f"error: {exc}")

    all_ok = all(v == "ok" for v in checks.values())
    return {"status": "ready" if all_ok else "degraded", "checks": checks}


@router.get("/version")
async def version() -> dict[str, str]:
    settings = get_settings()
    return {
        "version": settings.app_version,
        "environment": settings.environment,
    }
