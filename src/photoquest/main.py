"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from photoquest.admin.router import router as admin_router
from photoquest.admin.seed import seed_bootstrap_admin, seed_progress
from photoquest.auth.router import router as auth_router
from photoquest.config import get_settings
from photoquest.database import close_db, get_session_factory, init_db
from photoquest.feed.router import router as feed_router
from photoquest.health.router import router as health_router
from photoquest.middleware import setup_middleware
from photoquest.moderation.router import router as moderation_router
from photoquest.uploads.router import router as uploads_router

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup and shutdown lifecycle."""
    settings = get_settings()
    await init_db(settings.database_url)

    # Seed the admin account and progress row (idempotent)
    try:
        async with get_session_factory()() as db:
            await seed_progress(db)
            await seed_bootstrap_admin(db, settings)
    except Exception:
        logger.warning("startup_seeding_failed", hint="tables may not exist yet", exc_info=True)

    yield

    await close_db()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="PhotoQuest",
        description="Photo gallery with moderated uploads and shared quest progress",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    setup_middleware(app, settings)
    app.include_router(health_router, tags=["Health"])
    app.include_router(feed_router)
    app.include_router(auth_router)
    app.include_router(uploads_router)
    app.include_router(moderation_router)
    app.include_router(admin_router)

    return app


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run("photoquest.main:app", host=settings.host, port=settings.port)


app = create_app()
