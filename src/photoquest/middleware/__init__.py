"""Middleware registration."""

from fastapi import FastAPI

from photoquest.config import Settings
from photoquest.middleware.device_token import DeviceTokenMiddleware
from photoquest.middleware.error_handler import setup_error_handlers
from photoquest.middleware.logging import setup_logging
from photoquest.middleware.request_id import RequestIdMiddleware


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Register all middleware in the correct order.

    FastAPI/Starlette executes middleware in reverse-add order (last added = outermost).
    The request id is bound first so device-token log lines carry it.
    """
    setup_logging(settings)
    setup_error_handlers(app)
    app.add_middleware(
        DeviceTokenMiddleware,
        cookie_name=settings.device_cookie_name,
        max_age_seconds=settings.device_cookie_max_age_days * 24 * 60 * 60,
    )
    app.add_middleware(RequestIdMiddleware)
