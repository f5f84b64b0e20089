"""Domain errors.

Services raise these; ``photoquest.middleware.error_handler`` turns them into
HTTP responses using ``status_code`` and ``detail``.
"""

from __future__ import annotations


class PhotoQuestError(Exception):
    """Base class for all domain errors."""

    status_code: int = 500
    default_detail: str = "Internal server error"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


# --- Client errors ---


class ClientError(PhotoQuestError):
    status_code = 400
    default_detail = "Bad request"


class UnsupportedMediaError(ClientError):
    status_code = 415
    default_detail = "Allowed formats: JPG, PNG"


class PayloadTooLargeError(ClientError):
    status_code = 413
    default_detail = "File too large"


class ConflictError(ClientError):
    status_code = 409
    default_detail = "Already exists"


# --- Auth errors ---


class AuthError(PhotoQuestError):
    status_code = 401
    default_detail = "Invalid credentials"


class LoginRequiredError(AuthError):
    """Soft gate: rendered as a redirect to the landing page."""

    default_detail = "Login required"


class ForbiddenError(AuthError):
    status_code = 403
    default_detail = "Forbidden"


# --- Lookup errors ---


class NotFoundError(PhotoQuestError):
    status_code = 404
    default_detail = "Not found"


# --- Dependency failures ---


class DependencyError(PhotoQuestError):
    status_code = 500
    default_detail = "Service dependency failure"


class StorageError(DependencyError):
    default_detail = "Image storage failed"
