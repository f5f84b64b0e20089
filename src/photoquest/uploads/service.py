"""
Upload intake.

Validates an incoming image, reads its capture time, stores the bytes in the
blob store and records a pending photo. The blob is always stored before the
row is written, so a storage failure never leaves a row behind. Nothing here
touches the public gallery or the point total.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from sqlalchemy.exc import SQLAlchemyError

from photoquest.config import get_settings
from photoquest.db.models import PendingPhoto
from photoquest.errors import ClientError, DependencyError, PayloadTooLargeError, UnsupportedMediaError
from photoquest.storage.blob_store import purge_blob
from photoquest.storage.exif import extract_capture_time

if TYPE_CHECKING:
    from fastapi import UploadFile
    from sqlalchemy.ext.asyncio import AsyncSession

    from photoquest.auth.service import Identity
    from photoquest.storage.blob_store import BaseBlobStore

logger = structlog.get_logger()

# Quest ids are 32-bit signed integers in the schema
_MAX_QUEST_ID = 2**31 - 1

# Leading bytes of each accepted format
_SIGNATURES: dict[str, bytes] = {
    "image/jpeg": b"\xff\xd8\xff",
    "image/png": b"\x89PNG\r\n\x1a\n",
}


def normalize_content_type(content_type: str | None) -> str:
    """Lower-cased media type without parameters."""
    return (content_type or "").split(";", 1)[0].strip().lower()


def check_content_type(content_type: str | None) -> str:
    """Reject declared types outside the allowed set. Returns the normalized type."""
    normalized = normalize_content_type(content_type)
    if normalized not in get_settings().allowed_content_types:
        raise UnsupportedMediaError
    return normalized


def check_payload(data: bytes, content_type: str) -> None:
    """
    Validate the image bytes against the size cap and the declared format.

    Raises:
        ClientError: Empty file.
        PayloadTooLargeError: Over ``max_upload_bytes``.
        UnsupportedMediaError: Bytes do not look like the declared format.
    """
    settings = get_settings()
    if not data:
        raise ClientError("Empty file")
    if len(data) > settings.max_upload_bytes:
        limit_mib = settings.max_upload_bytes / (1024 * 1024)
        raise PayloadTooLargeError(f"File too large (max {limit_mib:g} MiB)")
    signature = _SIGNATURES.get(content_type)
    if signature is not None and not data.startswith(signature):
        raise UnsupportedMediaError("File content does not match its declared format")


async def read_upload(file: UploadFile) -> bytes:
    """Read at most one byte past the cap so oversized files are never fully buffered."""
    return await file.read(get_settings().max_upload_bytes + 1)


def parse_quest_ref(value: str | None) -> int | None:
    """Quest id from a form field. Absent, non-numeric or out-of-range values become None."""
    if value is None:
        return None
    try:
        quest_id = int(value.strip())
    except ValueError:
        return None
    if not 0 < quest_id <= _MAX_QUEST_ID:
        return None
    return quest_id


async def intake_upload(
    db: AsyncSession,
    blob_store: BaseBlobStore,
    identity: Identity,
    data: bytes,
    content_type: str,
    quest_ref: str | None = None,
) -> PendingPhoto:
    """
    Store a validated upload and queue it for moderation.

    Raises:
        ClientError (and subclasses): Invalid payload; nothing is stored.
        StorageError: The blob store failed; nothing is written.
        DependencyError: The pending row could not be written; the blob is purged.
    """
    check_payload(data, content_type)

    taken_at = extract_capture_time(data)
    quest_id = parse_quest_ref(quest_ref)
    account_id = identity.account.id if identity.account is not None else None

    stored = await blob_store.store(data, folder=get_settings().upload_folder)
    logger.info("upload_stored", identifier=stored.identifier, account_id=account_id, quest_id=quest_id)

    pending = PendingPhoto(
        blob_id=stored.identifier,
        url=stored.url,
        account_id=account_id,
        device_token=identity.device.token,
        quest_id=quest_id,
        taken_at=taken_at,
    )
    db.add(pending)
    try:
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.exception("pending_write_failed", identifier=stored.identifier)
        await purge_blob(blob_store, stored.identifier)
        raise DependencyError("Could not record the upload") from e

    logger.info("pending_created", pending_id=pending.id, account_id=account_id, quest_id=quest_id)
    return pending
