"""
Blob store with provider abstraction.

Uploaded images live on a third-party media host. Only Cloudinary is wired up;
the provider is selected via configuration.
"""

from __future__ import annotations

import asyncio
import io
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

import cloudinary.uploader
import structlog

from photoquest.config import get_settings
from photoquest.errors import StorageError

logger = structlog.get_logger()


@dataclass(frozen=True)
class StoredBlob:
    """Where a stored image can be fetched and how to delete it later."""

    url: str
    identifier: str


class BaseBlobStore(ABC):
    """Abstract base class for blob storage providers."""

    @abstractmethod
    async def store(self, data: bytes, folder: str) -> StoredBlob:
        """Store image bytes. Raises StorageError on failure."""
        ...

    @abstractmethod
    async def delete(self, identifier: str) -> bool:
        """Delete a stored blob. Returns True on success, never raises."""
        ...


class CloudinaryBlobStore(BaseBlobStore):
    """Store images on Cloudinary. The SDK is blocking, so calls run in a worker thread."""

    def __init__(self, cloud_name: str, api_key: str, api_secret: str) -> None:
        self._credentials: dict[str, Any] = {
            "cloud_name": cloud_name,
            "api_key": api_key,
            "api_secret": api_secret,
        }

    async def store(self, data: bytes, folder: str) -> StoredBlob:
        """Upload via the Cloudinary upload API."""
        try:
            result = await asyncio.to_thread(
                cloudinary.uploader.upload,
                io.BytesIO(data),
                folder=folder,
                resource_type="image",
                **self._credentials,
            )
        except Exception as e:
            logger.exception("blob_store_failed", provider="cloudinary", folder=folder, size=len(data))
            raise StorageError from e

        url = result.get("secure_url")
        identifier = result.get("public_id")
        if not url or not identifier:
            logger.error("blob_store_incomplete", provider="cloudinary", result_keys=sorted(result))
            raise StorageError("Image storage returned an incomplete result")

        logger.info("blob_stored", provider="cloudinary", identifier=identifier, size=len(data))
        return StoredBlob(url=url, identifier=identifier)

    async def delete(self, identifier: str) -> bool:
        """Destroy via the Cloudinary upload API."""
        try:
            result = await asyncio.to_thread(
                cloudinary.uploader.destroy,
                identifier,
                resource_type="image",
                **self._credentials,
            )
        except Exception:
            logger.warning("blob_delete_failed", provider="cloudinary", identifier=identifier, exc_info=True)
            return False

        if result.get("result") != "ok":
            logger.warning("blob_delete_failed", provider="cloudinary", identifier=identifier, result=result)
            return False
        logger.info("blob_deleted", provider="cloudinary", identifier=identifier)
        return True


def _create_blob_store() -> BaseBlobStore:
    """Create blob store based on configuration."""
    settings = get_settings()
    provider_name = settings.blob_provider.lower()

    if provider_name == "cloudinary":
        return CloudinaryBlobStore(
            cloud_name=settings.cloudinary_cloud_name,
            api_key=settings.cloudinary_api_key,
            api_secret=settings.cloudinary_api_secret,
        )
    msg = f"Unsupported blob provider: {provider_name}"
    raise ValueError(msg)


# Module-level singleton
_blob_store: BaseBlobStore | None = None


def get_blob_store() -> BaseBlobStore:
    """Get or create the blob store singleton (also used as a FastAPI dependency)."""
    global _blob_store  # noqa: PLW0603
    if _blob_store is None:
        _blob_store = _create_blob_store()
    return _blob_store


def reset_blob_store() -> None:
    """Reset the blob store singleton (for testing)."""
    global _blob_store  # noqa: PLW0603
    _blob_store = None


async def purge_blob(blob_store: BaseBlobStore, identifier: str) -> bool:
    """Best-effort delete. A failure is logged by the provider and reported as False."""
    if not identifier:
        return False
    return await blob_store.delete(identifier)
