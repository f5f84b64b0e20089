"""Upload intake tests: validation, storage ordering, quest references."""

from datetime import datetime, timezone

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from photoquest.database import get_session_factory
from photoquest.db.models import GalleryPhoto, PendingPhoto


async def _only_pending() -> PendingPhoto:
    async with get_session_factory()() as session:
        return (await session.execute(select(PendingPhoto))).scalar_one()


class TestUploadAccepted:
    @pytest.mark.asyncio
    async def test_jpeg_is_queued(self, member_client, member_account, blob_store, jpeg_bytes, row_count):
        response = await member_client.post("/upload", files={"image": ("p.jpg", jpeg_bytes, "image/jpeg")})
        assert response.status_code == 201
        body = response.json()
        assert body["account_id"] == member_account.id
        assert body["url"].startswith("https://media.test/uploads/")
        assert body["quest_id"] is None

        assert blob_store.store_calls == 1
        assert await row_count(PendingPhoto) == 1
        assert await row_count(GalleryPhoto) == 0

    @pytest.mark.asyncio
    async def test_png_is_queued(self, member_client, png_bytes):
        response = await member_client.post("/upload", files={"image": ("p.png", png_bytes, "image/png")})
        assert response.status_code == 201

    @pytest.mark.asyncio
    async def test_records_device_and_blob(self, member_client, blob_store, jpeg_bytes):
        await member_client.post("/upload", files={"image": ("p.jpg", jpeg_bytes, "image/jpeg")})
        pending = await _only_pending()
        assert pending.device_token == member_client.cookies["device_token"]
        assert pending.blob_id in blob_store.blobs

    @pytest.mark.asyncio
    async def test_exif_capture_time(self, member_client, make_jpeg):
        data = make_jpeg(exif_datetime="2024:05:04 10:11:12")
        response = await member_client.post("/upload", files={"image": ("p.jpg", data, "image/jpeg")})
        taken_at = datetime.fromisoformat(response.json()["taken_at"])
        assert taken_at.replace(tzinfo=timezone.utc) == datetime(2024, 5, 4, 10, 11, 12, tzinfo=timezone.utc)

    @pytest.mark.asyncio
    async def test_no_exif_leaves_capture_time_empty(self, member_client, jpeg_bytes):
        response = await member_client.post("/upload", files={"image": ("p.jpg", jpeg_bytes, "image/jpeg")})
        assert response.json()["taken_at"] is None


class TestQuestReference:
    @pytest.mark.asyncio
    async def test_numeric_quest_id(self, member_client, jpeg_bytes):
        response = await member_client.post(
            "/upload",
            files={"image": ("p.jpg", jpeg_bytes, "image/jpeg")},
            data={"quest_id": "3"},
        )
        assert response.status_code == 201
        assert response.json()["quest_id"] == 3

    @pytest.mark.asyncio
    async def test_non_numeric_quest_id_is_dropped(self, member_client, jpeg_bytes):
        response = await member_client.post(
            "/upload",
            files={"image": ("p.jpg", jpeg_bytes, "image/jpeg")},
            data={"quest_id": "abc"},
        )
        assert response.status_code == 201
        assert response.json()["quest_id"] is None

    @pytest.mark.asyncio
    async def test_out_of_range_quest_id_is_dropped(self, member_client, blob_store, jpeg_bytes, row_count):
        response = await member_client.post(
            "/upload",
            files={"image": ("p.jpg", jpeg_bytes, "image/jpeg")},
            data={"quest_id": "99999999999999999999"},
        )
        assert response.status_code == 201
        assert response.json()["quest_id"] is None
        assert await row_count(PendingPhoto) == 1
        assert blob_store.deleted == []


class TestUploadRejected:
    @pytest.mark.asyncio
    async def test_missing_file(self, member_client, blob_store, row_count):
        response = await member_client.post("/upload", data={"quest_id": "1"})
        assert response.status_code == 400
        assert response.json()["detail"] == "No image provided"
        assert blob_store.store_calls == 0
        assert await row_count(PendingPhoto) == 0

    @pytest.mark.asyncio
    async def test_disallowed_type(self, member_client, blob_store, row_count):
        response = await member_client.post("/upload", files={"image": ("a.gif", b"GIF89a....", "image/gif")})
        assert response.status_code == 415
        assert response.json()["detail"] == "Allowed formats: JPG, PNG"
        assert blob_store.store_calls == 0
        assert await row_count(PendingPhoto) == 0

    @pytest.mark.asyncio
    async def test_content_not_matching_declared_type(self, member_client, blob_store, png_bytes, row_count):
        response = await member_client.post("/upload", files={"image": ("p.jpg", png_bytes, "image/jpeg")})
        assert response.status_code == 415
        assert blob_store.store_calls == 0
        assert await row_count(PendingPhoto) == 0

    @pytest.mark.asyncio
    async def test_oversized(self, member_client, blob_store, row_count):
        data = b"\xff\xd8\xff" + b"\x00" * (5 * 1024 * 1024)
        response = await member_client.post("/upload", files={"image": ("big.jpg", data, "image/jpeg")})
        assert response.status_code == 413
        assert response.json()["detail"] == "File too large (max 5 MiB)"
        assert blob_store.store_calls == 0
        assert await row_count(PendingPhoto) == 0

    @pytest.mark.asyncio
    async def test_empty_file(self, member_client, blob_store):
        response = await member_client.post("/upload", files={"image": ("p.jpg", b"", "image/jpeg")})
        assert response.status_code == 400
        assert blob_store.store_calls == 0

    @pytest.mark.asyncio
    async def test_storage_failure_writes_nothing(self, member_client, blob_store, jpeg_bytes, row_count):
        blob_store.fail_store = True
        response = await member_client.post("/upload", files={"image": ("p.jpg", jpeg_bytes, "image/jpeg")})
        assert response.status_code == 500
        assert response.json()["detail"] == "Image storage failed"
        assert await row_count(PendingPhoto) == 0

    @pytest.mark.asyncio
    async def test_failed_row_write_purges_blob(self, member_client, blob_store, jpeg_bytes, row_count, monkeypatch):
        async def broken_commit(self):
            raise OperationalError("INSERT INTO pending_photos", {}, Exception("disk full"))

        monkeypatch.setattr(AsyncSession, "commit", broken_commit)
        response = await member_client.post("/upload", files={"image": ("p.jpg", jpeg_bytes, "image/jpeg")})

        assert response.status_code == 500
        assert response.json()["detail"] == "Could not record the upload"
        assert blob_store.store_calls == 1
        assert blob_store.deleted == ["uploads/blob1"]
        assert await row_count(PendingPhoto) == 0
