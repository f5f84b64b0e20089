"""
Capture timestamp extraction from image metadata.

Reads EXIF DateTimeOriginal (falling back to DateTime) with Pillow. This is
advisory data: any failure yields None and a warning, never an exception.
"""

from __future__ import annotations

import io
from datetime import datetime, timezone

import structlog
from PIL import Image

logger = structlog.get_logger()

# EXIF tag IDs
EXIF_IFD_POINTER = 0x8769   # Exif sub-IFD
EXIF_DATE_ORIGINAL = 36867  # DateTimeOriginal
EXIF_DATE_MODIFIED = 306    # DateTime

_EXIF_DATE_FORMAT = "%Y:%m:%d %H:%M:%S"


def parse_exif_datetime(raw: object) -> datetime | None:
    """Parse an EXIF ``YYYY:MM:DD HH:MM:SS`` value as UTC. Returns None if unparseable."""
    if raw is None:
        return None
    if isinstance(raw, bytes):
        raw = raw.decode("ascii", errors="ignore")
    value = str(raw).strip().rstrip("\x00").strip()
    if not value:
        return None
    try:
        return datetime.strptime(value, _EXIF_DATE_FORMAT).replace(tzinfo=timezone.utc)
    except ValueError:
        logger.warning("exif_timestamp_unparseable", value=value)
        return None


def extract_capture_time(data: bytes) -> datetime | None:
    """Return when the photo was taken according to its EXIF data, or None."""
    try:
        with Image.open(io.BytesIO(data)) as img:
            exif = img.getexif()
            raw = exif.get_ifd(EXIF_IFD_POINTER).get(EXIF_DATE_ORIGINAL) or exif.get(EXIF_DATE_MODIFIED)
    except Exception as e:  # noqa: BLE001
        logger.warning("exif_read_failed", error=str(e))
        return None
    return parse_exif_datetime(raw)
