"""EXIF capture time tests."""

from datetime import datetime, timezone

from photoquest.storage.exif import extract_capture_time, parse_exif_datetime


class TestParseExifDatetime:
    def test_standard_format(self):
        assert parse_exif_datetime("2024:06:01 12:30:45") == datetime(2024, 6, 1, 12, 30, 45, tzinfo=timezone.utc)

    def test_bytes_with_trailing_nul(self):
        assert parse_exif_datetime(b"2024:06:01 12:30:45\x00") == datetime(
            2024, 6, 1, 12, 30, 45, tzinfo=timezone.utc
        )

    def test_blank_is_none(self):
        assert parse_exif_datetime("   ") is None
        assert parse_exif_datetime(None) is None

    def test_malformed_is_none(self):
        assert parse_exif_datetime("2024-06-01T12:30:45") is None
        assert parse_exif_datetime("0000:00:00 00:00:00") is None


class TestExtractCaptureTime:
    def test_reads_datetime_tag(self, make_jpeg):
        data = make_jpeg(exif_datetime="2023:12:24 18:00:00")
        assert extract_capture_time(data) == datetime(2023, 12, 24, 18, 0, 0, tzinfo=timezone.utc)

    def test_no_exif(self, jpeg_bytes):
        assert extract_capture_time(jpeg_bytes) is None

    def test_png_without_metadata(self, png_bytes):
        assert extract_capture_time(png_bytes) is None

    def test_garbage_bytes(self):
        assert extract_capture_time(b"\xff\xd8\xff" + b"\x00" * 64) is None
        assert extract_capture_time(b"not an image") is None
