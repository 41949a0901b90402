"""
DevCamper API — File Service Unit Tests
========================================

What:  Tests for FileService validation and storage of bootcamp photos.
How:   Each test gets a FileService rooted in pytest's tmp_path, so files
       really land on disk and can be inspected.

Test Strategy:
    ✅ Content type must be image/*
    ✅ Size limit (boundary at max_size)
    ✅ The type read from the bytes wins over the declared one
    ✅ Stored name is photo_<id><ext>; only the extension survives
    ✅ OSError while writing → FileStorageError
"""

import sys
import types
import uuid
from unittest.mock import patch

import pytest

from devcamper.exceptions import FileStorageError, ValidationError
from devcamper.services.file_service import FileService

MAX_SIZE = 100

PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR"
JPEG_BYTES = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00"


@pytest.fixture
def fake_magic(monkeypatch):
    """A `magic` module that knows PNG and JPEG signatures, so tests run without libmagic."""
    seen = []

    def from_buffer(content, mime=False):
        seen.append(content)
        if content.startswith(b"\x89PNG"):
            return "image/png"
        if content.startswith(b"\xff\xd8\xff"):
            return "image/jpeg"
        return "text/plain"

    module = types.ModuleType("magic")
    module.from_buffer = from_buffer
    monkeypatch.setitem(sys.modules, "magic", module)
    return seen


class TestFileValidation:
    """Tests for validation logic in FileService."""

    @pytest.fixture(autouse=True)
    def _service(self, tmp_path):
        self.service = FileService(str(tmp_path / "uploads"), MAX_SIZE)

    # ── Content Type ──────────────────────────────────────────────────────

    @pytest.mark.parametrize("content_type", ["image/jpeg", "image/png", "image/webp"])
    def test_image_types_accepted(self, content_type):
        # Should not raise
        self.service.validate_content_type(content_type)

    @pytest.mark.parametrize("content_type", ["text/plain", "application/pdf", "", None])
    def test_other_types_rejected(self, content_type):
        with pytest.raises(ValidationError, match="Please upload an image file"):
            self.service.validate_content_type(content_type)

    # ── Size ──────────────────────────────────────────────────────────────

    def test_size_at_limit(self):
        self.service.validate_size(MAX_SIZE)

    def test_size_over_limit(self):
        with pytest.raises(ValidationError, match=f"less than {MAX_SIZE}"):
            self.service.validate_size(MAX_SIZE + 1)

    # ── Magic Bytes ───────────────────────────────────────────────────────

    def test_detected_type_returned(self, fake_magic):
        assert self.service.detect_content_type(PNG_BYTES) == "image/png"
        assert fake_magic == [PNG_BYTES]

    def test_non_image_bytes_rejected(self, fake_magic):
        with pytest.raises(ValidationError, match="Please upload an image file") as exc_info:
            self.service.detect_content_type(b"<?php echo 1; ?>")
        assert exc_info.value.context["detected_mime"] == "text/plain"

    def test_detection_failure_is_storage_error(self, monkeypatch):
        def broken(content, mime=False):
            raise OSError("magic database not found")

        module = types.ModuleType("magic")
        module.from_buffer = broken
        monkeypatch.setitem(sys.modules, "magic", module)

        with pytest.raises(FileStorageError) as exc_info:
            self.service.detect_content_type(PNG_BYTES)
        assert exc_info.value.status_code == 500
        assert exc_info.value.message == "Could not verify file type. Please try again."

    # ── Naming ────────────────────────────────────────────────────────────

    def test_photo_filename_keeps_extension(self):
        bootcamp_id = uuid.uuid4()
        assert FileService.photo_filename(bootcamp_id, "campus.PNG") == f"photo_{bootcamp_id}.png"

    @pytest.mark.parametrize("original", [None, "", "noextension", "../../etc/passwd", "evil.<script>"])
    def test_photo_filename_drops_odd_extensions(self, original):
        bootcamp_id = uuid.uuid4()
        assert FileService.photo_filename(bootcamp_id, original) == f"photo_{bootcamp_id}"


class TestFileStorage:
    @pytest.mark.asyncio
    async def test_save_writes_file(self, tmp_path, fake_magic):
        service = FileService(str(tmp_path / "uploads"), MAX_SIZE)
        bootcamp_id = uuid.uuid4()

        filename = await service.save_bootcamp_photo(bootcamp_id, "me.jpg", "image/jpeg", JPEG_BYTES)

        assert filename == f"photo_{bootcamp_id}.jpg"
        assert (tmp_path / "uploads" / filename).read_bytes() == JPEG_BYTES

    @pytest.mark.asyncio
    async def test_second_upload_overwrites(self, tmp_path, fake_magic):
        service = FileService(str(tmp_path / "uploads"), MAX_SIZE)
        bootcamp_id = uuid.uuid4()

        await service.save_bootcamp_photo(bootcamp_id, "a.jpg", "image/jpeg", PNG_BYTES)
        filename = await service.save_bootcamp_photo(bootcamp_id, "b.jpg", "image/jpeg", JPEG_BYTES)

        assert (tmp_path / "uploads" / filename).read_bytes() == JPEG_BYTES

    @pytest.mark.asyncio
    async def test_rejected_upload_writes_nothing(self, tmp_path):
        service = FileService(str(tmp_path / "uploads"), MAX_SIZE)

        with pytest.raises(ValidationError):
            await service.save_bootcamp_photo(uuid.uuid4(), "a.jpg", "image/jpeg", b"x" * (MAX_SIZE + 1))

        assert not (tmp_path / "uploads").exists()

    @pytest.mark.asyncio
    async def test_os_error_becomes_storage_error(self, tmp_path):
        service = FileService(str(tmp_path / "uploads"), MAX_SIZE)

        with patch("aiofiles.open", side_effect=OSError("disk full")):
            with pytest.raises(FileStorageError) as exc_info:
                await service.store_file("photo_x.jpg", b"data")

        assert exc_info.value.status_code == 500
        assert exc_info.value.message == "Problem with file upload"

    @pytest.mark.asyncio
    async def test_mislabelled_upload_writes_nothing(self, tmp_path, fake_magic):
        service = FileService(str(tmp_path / "uploads"), MAX_SIZE)

        with pytest.raises(ValidationError, match="Please upload an image file"):
            await service.save_bootcamp_photo(uuid.uuid4(), "cat.png", "image/png", b"not a picture")

        assert not (tmp_path / "uploads").exists()
