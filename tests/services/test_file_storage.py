"""Tests for upload validation and local file storage."""

import pytest

from tests.builders import PDF_BYTES, PNG_BYTES, png_image, receipt
from tradedoc_config.schema import FileRule
from tradedoc_kernel.exceptions import FileRejectedError
from tradedoc_services.file_storage import (
    LocalFileStorage,
    UploadedFile,
    check_upload,
    normalize_content_type,
)

RECEIPTS = FileRule(("image/jpeg", "image/png", "application/pdf"), max_size_bytes=1024)
IMAGES = FileRule(("image/jpeg", "image/png"), max_size_bytes=1024)


class TestCheckUpload:

    def test_accepts_allowed_type(self):
        assert check_upload(receipt(), RECEIPTS, "receipt") == "application/pdf"

    def test_content_type_is_normalized(self):
        upload = UploadedFile(PNG_BYTES, "Image/PNG; charset=binary")

        assert normalize_content_type(upload.content_type) == "image/png"
        assert check_upload(upload, IMAGES, "logo") == "image/png"

    def test_disallowed_type(self):
        with pytest.raises(FileRejectedError) as exc_info:
            check_upload(receipt(), IMAGES, "signature")

        assert exc_info.value.field == "signature"
        assert exc_info.value.content_type == "application/pdf"

    def test_empty_file(self):
        with pytest.raises(FileRejectedError, match="empty"):
            check_upload(UploadedFile(b"", "application/pdf"), RECEIPTS, "receipt")

    def test_oversize_file(self):
        big = UploadedFile(PDF_BYTES + b"0" * 2048, "application/pdf")

        with pytest.raises(FileRejectedError) as exc_info:
            check_upload(big, RECEIPTS, "receipt")

        assert exc_info.value.size == big.size

    def test_bytes_must_match_declared_type(self):
        disguised = UploadedFile(b"MZ\x90\x00" + b"\x00" * 32, "image/png")

        with pytest.raises(FileRejectedError, match="does not match"):
            check_upload(disguised, RECEIPTS, "receipt")

    def test_not_an_upload(self):
        with pytest.raises(FileRejectedError):
            check_upload(PDF_BYTES, RECEIPTS, "receipt")


class TestLocalFileStorage:

    def test_store_and_read_back(self, tmp_path):
        storage = LocalFileStorage(tmp_path)

        stored = storage.store_file(png_image(), IMAGES, "logos", "logo")

        assert stored.ref.startswith("logos/") and stored.ref.endswith(".png")
        assert stored.size == len(PNG_BYTES)
        assert storage.read_file(stored.ref) == PNG_BYTES

    def test_each_upload_gets_its_own_ref(self, tmp_path):
        storage = LocalFileStorage(tmp_path)

        first = storage.store_file(receipt(), RECEIPTS, "receipts", "receipt")
        second = storage.store_file(receipt(), RECEIPTS, "receipts", "receipt")

        assert first.ref != second.ref

    def test_rejected_upload_writes_nothing(self, tmp_path):
        storage = LocalFileStorage(tmp_path)

        with pytest.raises(FileRejectedError):
            storage.store_file(receipt(), IMAGES, "logos", "logo")

        assert not (tmp_path / "logos").exists()

    def test_refs_cannot_escape_root(self, tmp_path):
        storage = LocalFileStorage(tmp_path / "files")

        with pytest.raises(ValueError):
            storage.read_file("../outside.txt")

    def test_store_is_logged(self, tmp_path, captured_logs):
        LocalFileStorage(tmp_path).store_file(receipt(), RECEIPTS, "receipts", "receipt")

        records = [r for r in captured_logs() if r["message"] == "file_stored"]
        assert len(records) == 1
        assert records[0]["category"] == "receipts"
