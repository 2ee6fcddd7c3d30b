"""
Upload handler tests.

Covers:
  - MIME allow-list and generated names/extensions
  - Size ceiling (partial file removed)
  - Batch rollback on any exception, including the empty record directory
  - Path resolution refusing traversal
"""

import io
import os
import uuid

import pytest
from werkzeug.datastructures import FileStorage, MultiDict

from inovasi.core.exceptions import ValidationError
from inovasi.services import upload_service
from inovasi.services.upload_service import (
    CAROUSEL_DIR, CAROUSEL_POLICY, INDIKATOR_POLICY, UploadBatch, UploadPolicy,
)

from payloads import PDF_BYTES, PNG_BYTES, stored_files


def _storage(content=PDF_BYTES, content_type="application/pdf", filename="bukti.pdf"):
    return FileStorage(stream=io.BytesIO(content), filename=filename, content_type=content_type)


class TestUploadBatchSave:

    def test_indikator_file_saved_under_record_dir(self, upload_dir):
        record = str(uuid.uuid4())
        with UploadBatch(INDIKATOR_POLICY, record) as batch:
            path = batch.save("alatKerja", _storage())

        assert path.startswith(f"{record}/")
        assert path.endswith(".pdf")
        with open(os.path.join(upload_dir, *path.split("/")), "rb") as fh:
            assert fh.read() == PDF_BYTES

    def test_extension_comes_from_mime_not_filename(self):
        with UploadBatch(INDIKATOR_POLICY, str(uuid.uuid4())) as batch:
            path = batch.save("alatKerja", _storage(PNG_BYTES, "image/png", "evil.exe"))
        assert path.endswith(".png")
        assert "evil" not in path

    def test_carousel_name_format(self):
        with UploadBatch(CAROUSEL_POLICY, CAROUSEL_DIR) as batch:
            path = batch.save("image", _storage(PNG_BYTES, "image/webp", "a.webp"))
        name = path.split("/")[-1]
        assert path.startswith("carousel/carousel_")
        assert name.endswith(".webp")

    def test_disallowed_mime_rejected_before_writing(self, upload_dir):
        with pytest.raises(ValidationError) as exc:
            with UploadBatch(INDIKATOR_POLICY, str(uuid.uuid4())) as batch:
                batch.save("alatKerja", _storage(b"GIF89a", "image/gif", "x.gif"))
        assert exc.value.errors[0]["field"] == "alatKerja"
        assert stored_files(upload_dir) == []

    def test_oversize_file_removed(self, upload_dir):
        tiny = UploadPolicy(name="tiny", allowed_types={"application/pdf": ".pdf"},
                            max_bytes=8, max_files=2)
        record = str(uuid.uuid4())
        with pytest.raises(ValidationError) as exc:
            with UploadBatch(tiny, record) as batch:
                batch.save("alatKerja", _storage(b"0123456789"))
        assert "limit" in exc.value.errors[0]["message"]
        assert stored_files(upload_dir) == []
        assert not os.path.exists(os.path.join(upload_dir, record))

    def test_empty_file_rejected(self, upload_dir):
        with pytest.raises(ValidationError):
            with UploadBatch(INDIKATOR_POLICY, str(uuid.uuid4())) as batch:
                batch.save("alatKerja", _storage(b""))
        assert stored_files(upload_dir) == []


class TestUploadBatchRollback:

    def test_later_failure_removes_earlier_files(self, upload_dir):
        record = str(uuid.uuid4())
        with pytest.raises(RuntimeError):
            with UploadBatch(INDIKATOR_POLICY, record) as batch:
                batch.save("alatKerja", _storage())
                batch.save("replikasi", _storage())
                assert len(stored_files(upload_dir)) == 2
                raise RuntimeError("database write failed")
        assert stored_files(upload_dir) == []
        assert not os.path.exists(os.path.join(upload_dir, record))

    def test_rollback_keeps_files_from_earlier_requests(self, upload_dir):
        record = str(uuid.uuid4())
        with UploadBatch(INDIKATOR_POLICY, record) as batch:
            kept = batch.save("alatKerja", _storage())

        with pytest.raises(ValidationError):
            with UploadBatch(INDIKATOR_POLICY, record) as batch:
                batch.save("replikasi", _storage())
                batch.save("jejaringInovasi", _storage(b"x", "text/plain", "x.txt"))

        assert stored_files(upload_dir) == [kept]

    def test_success_keeps_files(self, upload_dir):
        with UploadBatch(INDIKATOR_POLICY, str(uuid.uuid4())) as batch:
            batch.save("alatKerja", _storage())
        assert len(stored_files(upload_dir)) == 1

    def test_too_many_files(self):
        files = MultiDict([(f"f{i}", _storage()) for i in range(INDIKATOR_POLICY.max_files + 1)])
        with UploadBatch(INDIKATOR_POLICY, str(uuid.uuid4())) as batch:
            with pytest.raises(ValidationError):
                batch.check_count(files)

    def test_invalid_location_rejected(self):
        with pytest.raises(ValidationError):
            UploadBatch(INDIKATOR_POLICY, "../outside")


class TestPaths:

    def test_traversal_does_not_resolve(self):
        assert upload_service.resolve_upload_path("../secret.txt") is None

    def test_delete_missing_file_is_noop(self):
        assert upload_service.delete_upload("carousel/missing.png") is False

    def test_delete_existing_file(self, upload_dir):
        with UploadBatch(CAROUSEL_POLICY, CAROUSEL_DIR) as batch:
            path = batch.save("image", _storage(PNG_BYTES, "image/png", "a.png"))
        assert upload_service.delete_upload(path) is True
        assert stored_files(upload_dir) == []
