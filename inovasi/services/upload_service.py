"""Upload handler — validated, compensating file storage.

Files land under ``UPLOAD_FOLDER``:

    carousel/carousel_<ms>_<uuid>.<ext>     flat pool for carousel images
    <profil_inovasi_id>/<uuid>.<ext>        one directory per profil for indikator evidence

Stored names are random (no collisions, no leaked client filenames) and
the extension comes from the accepted MIME type. Callers only ever see
paths relative to the upload root.

Filesystem writes are not transactional with the database, so a request
opens an ``UploadBatch`` and does all of its work inside it::

    with UploadBatch(INDIKATOR_POLICY, profil_id) as batch:
        path = batch.save("alatKerja", request.files["alatKerja"])
        ...                    # validation, permission check, db commit

Any exception leaving the block deletes every file the batch wrote
(and the per-record directory when it ends up empty), whichever step
failed.
"""
from __future__ import annotations

import logging
import os
import time
import uuid
from dataclasses import dataclass

from flask import current_app
from werkzeug.utils import safe_join

from inovasi.core.exceptions import ValidationError

logger = logging.getLogger(__name__)

MB = 1024 * 1024
_CHUNK_SIZE = 64 * 1024

CAROUSEL_DIR = "carousel"


@dataclass(frozen=True)
class UploadPolicy:
    """MIME allow-list (type -> stored extension) and size/count ceilings."""

    name: str
    allowed_types: dict
    max_bytes: int
    max_files: int
    filename_prefix: str = ""

    def describe_types(self) -> str:
        return ", ".join(sorted({ext.lstrip(".").upper() for ext in self.allowed_types.values()}))


CAROUSEL_POLICY = UploadPolicy(
    name="carousel",
    allowed_types={
        "image/jpeg": ".jpg",
        "image/jpg": ".jpg",
        "image/png": ".png",
        "image/webp": ".webp",
    },
    max_bytes=5 * MB,
    max_files=1,
    filename_prefix="carousel_",
)

INDIKATOR_POLICY = UploadPolicy(
    name="indikator",
    allowed_types={
        "image/jpeg": ".jpg",
        "image/png": ".png",
        "application/pdf": ".pdf",
    },
    max_bytes=10 * MB,
    max_files=20,
)


def upload_root() -> str:
    return current_app.config["UPLOAD_FOLDER"]


def resolve_upload_path(relative_path: str) -> str | None:
    """Absolute path for a stored relative path, or None if it escapes the root."""
    if not relative_path:
        return None
    return safe_join(upload_root(), *relative_path.split("/"))


def delete_upload(relative_path: str) -> bool:
    """Remove a stored file; returns True when a file was deleted.

    Failures are logged rather than raised: this runs on compensation
    paths where the triggering error must reach the client.
    """
    full_path = resolve_upload_path(relative_path)
    if not full_path or not os.path.isfile(full_path):
        return False
    try:
        os.remove(full_path)
        return True
    except OSError:
        logger.exception("Failed to delete upload %s", relative_path)
        return False


def delete_uploads(relative_paths) -> int:
    return sum(1 for p in relative_paths if p and delete_upload(p))


def remove_record_dir(subdir: str) -> None:
    """Remove a per-record upload directory if it is empty."""
    full_dir = safe_join(upload_root(), subdir)
    if full_dir and os.path.isdir(full_dir):
        try:
            os.rmdir(full_dir)
        except OSError:
            # Not empty: files from an earlier successful request still live here
            pass


def count_files(files) -> int:
    """Number of non-empty file parts in a werkzeug MultiDict of FileStorage."""
    return sum(1 for _, storage in files.items(multi=True) if storage and storage.filename)


class UploadBatch:
    """Files written during one request, deleted together on failure."""

    def __init__(self, policy: UploadPolicy, subdir: str):
        if not subdir or safe_join(upload_root(), subdir) is None:
            raise ValidationError("Invalid upload location")
        self.policy = policy
        self.subdir = subdir
        self.saved: dict[str, str] = {}

    # ── context manager ────────────────────────────────────────────────
    def __enter__(self) -> "UploadBatch":
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc_type is not None:
            removed = self.cleanup()
            if removed:
                logger.info(
                    "Rolled back %d %s upload(s) after %s",
                    removed, self.policy.name, exc_type.__name__,
                )
        return False

    # ── operations ─────────────────────────────────────────────────────
    def check_count(self, files) -> None:
        n = count_files(files)
        if n > self.policy.max_files:
            raise ValidationError(
                f"Too many files: at most {self.policy.max_files} allowed per request"
            )

    def save(self, field: str, storage) -> str:
        """Validate and persist one FileStorage; returns its relative path."""
        mimetype = (storage.mimetype or "").lower()
        ext = self.policy.allowed_types.get(mimetype)
        if ext is None:
            raise ValidationError.for_field(
                field,
                f"File type {mimetype or 'unknown'} not allowed. "
                f"Allowed types: {self.policy.describe_types()}",
            )

        name = self._generate_name(ext)
        target_dir = os.path.join(upload_root(), self.subdir)
        os.makedirs(target_dir, exist_ok=True)
        full_path = os.path.join(target_dir, name)
        relative = f"{self.subdir}/{name}"

        # Track before writing so a failure mid-write is still cleaned up
        self.saved[field] = relative
        written = 0
        with open(full_path, "wb") as out:
            while True:
                chunk = storage.stream.read(_CHUNK_SIZE)
                if not chunk:
                    break
                written += len(chunk)
                if written > self.policy.max_bytes:
                    break
                out.write(chunk)

        if written > self.policy.max_bytes:
            raise ValidationError.for_field(
                field, f"File exceeds the {self.policy.max_bytes // MB} MB limit",
            )
        if written == 0:
            raise ValidationError.for_field(field, "File is empty")

        logger.debug("Stored %s upload %s (%d bytes)", self.policy.name, relative, written)
        return relative

    def cleanup(self) -> int:
        removed = delete_uploads(self.saved.values())
        self.saved.clear()
        if self.subdir != CAROUSEL_DIR:
            remove_record_dir(self.subdir)
        return removed

    def _generate_name(self, ext: str) -> str:
        if self.policy.filename_prefix:
            return f"{self.policy.filename_prefix}{int(time.time() * 1000)}_{uuid.uuid4()}{ext}"
        return f"{uuid.uuid4()}{ext}"
