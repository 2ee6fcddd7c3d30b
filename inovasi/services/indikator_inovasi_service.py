"""
Indikator Inovasi service — the evidence bundle attached to a profil.

A bundle is one YouTube URL plus one stored file per evidence field
(``INDIKATOR_FILE_FIELDS``), created at most once per profil and
swappable field by field afterwards.

Create/update run inside an ``UploadBatch``: every file written by the
request is removed again if anything after it fails (a later file's
MIME/size check, field validation, or the database write). Files
replaced by an update are removed only after the commit succeeds.

Two requests racing to create the bundle for the same profil both pass
``can_user_create_indikator``; the unique constraint on
``profil_inovasi_id`` rejects the second at commit, which surfaces as
409 and rolls back its files.
"""

import logging

from inovasi.core.exceptions import (
    ConflictError, NotFoundError, PermissionDeniedError, ValidationError,
)
from inovasi.models import db
from inovasi.models.inovasi import (
    INDIKATOR_FILE_FIELDS, INDIKATOR_URL_FIELD, IndikatorInovasi, ProfilInovasi,
)
from inovasi.services import upload_service
from inovasi.services.inovasi_status import (
    REASON_ALREADY_EXISTS, REASON_NO_ACCESS, REASON_NOT_FOUND, can_user_create_indikator,
)
from inovasi.services.profil_inovasi_service import get_profil_for
from inovasi.services.upload_service import INDIKATOR_POLICY, UploadBatch
from inovasi.utils.helpers import apply_search, apply_sort, db_commit_or_raise, get_or_404
from inovasi.utils.validators import YOUTUBE_RE, FieldErrors, check_string, is_uuid

logger = logging.getLogger(__name__)

RESOURCE = "Indikator Inovasi"
FILE_FIELD_NAMES = frozenset(field for field, _ in INDIKATOR_FILE_FIELDS)

SORT_COLUMNS = {
    "createdAt": IndikatorInovasi.created_at,
    "updatedAt": IndikatorInovasi.updated_at,
    "namaInovasi": ProfilInovasi.nama_inovasi,
}


def _check_url(errors, form, *, required):
    return check_string(
        errors, form, INDIKATOR_URL_FIELD[0], max_len=500, required=required,
        pattern=YOUTUBE_RE,
        pattern_message=f"{INDIKATOR_URL_FIELD[0]} must be a valid YouTube URL",
    )


def _check_file_fields(files) -> None:
    """Reject unknown or repeated file parts before anything is written."""
    errors = FieldErrors()
    for field in files.keys():
        if field not in FILE_FIELD_NAMES:
            errors.add(field, f"Unexpected file field {field}")
        elif len([f for f in files.getlist(field) if f and f.filename]) > 1:
            errors.add(field, f"Only one file is allowed for {field}")
    errors.raise_if_any("Invalid file upload")


def _save_files(batch: UploadBatch, files) -> dict:
    """Store every supplied evidence file in form order; returns {field: path}."""
    batch.check_count(files)
    _check_file_fields(files)
    saved = {}
    for field, _ in INDIKATOR_FILE_FIELDS:
        storage = files.get(field)
        if storage is not None and storage.filename:
            saved[field] = batch.save(field, storage)
    return saved


def _raise_for(check) -> None:
    if check.can_create:
        return
    if check.code == REASON_NOT_FOUND:
        raise NotFoundError("Profil Inovasi")
    if check.code == REASON_NO_ACCESS:
        raise PermissionDeniedError(check.reason)
    if check.code == REASON_ALREADY_EXISTS:
        raise ConflictError(RESOURCE, "profilInovasiId")
    raise ValidationError(check.reason or "Cannot create Indikator Inovasi")


# ── Access ───────────────────────────────────────────────────────────────


def get_indikator_for(auth, indikator_id) -> IndikatorInovasi:
    indikator = get_or_404(IndikatorInovasi, indikator_id, RESOURCE)
    if not auth.can_access(indikator.profil_inovasi.user_id):
        raise PermissionDeniedError("You do not have access to this Indikator Inovasi")
    return indikator


def get_by_profil(auth, profil_id) -> IndikatorInovasi:
    profil = get_profil_for(auth, profil_id)
    if profil.indikator_inovasi is None:
        raise NotFoundError(RESOURCE, profil_id)
    return profil.indikator_inovasi


# ── Queries ──────────────────────────────────────────────────────────────


def list_indikator(auth, *, search=None, sort_by=None, sort_order=None):
    q = IndikatorInovasi.query.join(ProfilInovasi)
    if not auth.is_admin:
        q = q.filter(ProfilInovasi.user_id == auth.user_id)
    q = apply_search(q, search, ProfilInovasi.nama_inovasi, ProfilInovasi.inovator)
    return apply_sort(q, SORT_COLUMNS, sort_by, sort_order, default_by="createdAt")


# ── Mutations ────────────────────────────────────────────────────────────


def create_indikator(auth, form, files) -> IndikatorInovasi:
    """Create the bundle from a multipart form (``profilInovasiId`` + files + URL)."""
    errors = FieldErrors()
    profil_id = check_string(errors, form, "profilInovasiId")
    if profil_id and not is_uuid(profil_id):
        errors.add("profilInovasiId", "profilInovasiId must be a valid UUID")
    errors.raise_if_any()

    profil = db.session.get(ProfilInovasi, profil_id)
    _raise_for(can_user_create_indikator(profil, auth.user_id, auth.role))

    with UploadBatch(INDIKATOR_POLICY, profil_id) as batch:
        paths = _save_files(batch, files)

        errors = FieldErrors()
        for field, _ in INDIKATOR_FILE_FIELDS:
            if field not in paths:
                errors.add(field, f"{field} file is required")
        url = _check_url(errors, form, required=True)
        errors.raise_if_any()

        indikator = IndikatorInovasi(profil_inovasi_id=profil_id, kualitas_inovasi_daerah=url)
        for field, attr in INDIKATOR_FILE_FIELDS:
            setattr(indikator, attr, paths[field])
        db.session.add(indikator)
        db_commit_or_raise(RESOURCE, "profilInovasiId", profil_id)

    logger.info(
        "User %s created indikator inovasi %s for profil %s",
        auth.user_id, indikator.id, profil_id,
    )
    return indikator


def update_indikator(auth, indikator_id, form, files) -> IndikatorInovasi:
    """Swap any subset of evidence files and/or the URL."""
    indikator = get_indikator_for(auth, indikator_id)
    replaced = []

    with UploadBatch(INDIKATOR_POLICY, indikator.profil_inovasi_id) as batch:
        paths = _save_files(batch, files)

        errors = FieldErrors()
        url = _check_url(errors, form, required=False)
        errors.raise_if_any()
        if not paths and url is None:
            raise ValidationError("No fields to update")

        for field, attr in INDIKATOR_FILE_FIELDS:
            if field in paths:
                replaced.append(getattr(indikator, attr))
                setattr(indikator, attr, paths[field])
        if url is not None:
            indikator.kualitas_inovasi_daerah = url
        db_commit_or_raise(RESOURCE, "profilInovasiId", indikator.profil_inovasi_id)

    removed = upload_service.delete_uploads(replaced)
    logger.info(
        "User %s updated indikator inovasi %s (%d file(s) replaced)",
        auth.user_id, indikator.id, removed,
    )
    return indikator


def delete_indikator(auth, indikator_id) -> None:
    indikator = get_indikator_for(auth, indikator_id)
    profil_id = indikator.profil_inovasi_id
    paths = indikator.file_paths()

    db.session.delete(indikator)
    db.session.commit()

    upload_service.delete_uploads(paths)
    upload_service.remove_record_dir(profil_id)
    logger.info("User %s deleted indikator inovasi %s", auth.user_id, indikator_id)
