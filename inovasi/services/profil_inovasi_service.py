"""
Profil Inovasi service — the base innovation submission.

Visibility is role-scoped: ADMIN reads every profil, OPD only the ones
it owns. The owner (``user_id``) is fixed at creation. Deleting a profil
(ADMIN only) cascades to its indikator bundle and removes the evidence
files from disk once the delete has committed.
"""

import logging
from dataclasses import dataclass, fields
from datetime import date
from typing import Optional

from inovasi.core.exceptions import PermissionDeniedError, ValidationError
from inovasi.models import db
from inovasi.models.inovasi import JENIS_INOVASI, ProfilInovasi
from inovasi.services import upload_service
from inovasi.services.inovasi_status import can_user_create_indikator, get_inovasi_status
from inovasi.utils.helpers import apply_search, apply_sort, get_or_404
from inovasi.utils.validators import FieldErrors, check_choice, check_date, check_string

logger = logging.getLogger(__name__)

RANCANG_BANGUN_MIN = 300
RANCANG_BANGUN_MAX = 5000

# API field -> (column attribute, min length, max length)
TEXT_FIELDS = {
    "namaInovasi": ("nama_inovasi", 3, 200),
    "inovator": ("inovator", 2, 100),
    "bentukInovasi": ("bentuk_inovasi", 3, 100),
    "rancangBangun": ("rancang_bangun", RANCANG_BANGUN_MIN, RANCANG_BANGUN_MAX),
    "tujuanInovasi": ("tujuan_inovasi", 10, 2000),
    "manfaatInovasi": ("manfaat_inovasi", 10, 2000),
    "hasilInovasi": ("hasil_inovasi", 10, 2000),
}
DATE_FIELDS = {
    "tanggalUjiCoba": "tanggal_uji_coba",
    "tanggalPenerapan": "tanggal_penerapan",
}

SORT_COLUMNS = {
    "namaInovasi": ProfilInovasi.nama_inovasi,
    "inovator": ProfilInovasi.inovator,
    "tanggalPenerapan": ProfilInovasi.tanggal_penerapan,
    "createdAt": ProfilInovasi.created_at,
}


def check_date_order(errors, uji_coba: Optional[date], penerapan: Optional[date]) -> None:
    if uji_coba and penerapan and uji_coba > penerapan:
        errors.add("tanggalUjiCoba", "tanggalUjiCoba must not be later than tanggalPenerapan")


@dataclass
class ProfilInovasiPatch:
    """Partial update of a profil. None means the field was not supplied."""

    nama_inovasi: Optional[str] = None
    inovator: Optional[str] = None
    jenis_inovasi: Optional[str] = None
    bentuk_inovasi: Optional[str] = None
    tanggal_uji_coba: Optional[date] = None
    tanggal_penerapan: Optional[date] = None
    rancang_bangun: Optional[str] = None
    tujuan_inovasi: Optional[str] = None
    manfaat_inovasi: Optional[str] = None
    hasil_inovasi: Optional[str] = None

    @classmethod
    def from_payload(cls, data: dict, *, partial: bool) -> "ProfilInovasiPatch":
        """Validate ``data``; with ``partial=False`` every field is required."""
        errors = FieldErrors()
        values = {}
        for field, (attr, min_len, max_len) in TEXT_FIELDS.items():
            values[attr] = check_string(
                errors, data, field, min_len=min_len, max_len=max_len, required=not partial,
            )
        values["jenis_inovasi"] = check_choice(
            errors, data, "jenisInovasi", JENIS_INOVASI, required=not partial,
        )
        for field, attr in DATE_FIELDS.items():
            values[attr] = check_date(errors, data, field, required=not partial)
        errors.raise_if_any()
        return cls(**values)

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))

    def apply(self, profil: ProfilInovasi) -> None:
        # Dates are checked against the merged record, not only the payload
        errors = FieldErrors()
        check_date_order(
            errors,
            self.tanggal_uji_coba or profil.tanggal_uji_coba,
            self.tanggal_penerapan or profil.tanggal_penerapan,
        )
        errors.raise_if_any()
        for f in fields(self):
            value = getattr(self, f.name)
            if value is not None:
                setattr(profil, f.name, value)


# ── Access ───────────────────────────────────────────────────────────────


def get_profil_for(auth, profil_id) -> ProfilInovasi:
    """Load a profil, 404 if absent, 403 if ``auth`` may not see it."""
    profil = get_or_404(ProfilInovasi, profil_id, "Profil Inovasi")
    if not auth.can_access(profil.user_id):
        raise PermissionDeniedError("You do not have access to this Profil Inovasi")
    return profil


# ── Queries ──────────────────────────────────────────────────────────────


def list_profil(auth, *, search=None, jenis_inovasi=None, user_id=None,
                sort_by=None, sort_order=None):
    q = ProfilInovasi.query
    if not auth.is_admin:
        q = q.filter(ProfilInovasi.user_id == auth.user_id)
    elif user_id:
        q = q.filter(ProfilInovasi.user_id == user_id)
    q = apply_search(
        q, search,
        ProfilInovasi.nama_inovasi, ProfilInovasi.inovator, ProfilInovasi.bentuk_inovasi,
    )
    if jenis_inovasi:
        if jenis_inovasi not in JENIS_INOVASI:
            raise ValidationError.for_field(
                "jenisInovasi", f"jenisInovasi must be one of: {', '.join(JENIS_INOVASI)}",
            )
        q = q.filter(ProfilInovasi.jenis_inovasi == jenis_inovasi)
    return apply_sort(q, SORT_COLUMNS, sort_by, sort_order, default_by="createdAt")


def profil_status(auth, profil_id) -> dict:
    profil = get_profil_for(auth, profil_id)
    check = can_user_create_indikator(profil, auth.user_id, auth.role)
    result = {"profilInovasiId": profil.id}
    result.update(get_inovasi_status(profil))
    result["indikator"] = check.to_dict()
    return result


# ── Mutations ────────────────────────────────────────────────────────────


def create_profil(auth, data: dict) -> ProfilInovasi:
    patch = ProfilInovasiPatch.from_payload(data, partial=False)
    profil = ProfilInovasi(user_id=auth.user_id)
    patch.apply(profil)
    db.session.add(profil)
    db.session.commit()
    logger.info("User %s created profil inovasi %s", auth.user_id, profil.id)
    return profil


def update_profil(auth, profil_id, data: dict) -> ProfilInovasi:
    profil = get_profil_for(auth, profil_id)
    patch = ProfilInovasiPatch.from_payload(data, partial=True)
    if patch.is_empty():
        raise ValidationError("No fields to update")
    patch.apply(profil)
    db.session.commit()
    logger.info("User %s updated profil inovasi %s", auth.user_id, profil.id)
    return profil


def delete_profil(auth, profil_id) -> None:
    profil = get_profil_for(auth, profil_id)
    paths = profil.indikator_inovasi.file_paths() if profil.indikator_inovasi else []

    db.session.delete(profil)
    db.session.commit()

    removed = upload_service.delete_uploads(paths)
    upload_service.remove_record_dir(profil_id)
    logger.info(
        "User %s deleted profil inovasi %s (%d file(s) removed)", auth.user_id, profil_id, removed,
    )
