"""Kontak service — public contact details of the managing office."""

import logging
from dataclasses import dataclass, fields
from typing import Optional

from inovasi.core.exceptions import ValidationError
from inovasi.models import db
from inovasi.models.site import Kontak
from inovasi.utils.helpers import apply_search, apply_sort, get_or_404
from inovasi.utils.validators import (
    DIGITS_RE, LATITUDE_RE, LONGITUDE_RE, PHONE_RE, FieldErrors, check_email, check_string,
)

logger = logging.getLogger(__name__)

RESOURCE = "Kontak"

# API field -> (column attribute, max length, pattern, pattern message); email is checked separately
FIELD_RULES = {
    "namaDinas": ("nama_dinas", 200, None, None),
    "alamat": ("alamat", 2000, None, None),
    "telepon": ("telepon", 50, PHONE_RE, "telepon has an invalid phone number format"),
    "kodePos": ("kode_pos", 10, DIGITS_RE, "kodePos may only contain digits"),
    "latitude": ("latitude", 30, LATITUDE_RE, "latitude must be between -90 and 90"),
    "longitude": ("longitude", 30, LONGITUDE_RE, "longitude must be between -180 and 180"),
}

SORT_COLUMNS = {
    "namaDinas": Kontak.nama_dinas,
    "createdAt": Kontak.created_at,
    "updatedAt": Kontak.updated_at,
}


@dataclass
class KontakPatch:
    nama_dinas: Optional[str] = None
    alamat: Optional[str] = None
    telepon: Optional[str] = None
    email: Optional[str] = None
    kode_pos: Optional[str] = None
    latitude: Optional[str] = None
    longitude: Optional[str] = None

    @classmethod
    def from_payload(cls, data: dict, *, partial: bool) -> "KontakPatch":
        errors = FieldErrors()
        values = {}
        for field, (attr, max_len, pattern, message) in FIELD_RULES.items():
            values[attr] = check_string(
                errors, data, field, max_len=max_len, required=not partial,
                pattern=pattern, pattern_message=message,
            )
        values["email"] = check_email(errors, data, required=not partial)
        errors.raise_if_any()
        return cls(**values)

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))

    def apply(self, kontak: Kontak) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if value is not None:
                setattr(kontak, f.name, value)


def list_kontak(*, search=None, sort_by=None, sort_order=None):
    q = apply_search(Kontak.query, search, Kontak.nama_dinas, Kontak.alamat, Kontak.email)
    return apply_sort(q, SORT_COLUMNS, sort_by, sort_order, default_by="createdAt")


def get_kontak(kontak_id) -> Kontak:
    return get_or_404(Kontak, kontak_id, RESOURCE)


def create_kontak(data: dict) -> Kontak:
    kontak = Kontak()
    KontakPatch.from_payload(data, partial=False).apply(kontak)
    db.session.add(kontak)
    db.session.commit()
    logger.info("Created kontak %s", kontak.id)
    return kontak


def update_kontak(kontak_id, data: dict) -> Kontak:
    kontak = get_kontak(kontak_id)
    patch = KontakPatch.from_payload(data, partial=True)
    if patch.is_empty():
        raise ValidationError("No fields to update")
    patch.apply(kontak)
    db.session.commit()
    logger.info("Updated kontak %s", kontak.id)
    return kontak


def delete_kontak(kontak_id) -> None:
    kontak = get_kontak(kontak_id)
    db.session.delete(kontak)
    db.session.commit()
    logger.info("Deleted kontak %s", kontak_id)
