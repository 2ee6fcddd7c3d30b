"""Innovation lifecycle helpers.

A profil moves through derived (never persisted) stages:

    EMPTY        no profil (defensive; a queried profil always exists)
    PROFIL_ONLY  profil submitted, indikator bundle still missing
    COMPLETE     profil and its single indikator bundle both present

``can_user_create_indikator`` is the application-level gate for the
1:0..1 profil → indikator relation. The unique constraint on
``indikator_inovasi.profil_inovasi_id`` remains authoritative when two
requests race past this check.
"""
from __future__ import annotations

from dataclasses import dataclass

from inovasi.models.user import ROLE_ADMIN

STAGE_EMPTY = "EMPTY"
STAGE_PROFIL_ONLY = "PROFIL_ONLY"
STAGE_COMPLETE = "COMPLETE"

REASON_NOT_FOUND = "NOT_FOUND"
REASON_NO_ACCESS = "NO_ACCESS"
REASON_ALREADY_EXISTS = "ALREADY_EXISTS"

_NEXT_ACTION = {
    STAGE_COMPLETE: "Innovation is complete with profil and indikator",
    STAGE_PROFIL_ONLY: "Continue by creating the Indikator Inovasi",
    STAGE_EMPTY: "Start by creating a Profil Inovasi",
}

_REASON_MESSAGES = {
    REASON_NOT_FOUND: "Profil Inovasi not found",
    REASON_NO_ACCESS: "You do not have access to this Profil Inovasi",
    REASON_ALREADY_EXISTS: "Indikator Inovasi already exists for this Profil Inovasi",
}


def derive_status(profil_present: bool, indikator_present: bool) -> dict:
    """Stage table for a (profil, indikator) presence pair."""
    if profil_present and indikator_present:
        stage, can_create = STAGE_COMPLETE, False
    elif profil_present:
        stage, can_create = STAGE_PROFIL_ONLY, True
    else:
        stage, can_create = STAGE_EMPTY, False

    return {
        "hasProfilInovasi": bool(profil_present),
        "hasIndikatorInovasi": bool(profil_present and indikator_present),
        "stage": stage,
        "canCreateIndikator": can_create,
        "nextAction": _NEXT_ACTION[stage],
    }


def get_inovasi_status(profil) -> dict:
    """Status of a ProfilInovasi instance (None allowed)."""
    if profil is None:
        return derive_status(False, False)
    return derive_status(True, profil.indikator_inovasi is not None)


@dataclass(frozen=True)
class IndikatorCheck:
    can_create: bool
    code: str | None = None

    @property
    def reason(self) -> str | None:
        return _REASON_MESSAGES.get(self.code)

    def to_dict(self) -> dict:
        d = {"canCreate": self.can_create}
        if self.code:
            d["reason"] = self.reason
            d["code"] = self.code
        return d


def can_user_create_indikator(profil, user_id: str, role: str) -> IndikatorCheck:
    """Decide whether ``user_id``/``role`` may attach an indikator to ``profil``."""
    if profil is None:
        return IndikatorCheck(False, REASON_NOT_FOUND)
    if role != ROLE_ADMIN and profil.user_id != user_id:
        return IndikatorCheck(False, REASON_NO_ACCESS)
    if profil.indikator_inovasi is not None:
        return IndikatorCheck(False, REASON_ALREADY_EXISTS)
    return IndikatorCheck(True)


def format_inovasi_response(data):
    """Serialise one profil or a list of them with the derived ``status`` attached."""
    if isinstance(data, (list, tuple)):
        return [format_inovasi_response(item) for item in data]
    payload = data.to_dict()
    payload["status"] = get_inovasi_status(data)
    return payload
