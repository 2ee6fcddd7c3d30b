"""
Profil Inovasi Blueprint.

    GET    /api/profil-inovasi              — list (search, jenisInovasi, userId*, sort, paging)
    GET    /api/profil-inovasi/<id>         — detail with indikator and status
    GET    /api/profil-inovasi/<id>/status  — lifecycle stage + indikator eligibility
    POST   /api/profil-inovasi              — create (owner = caller)
    PATCH  /api/profil-inovasi/<id>         — partial update
    DELETE /api/profil-inovasi/<id>         — ADMIN; cascades indikator and its files

    * userId filter is honoured for ADMIN only; OPD always sees its own.
"""

from flask import Blueprint, request

from inovasi.blueprints import json_body, list_payload, sort_args
from inovasi.middleware.access_control import require_auth
from inovasi.models.user import ROLE_ADMIN, ROLE_OPD
from inovasi.services import profil_inovasi_service as svc
from inovasi.services.inovasi_status import format_inovasi_response
from inovasi.utils.responses import api_success

profil_inovasi_bp = Blueprint("profil_inovasi_bp", __name__, url_prefix="/api/profil-inovasi")


def _detail(profil):
    data = format_inovasi_response(profil)
    data["indikatorInovasi"] = (
        profil.indikator_inovasi.to_dict() if profil.indikator_inovasi else None
    )
    return data


@profil_inovasi_bp.route("", methods=["GET"])
@require_auth(ROLE_ADMIN, ROLE_OPD)
def list_profil(auth):
    q = svc.list_profil(
        auth,
        jenis_inovasi=request.args.get("jenisInovasi"),
        user_id=request.args.get("userId"),
        **sort_args(),
    )
    return api_success(
        list_payload(q, format_inovasi_response), "Profil Inovasi retrieved successfully",
    )


@profil_inovasi_bp.route("/<profil_id>", methods=["GET"])
@require_auth(ROLE_ADMIN, ROLE_OPD)
def get_profil(auth, profil_id):
    profil = svc.get_profil_for(auth, profil_id)
    return api_success(_detail(profil), "Profil Inovasi retrieved successfully")


@profil_inovasi_bp.route("/<profil_id>/status", methods=["GET"])
@require_auth(ROLE_ADMIN, ROLE_OPD)
def get_status(auth, profil_id):
    return api_success(svc.profil_status(auth, profil_id), "Status retrieved successfully")


@profil_inovasi_bp.route("", methods=["POST"])
@require_auth(ROLE_ADMIN, ROLE_OPD)
def create_profil(auth):
    profil = svc.create_profil(auth, json_body())
    return api_success(
        format_inovasi_response(profil), "Profil Inovasi created successfully", status=201,
    )


@profil_inovasi_bp.route("/<profil_id>", methods=["PATCH"])
@require_auth(ROLE_ADMIN, ROLE_OPD)
def update_profil(auth, profil_id):
    profil = svc.update_profil(auth, profil_id, json_body())
    return api_success(format_inovasi_response(profil), "Profil Inovasi updated successfully")


@profil_inovasi_bp.route("/<profil_id>", methods=["DELETE"])
@require_auth(ROLE_ADMIN)
def delete_profil(auth, profil_id):
    svc.delete_profil(auth, profil_id)
    return api_success(message="Profil Inovasi deleted successfully")
