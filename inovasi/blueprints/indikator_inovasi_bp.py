"""
Indikator Inovasi Blueprint — evidence bundles (multipart uploads).

    GET    /api/indikator-inovasi                        — list (search over parent profil)
    GET    /api/indikator-inovasi/<id>                   — detail with parent profil
    GET    /api/indikator-inovasi/profil/<profil_id>     — bundle of one profil
    POST   /api/indikator-inovasi                        — multipart: profilInovasiId,
                                                           kualitasInovasiDaerah, 19 files
    PATCH  /api/indikator-inovasi/<id>                   — multipart: any subset of the above
    DELETE /api/indikator-inovasi/<id>                   — ADMIN; removes files
"""

from flask import Blueprint, request

from inovasi.blueprints import form_or_json, list_payload, sort_args
from inovasi.middleware.access_control import require_auth
from inovasi.models.user import ROLE_ADMIN, ROLE_OPD
from inovasi.services import indikator_inovasi_service as svc
from inovasi.utils.responses import api_success

indikator_inovasi_bp = Blueprint(
    "indikator_inovasi_bp", __name__, url_prefix="/api/indikator-inovasi",
)


@indikator_inovasi_bp.route("", methods=["GET"])
@require_auth(ROLE_ADMIN, ROLE_OPD)
def list_indikator(auth):
    q = svc.list_indikator(auth, **sort_args())
    return api_success(
        list_payload(q, lambda i: i.to_dict(include_profil=True)),
        "Indikator Inovasi retrieved successfully",
    )


@indikator_inovasi_bp.route("/<indikator_id>", methods=["GET"])
@require_auth(ROLE_ADMIN, ROLE_OPD)
def get_indikator(auth, indikator_id):
    indikator = svc.get_indikator_for(auth, indikator_id)
    return api_success(
        indikator.to_dict(include_profil=True), "Indikator Inovasi retrieved successfully",
    )


@indikator_inovasi_bp.route("/profil/<profil_id>", methods=["GET"])
@require_auth(ROLE_ADMIN, ROLE_OPD)
def get_by_profil(auth, profil_id):
    indikator = svc.get_by_profil(auth, profil_id)
    return api_success(
        indikator.to_dict(include_profil=True), "Indikator Inovasi retrieved successfully",
    )


@indikator_inovasi_bp.route("", methods=["POST"])
@require_auth(ROLE_ADMIN, ROLE_OPD)
def create_indikator(auth):
    indikator = svc.create_indikator(auth, form_or_json(), request.files)
    return api_success(
        indikator.to_dict(), "Indikator Inovasi created successfully", status=201,
    )


@indikator_inovasi_bp.route("/<indikator_id>", methods=["PATCH"])
@require_auth(ROLE_ADMIN, ROLE_OPD)
def update_indikator(auth, indikator_id):
    indikator = svc.update_indikator(auth, indikator_id, form_or_json(), request.files)
    return api_success(indikator.to_dict(), "Indikator Inovasi updated successfully")


@indikator_inovasi_bp.route("/<indikator_id>", methods=["DELETE"])
@require_auth(ROLE_ADMIN)
def delete_indikator(auth, indikator_id):
    svc.delete_indikator(auth, indikator_id)
    return api_success(message="Indikator Inovasi deleted successfully")
