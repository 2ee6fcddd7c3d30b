"""
Kontak Blueprint — office contact details.

    GET    /api/kontak        — public list (search namaDinas/alamat/email)
    GET    /api/kontak/<id>   — public
    POST   /api/kontak        — ADMIN
    PUT    /api/kontak/<id>   — ADMIN; fields optional
    DELETE /api/kontak/<id>   — ADMIN
"""

from flask import Blueprint

from inovasi.blueprints import json_body, list_payload, sort_args
from inovasi.middleware.access_control import require_auth
from inovasi.models.user import ROLE_ADMIN
from inovasi.services import kontak_service as svc
from inovasi.utils.responses import api_success

kontak_bp = Blueprint("kontak_bp", __name__, url_prefix="/api/kontak")


@kontak_bp.route("", methods=["GET"])
def list_kontak():
    return api_success(list_payload(svc.list_kontak(**sort_args())), "Kontak retrieved successfully")


@kontak_bp.route("/<kontak_id>", methods=["GET"])
def get_kontak(kontak_id):
    return api_success(svc.get_kontak(kontak_id).to_dict(), "Kontak retrieved successfully")


@kontak_bp.route("", methods=["POST"])
@require_auth(ROLE_ADMIN)
def create_kontak(auth):
    kontak = svc.create_kontak(json_body())
    return api_success(kontak.to_dict(), "Kontak created successfully", status=201)


@kontak_bp.route("/<kontak_id>", methods=["PUT"])
@require_auth(ROLE_ADMIN)
def update_kontak(auth, kontak_id):
    kontak = svc.update_kontak(kontak_id, json_body())
    return api_success(kontak.to_dict(), "Kontak updated successfully")


@kontak_bp.route("/<kontak_id>", methods=["DELETE"])
@require_auth(ROLE_ADMIN)
def delete_kontak(auth, kontak_id):
    svc.delete_kontak(kontak_id)
    return api_success(message="Kontak deleted successfully")
