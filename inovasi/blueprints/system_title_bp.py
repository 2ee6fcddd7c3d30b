"""
System Title Blueprint.

    GET    /api/system-title/active               — public
    GET    /api/system-title                      — list (search, isActive, sort, paging)
    GET    /api/system-title/<id>
    POST   /api/system-title                      — ADMIN
    PATCH  /api/system-title/<id>                 — ADMIN
    DELETE /api/system-title/<id>                 — ADMIN
    PATCH  /api/system-title/<id>/toggle-active   — ADMIN
"""

from flask import Blueprint

from inovasi.blueprints import bool_arg, json_body, list_payload, sort_args
from inovasi.middleware.access_control import require_auth
from inovasi.models.user import ROLE_ADMIN
from inovasi.services import system_title_service as svc
from inovasi.utils.responses import api_success

system_title_bp = Blueprint("system_title_bp", __name__, url_prefix="/api/system-title")


@system_title_bp.route("/active", methods=["GET"])
def active_titles():
    titles = svc.active_titles()
    return api_success([t.to_dict() for t in titles], "Active system titles retrieved successfully")


@system_title_bp.route("", methods=["GET"])
@require_auth()
def list_titles(auth):
    q = svc.list_titles(is_active=bool_arg("isActive"), **sort_args())
    return api_success(list_payload(q), "System titles retrieved successfully")


@system_title_bp.route("/<title_id>", methods=["GET"])
@require_auth()
def get_title(auth, title_id):
    return api_success(svc.get_title(title_id).to_dict(), "System title retrieved successfully")


@system_title_bp.route("", methods=["POST"])
@require_auth(ROLE_ADMIN)
def create_title(auth):
    record = svc.create_title(json_body())
    return api_success(record.to_dict(), "System title created successfully", status=201)


@system_title_bp.route("/<title_id>", methods=["PATCH"])
@require_auth(ROLE_ADMIN)
def update_title(auth, title_id):
    record = svc.update_title(title_id, json_body())
    return api_success(record.to_dict(), "System title updated successfully")


@system_title_bp.route("/<title_id>", methods=["DELETE"])
@require_auth(ROLE_ADMIN)
def delete_title(auth, title_id):
    svc.delete_title(title_id)
    return api_success(message="System title deleted successfully")


@system_title_bp.route("/<title_id>/toggle-active", methods=["PATCH"])
@require_auth(ROLE_ADMIN)
def toggle_active(auth, title_id):
    record = svc.toggle_active(title_id)
    state = "activated" if record.is_active else "deactivated"
    return api_success(record.to_dict(), f"System title {state} successfully")
