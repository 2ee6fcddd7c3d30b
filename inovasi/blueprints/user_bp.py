"""
User Blueprint — ADMIN account management.

    GET    /api/users/stats               — counts by status / role
    GET    /api/users                     — list (search, role, status, sort, paging)
    GET    /api/users/<id>                — detail with profilInovasiCount
    POST   /api/users                     — create
    PUT    /api/users/<id>                — update username / nama / role / status
    PATCH  /api/users/<id>/password       — change password
    PATCH  /api/users/<id>/toggle-status  — AKTIF <-> TIDAK_AKTIF
    DELETE /api/users/<id>                — soft delete when the user owns profil, else hard
"""

from flask import Blueprint, request

from inovasi.blueprints import json_body, list_payload, sort_args
from inovasi.middleware.access_control import require_auth
from inovasi.models.user import ROLE_ADMIN
from inovasi.services import user_service
from inovasi.utils.responses import api_success

user_bp = Blueprint("user_bp", __name__, url_prefix="/api/users")


@user_bp.route("/stats", methods=["GET"])
@require_auth(ROLE_ADMIN)
def stats(auth):
    return api_success(user_service.user_stats(), "User statistics retrieved successfully")


@user_bp.route("", methods=["GET"])
@require_auth(ROLE_ADMIN)
def list_users(auth):
    q = user_service.list_users(
        role=request.args.get("role"),
        status=request.args.get("status"),
        **sort_args(),
    )
    return api_success(list_payload(q), "Users retrieved successfully")


@user_bp.route("/<user_id>", methods=["GET"])
@require_auth(ROLE_ADMIN)
def get_user(auth, user_id):
    user = user_service.get_user(user_id)
    return api_success(user.to_dict(include_count=True), "User retrieved successfully")


@user_bp.route("", methods=["POST"])
@require_auth(ROLE_ADMIN)
def create_user(auth):
    user = user_service.create_user(json_body())
    return api_success(user.to_dict(), "User created successfully", status=201)


@user_bp.route("/<user_id>", methods=["PUT"])
@require_auth(ROLE_ADMIN)
def update_user(auth, user_id):
    user = user_service.update_user(user_id, json_body(), auth.user_id)
    return api_success(user.to_dict(), "User updated successfully")


@user_bp.route("/<user_id>/password", methods=["PATCH"])
@require_auth(ROLE_ADMIN)
def change_password(auth, user_id):
    """Body: { "currentPassword", "newPassword", "confirmPassword" }"""
    user_service.change_password(user_id, json_body())
    return api_success(message="Password changed successfully")


@user_bp.route("/<user_id>/toggle-status", methods=["PATCH"])
@require_auth(ROLE_ADMIN)
def toggle_status(auth, user_id):
    user = user_service.toggle_status(user_id, auth.user_id)
    state = "activated" if user.is_active else "deactivated"
    return api_success(user.to_dict(), f"User {state} successfully")


@user_bp.route("/<user_id>", methods=["DELETE"])
@require_auth(ROLE_ADMIN)
def delete_user(auth, user_id):
    result = user_service.delete_user(user_id, auth.user_id)
    message = (
        "User deactivated because they still own Profil Inovasi records"
        if result["softDeleted"] else "User deleted successfully"
    )
    return api_success(result, message)
