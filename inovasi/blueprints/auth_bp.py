"""
Auth Blueprint — account session endpoints.

  POST /api/auth/register   — Public sign-up (always an OPD account)
  POST /api/auth/login      — Username + password → bearer token
  GET  /api/auth/profile    — Current user
  PUT  /api/auth/profile    — Update own nama / password
  POST /api/auth/logout     — Acknowledge; the client discards its token
"""

from flask import Blueprint

from inovasi.blueprints import json_body
from inovasi.middleware.access_control import require_auth
from inovasi.services import auth_service
from inovasi.utils.responses import api_success

auth_bp = Blueprint("auth_bp", __name__, url_prefix="/api/auth")


@auth_bp.route("/register", methods=["POST"])
def register():
    """Body: { "username", "password", "nama" }"""
    user = auth_service.register(json_body())
    return api_success(user.to_dict(), "User registered successfully", status=201)


@auth_bp.route("/login", methods=["POST"])
def login():
    """Body: { "username", "password" }"""
    return api_success(auth_service.login(json_body()), "Login successful")


@auth_bp.route("/profile", methods=["GET"])
@require_auth()
def get_profile(auth):
    user = auth_service.get_profile(auth.user_id)
    return api_success(user.to_dict(include_count=True), "Profile retrieved successfully")


@auth_bp.route("/profile", methods=["PUT"])
@require_auth()
def update_profile(auth):
    """Body: { "nama"?, "password"?, "currentPassword" (with password) }"""
    user = auth_service.update_profile(auth.user_id, json_body())
    return api_success(user.to_dict(), "Profile updated successfully")


@auth_bp.route("/logout", methods=["POST"])
@require_auth()
def logout(auth):
    # Tokens are stateless; nothing to revoke server-side
    return api_success(message="Logout successful")
