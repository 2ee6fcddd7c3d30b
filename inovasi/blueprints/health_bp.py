"""
Health check blueprint.

Endpoints:
    GET /api/         — welcome message with the API version
    GET /api/health   — liveness with database round-trip and upload dir check
"""

import logging
import os
import time

from flask import Blueprint, current_app, jsonify

from inovasi.models import db
from inovasi.utils.responses import api_success

logger = logging.getLogger(__name__)

health_bp = Blueprint("health_bp", __name__, url_prefix="/api")


@health_bp.route("/", methods=["GET"])
def welcome():
    return api_success(
        {"version": current_app.config.get("APP_VERSION", "1.0.0")},
        "Welcome to the Innovation Registry API",
    )


@health_bp.route("/health", methods=["GET"])
def health():
    """Detailed liveness check with dependency status."""
    checks = {}
    overall = True

    # ── Database ─────────────────────────────────────────────────────
    try:
        t0 = time.perf_counter()
        db.session.execute(db.text("SELECT 1"))
        db_ms = (time.perf_counter() - t0) * 1000
        checks["database"] = {"status": "ok", "latencyMs": round(db_ms, 1)}
    except Exception as exc:
        db.session.rollback()
        checks["database"] = {"status": "error", "detail": str(exc)}
        overall = False
        logger.error("Health check — database failed: %s", exc)

    # ── Upload storage ───────────────────────────────────────────────
    upload_dir = current_app.config["UPLOAD_FOLDER"]
    if os.path.isdir(upload_dir) and os.access(upload_dir, os.W_OK):
        checks["uploads"] = {"status": "ok"}
    else:
        checks["uploads"] = {"status": "error", "detail": "upload folder is not writable"}
        overall = False

    body = {
        "success": overall,
        "message": "OK" if overall else "Degraded",
        "data": {
            "status": "ok" if overall else "degraded",
            "version": current_app.config.get("APP_VERSION", "1.0.0"),
            "checks": checks,
        },
    }
    return jsonify(body), 200 if overall else 503
