"""
Innovation Registry API
Flask Application Factory.

Usage:
    from inovasi import create_app
    app = create_app()           # defaults to APP_ENV or "development"
    app = create_app("testing")  # explicit config
"""

import logging
import os

import click
from flask import Flask, request
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate
from sqlalchemy import engine as _sa_engine
from sqlalchemy import event as _sa_event
from werkzeug.exceptions import HTTPException

from inovasi.config import config
from inovasi.core.exceptions import AppError, ValidationError
from inovasi.middleware.logging_config import configure_logging
from inovasi.middleware.rate_limiter import init_rate_limits
from inovasi.middleware.security_headers import init_security_headers
from inovasi.middleware.timing import init_request_timing
from inovasi.models import db
from inovasi.utils.responses import api_error

logger = logging.getLogger(__name__)


# ── SQLite FK enforcement (global engine event) ─────────────────────────
@_sa_event.listens_for(_sa_engine.Engine, "connect")
def _enable_sqlite_fk(dbapi_conn, connection_record):
    """Enable foreign key enforcement for SQLite connections."""
    if "sqlite" in type(dbapi_conn).__module__:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


migrate = Migrate()
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[],  # limits are attached per blueprint
    storage_uri=os.getenv("REDIS_URL", "memory://"),
)

_HTTP_MESSAGES = {
    404: "Resource not found",
    405: "Method not allowed",
    413: "Request body too large",
    415: "Unsupported media type",
    429: "Too many requests",
}


def create_app(config_name=None):
    """
    Create and configure the Flask application.

    Args:
        config_name: Configuration environment name.
                     One of: "development", "testing", "production".
                     Defaults to APP_ENV env var, or "development" if unset.

    Returns:
        Configured Flask application instance.
    """
    if config_name is None:
        config_name = os.getenv("APP_ENV", "development")

    app = Flask(__name__, instance_relative_config=True)
    # Instantiate so ProductionConfig can refuse to start without its secrets
    app.config.from_object(config[config_name]())
    app.config["APP_ENV"] = config_name

    # ── Structured logging (must be first) ───────────────────────────────
    configure_logging(app)

    # ── Extensions ───────────────────────────────────────────────────────
    db.init_app(app)
    migrate.init_app(app, db)
    limiter.init_app(app)
    cors_origins = app.config.get("CORS_ORIGINS", "*")
    if cors_origins and cors_origins != "*":
        CORS(app, origins=[o.strip() for o in cors_origins.split(",") if o.strip()])
    else:
        CORS(app)

    # ── HTTP middleware ──────────────────────────────────────────────────
    init_security_headers(app)
    init_request_timing(app)

    @app.before_request
    def _guard_content_type():
        # Mutating API calls carry JSON or a multipart upload
        if request.method in ("POST", "PUT", "PATCH") and request.path.startswith("/api/"):
            ct = request.mimetype or ""
            if request.content_length and ct not in (
                "application/json", "multipart/form-data", "application/x-www-form-urlencoded",
            ):
                return api_error("Content-Type must be application/json or multipart/form-data", 415)
        return None

    # ── Storage ──────────────────────────────────────────────────────────
    os.makedirs(app.config["UPLOAD_FOLDER"], exist_ok=True)
    if app.config["SQLALCHEMY_DATABASE_URI"].startswith("sqlite:///") and ":memory:" not in (
        app.config["SQLALCHEMY_DATABASE_URI"]
    ):
        os.makedirs(app.instance_path, exist_ok=True)

    from inovasi.models import inovasi as _inovasi_models  # noqa: F401
    from inovasi.models import site as _site_models        # noqa: F401
    from inovasi.models import user as _user_models        # noqa: F401

    # ── Auto-create tables (CREATE IF NOT EXISTS) ────────────────────────
    with app.app_context():
        db.create_all()
        logger.debug("db.create_all() completed")

    # ── Blueprints ───────────────────────────────────────────────────────
    from inovasi.blueprints.auth_bp import auth_bp
    from inovasi.blueprints.carousel_bp import carousel_bp
    from inovasi.blueprints.health_bp import health_bp
    from inovasi.blueprints.indikator_inovasi_bp import indikator_inovasi_bp
    from inovasi.blueprints.kontak_bp import kontak_bp
    from inovasi.blueprints.profil_inovasi_bp import profil_inovasi_bp
    from inovasi.blueprints.system_title_bp import system_title_bp
    from inovasi.blueprints.uploads_bp import uploads_bp
    from inovasi.blueprints.user_bp import user_bp

    for bp in (
        health_bp, auth_bp, user_bp, profil_inovasi_bp, indikator_inovasi_bp,
        carousel_bp, system_title_bp, kontak_bp, uploads_bp,
    ):
        app.register_blueprint(bp)

    _register_error_handlers(app)
    _register_cli(app)

    # ── Rate limiting (after blueprints registered) ──────────────────────
    init_rate_limits(app, limiter)

    return app


def _register_error_handlers(app):
    """Render every failure in the standard envelope."""

    @app.errorhandler(AppError)
    def _handle_app_error(err):
        if err.status_code >= 500:
            logger.error("Application error: %s", err.message)
        errors = err.errors if isinstance(err, ValidationError) else None
        return api_error(err.message, err.status_code, errors=errors)

    @app.errorhandler(HTTPException)
    def _handle_http_error(err):
        message = _HTTP_MESSAGES.get(err.code, err.name)
        if err.code == 404 and request.path.startswith("/api/"):
            message = f"Route {request.path} not found"
        return api_error(message, err.code or 500)

    @app.errorhandler(Exception)
    def _handle_unexpected(err):
        db.session.rollback()
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        message = "Internal server error"
        if app.config.get("APP_ENV") != "production":
            message = f"Internal server error: {err}"
        return api_error(message, 500)


def _register_cli(app):

    @app.cli.command("seed-users")
    def seed_users_cmd():
        """Create the default admin/opd1/opd2 accounts if missing."""
        from inovasi.services.seed import seed_default_users
        created = seed_default_users()
        click.echo(f"Seeded {len(created)} new user(s): {', '.join(created) or '-'}")

    @app.cli.command("create-admin")
    @click.option("--username", required=True, help="Login name for the new admin.")
    @click.option("--nama", default="Administrator", show_default=True)
    @click.option("--password", default=None, help="Generated when omitted.")
    def create_admin_cmd(username, nama, password):
        """Create an ADMIN account."""
        from inovasi.services.seed import create_admin
        try:
            user, password = create_admin(username, nama, password)
        except AppError as err:
            details = "; ".join(e["message"] for e in getattr(err, "errors", []))
            raise click.ClickException(details or err.message)
        click.echo(f"Created admin {user.username}")
        click.echo(f"Password: {password}")
