"""
Innovation Registry API configuration.

Selected by name in ``create_app()`` (``APP_ENV``; development when
unset). Classes are instantiated there, which lets the production class
refuse to boot without its secrets.

Environment variables:
    DATABASE_URL / TEST_DATABASE_URL   SQLAlchemy URL (postgres:// accepted)
    SECRET_KEY, JWT_SECRET_KEY         signing keys
    JWT_EXPIRES                        token lifetime in seconds (24h)
    BCRYPT_ROUNDS                      password hash cost (12)
    UPLOAD_FOLDER                      root of stored evidence and carousel files
    CORS_ORIGINS                       comma-separated allow-list, "*" outside production
    REDIS_URL                          rate-limit storage (memory:// when unset)
    LOG_LEVEL                          see middleware/logging_config.py
"""

import os
import secrets

basedir = os.path.abspath(os.path.dirname(os.path.dirname(__file__)))

_SQLITE_DEV = f"sqlite:///{os.path.join(basedir, 'instance', 'inovasi_dev.db')}"
_SQLITE_MEMORY = "sqlite:///:memory:"

# Per-process keys; tokens do not survive a restart outside production
_EPHEMERAL_KEY = secrets.token_hex(32)


def _database_url(default=None):
    # SQLAlchemy 2 only understands the postgresql:// scheme
    raw = os.getenv("DATABASE_URL", "")
    if raw.startswith("postgres://"):
        raw = "postgresql://" + raw[len("postgres://"):]
    return raw or default


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", _EPHEMERAL_KEY)
    DEBUG = False
    TESTING = False
    APP_VERSION = "1.0.0"

    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True, "pool_recycle": 300}

    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", _EPHEMERAL_KEY)
    JWT_EXPIRES = int(os.getenv("JWT_EXPIRES", "86400"))
    BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))

    UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", os.path.join(basedir, "uploads"))
    # One indikator request: 20 files of 10 MB plus form fields
    MAX_CONTENT_LENGTH = 205 * 1024 * 1024

    REDIS_URL = os.getenv("REDIS_URL", "memory://")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")


class DevelopmentConfig(Config):
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = _database_url(_SQLITE_DEV)


class TestingConfig(Config):
    """In-memory SQLite, fixed JWT key, cheapest bcrypt cost, no rate limits."""

    TESTING = True
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", _SQLITE_MEMORY)
    SQLALCHEMY_ENGINE_OPTIONS = {}
    JWT_SECRET_KEY = "test-jwt-secret"
    BCRYPT_ROUNDS = 4
    RATELIMIT_ENABLED = False


class ProductionConfig(Config):
    SQLALCHEMY_DATABASE_URI = _database_url()
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "")
    SQLALCHEMY_ENGINE_OPTIONS = dict(
        Config.SQLALCHEMY_ENGINE_OPTIONS, pool_size=5, max_overflow=10, pool_timeout=20,
    )

    def __init__(self):
        missing = [
            name for name, value in (
                ("DATABASE_URL", self.SQLALCHEMY_DATABASE_URI),
                ("JWT_SECRET_KEY", self.JWT_SECRET_KEY),
            ) if not value
        ]
        if missing:
            raise RuntimeError(f"Missing required production settings: {', '.join(missing)}")


config = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    "default": DevelopmentConfig,
}
