"""
Innovation Registry — SQLAlchemy models.

``db`` is the single process-wide store handle; it is bound to the
application once in ``create_app()`` via ``db.init_app(app)``.
"""

import uuid
from datetime import datetime, timezone

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


def new_uuid() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def iso(value):
    """Serialise a date/datetime column (None-safe)."""
    return value.isoformat() if value else None
