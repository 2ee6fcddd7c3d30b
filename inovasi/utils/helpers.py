"""Shared helpers used by the service layer.

get_or_404:          primary-key lookup raising NotFoundError
parse_date_input:    strict date parsing for request payloads
db_commit_or_raise:  commit translating IntegrityError into ConflictError
apply_search / apply_sort: shared list filtering and allow-listed ordering
"""
import logging
from datetime import date, datetime

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError

from inovasi.core.exceptions import ConflictError, NotFoundError, ValidationError
from inovasi.models import db

logger = logging.getLogger(__name__)


def get_or_404(model, pk, label=None):
    """Fetch a model instance by primary key or raise NotFoundError."""
    label = label or model.__name__
    obj = db.session.get(model, pk) if pk else None
    if obj is None:
        raise NotFoundError(label, pk)
    return obj


def parse_date_input(value):
    """Parse a date string, raising ValueError on bad input.

    Supports: YYYY-MM-DD, full ISO datetimes (time part dropped),
    DD-MM-YYYY and date objects. Empty input returns None.
    """
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    try:
        return datetime.strptime(text, "%d-%m-%Y").date()
    except ValueError as exc:
        raise ValueError("Invalid date format. Use YYYY-MM-DD.") from exc


def parse_bool(value, default=None):
    """Interpret JSON booleans and multipart/query strings ("true"/"false")."""
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in ("true", "1", "yes"):
        return True
    if text in ("false", "0", "no"):
        return False
    raise ValueError(f"Invalid boolean value: {value!r}")


# ── Database commit helper ───────────────────────────────────────────────────

def db_commit_or_raise(resource: str, field: str, value=None):
    """Commit the current session; a unique-constraint failure becomes ConflictError.

    The storage constraint is the source of truth under concurrent writes,
    so every create/update that touches a unique column commits through
    here instead of relying only on the pre-check.
    """
    try:
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        logger.warning("Integrity error on commit (%s.%s): %s", resource, field, exc.orig)
        raise ConflictError(resource, field, value) from exc
    except Exception:
        db.session.rollback()
        raise


# ── List query helpers ───────────────────────────────────────────────────────

SORT_ORDERS = ("asc", "desc")


def apply_search(query, term, *columns):
    """Case-insensitive substring match of ``term`` over any of ``columns``."""
    term = (term or "").strip()
    if not term:
        return query
    pattern = f"%{term}%"
    return query.filter(or_(*(col.ilike(pattern) for col in columns)))


def apply_sort(query, columns: dict, sort_by, sort_order, default_by, default_order="desc"):
    """Order by an allow-listed field; unknown fields raise ValidationError.

    ``columns`` maps the API field name (``createdAt``) to a column.
    Ties are broken by primary key so paging stays stable.
    """
    sort_by = sort_by or default_by
    sort_order = (sort_order or default_order).lower()
    if sort_by not in columns:
        raise ValidationError.for_field(
            "sortBy", f"sortBy must be one of: {', '.join(columns)}",
        )
    if sort_order not in SORT_ORDERS:
        raise ValidationError.for_field("sortOrder", "sortOrder must be one of: asc, desc")
    column = columns[sort_by]
    ordered = column.asc() if sort_order == "asc" else column.desc()
    pk = query.column_descriptions[0]["entity"].id
    return query.order_by(ordered, pk.asc())
