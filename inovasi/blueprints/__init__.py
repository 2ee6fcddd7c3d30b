"""
Innovation Registry API
Blueprint registry and shared list/request helpers.
"""

from flask import request

from inovasi.core.exceptions import ValidationError
from inovasi.utils.helpers import parse_bool

DEFAULT_LIMIT = 10
MAX_LIMIT = 100


def _positive_int(name, default):
    raw = request.args.get(name)
    if raw in (None, ""):
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise ValidationError.for_field(name, f"{name} must be a positive integer")
    if value < 1:
        raise ValidationError.for_field(name, f"{name} must be a positive integer")
    return value


def paginate_query(query, default_limit=DEFAULT_LIMIT, max_limit=MAX_LIMIT):
    """Apply page/limit pagination to a SQLAlchemy query.

    Query params:
        page   — 1-based page number (default 1)
        limit  — page size (default 10, capped at max_limit)

    Returns:
        (items_list, pagination_dict)
    """
    page = _positive_int("page", 1)
    limit = min(_positive_int("limit", default_limit), max_limit)
    total = query.order_by(None).count()
    items = query.limit(limit).offset((page - 1) * limit).all()
    pagination = {
        "total": total,
        "page": page,
        "limit": limit,
        "totalPages": (total + limit - 1) // limit,
    }
    return items, pagination


def list_payload(query, serialize=None):
    """Paginate ``query`` into the ``{items, pagination}`` list body."""
    items, pagination = paginate_query(query)
    serialize = serialize or (lambda obj: obj.to_dict())
    return {"items": [serialize(obj) for obj in items], "pagination": pagination}


def sort_args():
    """``sortBy`` / ``sortOrder`` / ``search`` as passed by the client."""
    return {
        "search": request.args.get("search"),
        "sort_by": request.args.get("sortBy"),
        "sort_order": request.args.get("sortOrder"),
    }


def bool_arg(name):
    """Optional boolean query parameter (``true``/``false``)."""
    try:
        return parse_bool(request.args.get(name))
    except ValueError:
        raise ValidationError.for_field(name, f"{name} must be true or false")


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def form_or_json() -> dict:
    """Form fields for multipart requests, the JSON object otherwise."""
    if request.mimetype in ("multipart/form-data", "application/x-www-form-urlencoded"):
        return request.form
    return json_body()
