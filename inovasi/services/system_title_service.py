"""System title service — the homepage headline(s)."""

import logging

from inovasi.core.exceptions import ValidationError
from inovasi.models import db
from inovasi.models.site import SystemTitle
from inovasi.utils.helpers import apply_search, apply_sort, get_or_404
from inovasi.utils.validators import FieldErrors, check_bool, check_string

logger = logging.getLogger(__name__)

RESOURCE = "System title"

SORT_COLUMNS = {
    "title": SystemTitle.title,
    "createdAt": SystemTitle.created_at,
    "updatedAt": SystemTitle.updated_at,
}


def list_titles(*, search=None, is_active=None, sort_by=None, sort_order=None):
    q = apply_search(SystemTitle.query, search, SystemTitle.title)
    if is_active is not None:
        q = q.filter(SystemTitle.is_active == is_active)
    return apply_sort(q, SORT_COLUMNS, sort_by, sort_order, default_by="createdAt")


def active_titles():
    return (
        SystemTitle.query.filter_by(is_active=True)
        .order_by(SystemTitle.created_at.desc())
        .all()
    )


def get_title(title_id) -> SystemTitle:
    return get_or_404(SystemTitle, title_id, RESOURCE)


def create_title(data: dict) -> SystemTitle:
    errors = FieldErrors()
    title = check_string(errors, data, "title", max_len=1000)
    is_active = check_bool(errors, data, "isActive")
    errors.raise_if_any()

    record = SystemTitle(title=title, is_active=True if is_active is None else is_active)
    db.session.add(record)
    db.session.commit()
    logger.info("Created system title %s", record.id)
    return record


def update_title(title_id, data: dict) -> SystemTitle:
    record = get_title(title_id)
    errors = FieldErrors()
    title = check_string(errors, data, "title", max_len=1000, required=False)
    is_active = check_bool(errors, data, "isActive")
    errors.raise_if_any()
    if title is None and is_active is None:
        raise ValidationError("No fields to update")

    if title is not None:
        record.title = title
    if is_active is not None:
        record.is_active = is_active
    db.session.commit()
    logger.info("Updated system title %s", record.id)
    return record


def delete_title(title_id) -> None:
    record = get_title(title_id)
    db.session.delete(record)
    db.session.commit()
    logger.info("Deleted system title %s", title_id)


def toggle_active(title_id) -> SystemTitle:
    record = get_title(title_id)
    record.is_active = not record.is_active
    db.session.commit()
    return record
