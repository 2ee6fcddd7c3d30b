"""
Carousel service — homepage slider images.

Images live in the flat ``carousel/`` upload pool. ``sort_order`` is a
mutable total order (gaps allowed); ``reorder`` rewrites a batch of
positions in one transaction.
"""

import logging

from inovasi.core.exceptions import NotFoundError, ValidationError
from inovasi.models import db
from inovasi.models.site import CarouselImage
from inovasi.services import upload_service
from inovasi.services.upload_service import CAROUSEL_DIR, CAROUSEL_POLICY, UploadBatch
from inovasi.utils.helpers import apply_search, apply_sort, get_or_404
from inovasi.utils.validators import FieldErrors, check_bool, check_int, check_string

logger = logging.getLogger(__name__)

RESOURCE = "Carousel image"
IMAGE_FIELD = "image"

SORT_COLUMNS = {
    "sortOrder": CarouselImage.sort_order,
    "createdAt": CarouselImage.created_at,
    "updatedAt": CarouselImage.updated_at,
}


def _validate_fields(form):
    errors = FieldErrors()
    title = None
    if form.get("title") is not None:
        # An explicit empty title clears it
        title = str(form.get("title")).strip()
        if len(title) > 255:
            errors.add("title", "title must be at most 255 characters")
    values = {
        "title": title,
        "sort_order": check_int(errors, form, "sortOrder", minimum=0, required=False),
        "is_active": check_bool(errors, form, "isActive"),
    }
    errors.raise_if_any()
    return values


def _image_from(files):
    """The single ``image`` part, or None; any other file part is rejected."""
    errors = FieldErrors()
    for field in files.keys():
        if field != IMAGE_FIELD:
            errors.add(field, f"Unexpected file field {field}")
    errors.raise_if_any("Invalid file upload")
    storage = files.get(IMAGE_FIELD)
    return storage if storage is not None and storage.filename else None


# ── Queries ──────────────────────────────────────────────────────────────


def list_images(*, search=None, is_active=None, sort_by=None, sort_order=None):
    q = apply_search(CarouselImage.query, search, CarouselImage.title)
    if is_active is not None:
        q = q.filter(CarouselImage.is_active == is_active)
    return apply_sort(
        q, SORT_COLUMNS, sort_by, sort_order, default_by="sortOrder", default_order="asc",
    )


def active_images():
    return (
        CarouselImage.query.filter_by(is_active=True)
        .order_by(CarouselImage.sort_order.asc(), CarouselImage.created_at.asc())
        .all()
    )


def get_image(image_id) -> CarouselImage:
    return get_or_404(CarouselImage, image_id, RESOURCE)


# ── Mutations ────────────────────────────────────────────────────────────


def create_image(form, files) -> CarouselImage:
    values = _validate_fields(form)
    storage = _image_from(files)
    if storage is None:
        raise ValidationError.for_field(IMAGE_FIELD, "Image file is required")

    with UploadBatch(CAROUSEL_POLICY, CAROUSEL_DIR) as batch:
        path = batch.save(IMAGE_FIELD, storage)
        image = CarouselImage(
            title=values["title"] or None,
            path=path,
            sort_order=values["sort_order"] if values["sort_order"] is not None else 0,
            is_active=True if values["is_active"] is None else values["is_active"],
        )
        db.session.add(image)
        db.session.commit()

    logger.info("Created carousel image %s", image.id)
    return image


def update_image(image_id, form, files) -> CarouselImage:
    image = get_image(image_id)
    values = _validate_fields(form)
    storage = _image_from(files)
    if storage is None and all(v is None for v in values.values()):
        raise ValidationError("No fields to update")

    old_path = None
    with UploadBatch(CAROUSEL_POLICY, CAROUSEL_DIR) as batch:
        if storage is not None:
            old_path = image.path
            image.path = batch.save(IMAGE_FIELD, storage)
        if values["title"] is not None:
            image.title = values["title"] or None
        if values["sort_order"] is not None:
            image.sort_order = values["sort_order"]
        if values["is_active"] is not None:
            image.is_active = values["is_active"]
        try:
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

    if old_path:
        upload_service.delete_upload(old_path)
    logger.info("Updated carousel image %s", image.id)
    return image


def delete_image(image_id) -> None:
    image = get_image(image_id)
    path = image.path
    db.session.delete(image)
    db.session.commit()
    upload_service.delete_upload(path)
    logger.info("Deleted carousel image %s", image_id)


def toggle_active(image_id) -> CarouselImage:
    image = get_image(image_id)
    image.is_active = not image.is_active
    db.session.commit()
    return image


def reorder(data: dict) -> list:
    """Apply ``imageOrders: [{id, sortOrder}]``; all ids must exist or nothing changes."""
    orders = data.get("imageOrders")
    if not isinstance(orders, list) or not orders:
        raise ValidationError.for_field("imageOrders", "imageOrders must be a non-empty array")

    errors = FieldErrors()
    wanted = {}
    for i, item in enumerate(orders):
        if not isinstance(item, dict):
            errors.add(f"imageOrders[{i}]", "Each entry must be an object with id and sortOrder")
            continue
        item_errors = FieldErrors()
        image_id = check_string(item_errors, item, "id")
        position = check_int(item_errors, item, "sortOrder", minimum=0)
        for e in item_errors.errors:
            errors.add(f"imageOrders[{i}].{e['field']}", e["message"])
        if image_id is not None and image_id in wanted:
            errors.add(f"imageOrders[{i}].id", "Duplicate id in imageOrders")
        elif image_id is not None and position is not None:
            wanted[image_id] = position
    errors.raise_if_any()

    images = CarouselImage.query.filter(CarouselImage.id.in_(wanted)).all()
    found = {img.id: img for img in images}
    missing = [image_id for image_id in wanted if image_id not in found]
    if missing:
        raise NotFoundError(RESOURCE, ", ".join(missing))

    for image_id, position in wanted.items():
        found[image_id].sort_order = position
    db.session.commit()
    logger.info("Reordered %d carousel image(s)", len(wanted))
    return sorted(images, key=lambda img: (img.sort_order, img.created_at))
