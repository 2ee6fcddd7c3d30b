"""
Carousel Blueprint — homepage slider images.

    GET    /api/carousel/active                — public; active images by sortOrder
    GET    /api/carousel                       — list (search title, isActive, sort, paging)
    GET    /api/carousel/<id>                  — detail
    POST   /api/carousel                       — ADMIN; multipart ``image`` + title/sortOrder/isActive
    PATCH  /api/carousel/<id>                  — ADMIN; optional new ``image``
    DELETE /api/carousel/<id>                  — ADMIN; removes the file
    PATCH  /api/carousel/sort-order            — ADMIN; { imageOrders: [{id, sortOrder}] }
    PATCH  /api/carousel/<id>/toggle-active    — ADMIN
"""

from flask import Blueprint, request

from inovasi.blueprints import bool_arg, form_or_json, json_body, list_payload, sort_args
from inovasi.middleware.access_control import require_auth
from inovasi.models.user import ROLE_ADMIN
from inovasi.services import carousel_service as svc
from inovasi.utils.responses import api_success

carousel_bp = Blueprint("carousel_bp", __name__, url_prefix="/api/carousel")


@carousel_bp.route("/active", methods=["GET"])
def active_images():
    images = svc.active_images()
    return api_success(
        [img.to_dict() for img in images], "Active carousel images retrieved successfully",
    )


@carousel_bp.route("", methods=["GET"])
@require_auth()
def list_images(auth):
    q = svc.list_images(is_active=bool_arg("isActive"), **sort_args())
    return api_success(list_payload(q), "Carousel images retrieved successfully")


@carousel_bp.route("/<image_id>", methods=["GET"])
@require_auth()
def get_image(auth, image_id):
    return api_success(svc.get_image(image_id).to_dict(), "Carousel image retrieved successfully")


@carousel_bp.route("", methods=["POST"])
@require_auth(ROLE_ADMIN)
def create_image(auth):
    image = svc.create_image(form_or_json(), request.files)
    return api_success(image.to_dict(), "Carousel image uploaded successfully", status=201)


@carousel_bp.route("/<image_id>", methods=["PATCH"])
@require_auth(ROLE_ADMIN)
def update_image(auth, image_id):
    image = svc.update_image(image_id, form_or_json(), request.files)
    return api_success(image.to_dict(), "Carousel image updated successfully")


@carousel_bp.route("/<image_id>", methods=["DELETE"])
@require_auth(ROLE_ADMIN)
def delete_image(auth, image_id):
    svc.delete_image(image_id)
    return api_success(message="Carousel image deleted successfully")


@carousel_bp.route("/sort-order", methods=["PATCH"])
@require_auth(ROLE_ADMIN)
def update_sort_order(auth):
    images = svc.reorder(json_body())
    return api_success(
        [img.to_dict() for img in images], "Carousel sort order updated successfully",
    )


@carousel_bp.route("/<image_id>/toggle-active", methods=["PATCH"])
@require_auth(ROLE_ADMIN)
def toggle_active(auth, image_id):
    image = svc.toggle_active(image_id)
    state = "activated" if image.is_active else "deactivated"
    return api_success(image.to_dict(), f"Carousel image {state} successfully")
