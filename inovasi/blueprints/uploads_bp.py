"""
Uploads blueprint — serves stored files.

    GET /uploads/<path>   e.g. /uploads/carousel/carousel_1712000000000_<uuid>.jpg
                               /uploads/<profilInovasiId>/<uuid>.pdf

Paths are the relative paths stored on the records. ``send_from_directory``
refuses anything that resolves outside ``UPLOAD_FOLDER``.
"""

from flask import Blueprint, current_app, send_from_directory

uploads_bp = Blueprint("uploads_bp", __name__, url_prefix="/uploads")


@uploads_bp.route("/<path:filename>", methods=["GET"])
def serve_upload(filename):
    return send_from_directory(current_app.config["UPLOAD_FOLDER"], filename, max_age=3600)
