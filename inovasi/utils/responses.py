"""Standard JSON response envelope.

Every response body has the shape::

    {"success": bool, "message": str, "data"?: ..., "errors"?: [{"field", "message"}]}

Usage
-----
    from inovasi.utils.responses import api_success, api_error

    return api_success(profil.to_dict(), "Profil inovasi created", status=201)
    return api_error("Profil inovasi not found", 404)
"""

from __future__ import annotations

from flask import jsonify


def api_success(data=None, message: str = "OK", *, status: int = 200):
    """Return a ``(Response, status)`` success envelope.

    ``data`` is omitted from the body when it is None.
    """
    body: dict = {"success": True, "message": message}
    if data is not None:
        body["data"] = data
    return jsonify(body), status


def api_error(message: str, status: int = 400, *, errors: list[dict] | None = None):
    """Return a ``(Response, status)`` error envelope.

    Parameters
    ----------
    message : str
        Human-readable explanation for the client.
    status : int
        HTTP status code.
    errors : list[dict], optional
        Field-level ``{"field", "message"}`` entries (validation failures).
    """
    body: dict = {"success": False, "message": message}
    if errors:
        body["errors"] = errors
    return jsonify(body), status
