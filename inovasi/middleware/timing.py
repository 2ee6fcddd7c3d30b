"""
Request timing middleware.

Stamps every response with X-Request-ID (echoed from the client when
given) and X-Request-Duration-Ms, and writes one access log line per API
call. Multipart uploads get a wider slow-request budget than JSON calls.
"""

import logging
import time
import uuid

from flask import Flask, g, request

logger = logging.getLogger(__name__)

# Paths not worth an access line: liveness probes and static file hits
_QUIET_PATHS = frozenset({"/api/health"})
_QUIET_PREFIXES = ("/uploads/",)

SLOW_THRESHOLD_MS = 1000
SLOW_UPLOAD_THRESHOLD_MS = 5000


def _slow_threshold() -> int:
    if request.mimetype == "multipart/form-data":
        return SLOW_UPLOAD_THRESHOLD_MS
    return SLOW_THRESHOLD_MS


def _access_level(status: int, duration_ms: float) -> int:
    if status >= 500:
        return logging.ERROR
    if duration_ms > _slow_threshold():
        return logging.WARNING
    return logging.DEBUG


def init_request_timing(app: Flask):
    """Register before/after hooks for request ids and timing."""

    @app.before_request
    def _start_timer():
        g.request_start = time.perf_counter()
        g.request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:12]

    @app.after_request
    def _finish(response):
        start = getattr(g, "request_start", None)
        if start is None:
            return response

        duration_ms = (time.perf_counter() - start) * 1000
        response.headers["X-Request-ID"] = g.request_id
        response.headers["X-Request-Duration-Ms"] = f"{duration_ms:.1f}"

        if request.path in _QUIET_PATHS or request.path.startswith(_QUIET_PREFIXES):
            return response

        level = _access_level(response.status_code, duration_ms)
        if logger.isEnabledFor(level):
            logger.log(
                level, "%s %s %d (%.0fms)%s",
                request.method, request.path, response.status_code, duration_ms,
                " SLOW" if level == logging.WARNING else "",
                extra={
                    "method": request.method,
                    "path": request.path,
                    "status": response.status_code,
                    "duration_ms": round(duration_ms, 1),
                    "request_bytes": request.content_length or 0,
                    "request_id": g.request_id,
                },
            )
        return response
