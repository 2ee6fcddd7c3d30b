"""
Security headers middleware.

Applies X-Content-Type-Options, X-Frame-Options, Strict-Transport-Security,
Referrer-Policy and a locked-down Content-Security-Policy to every
response. Files under ``/uploads`` are embedded by the separately hosted
frontend, so they are served with a cross-origin resource policy.

Usage:
    from inovasi.middleware.security_headers import init_security_headers
    init_security_headers(app)
"""

from flask import request

# JSON API: nothing is rendered, nothing may frame it
_API_CSP = "default-src 'none'; frame-ancestors 'none'; base-uri 'none'"


def init_security_headers(app):
    """Register after_request handler that injects security headers."""

    @app.after_request
    def _add_security_headers(response):
        if request.path.startswith("/uploads/"):
            response.headers["Cross-Origin-Resource-Policy"] = "cross-origin"
        else:
            response.headers.setdefault("Content-Security-Policy", _API_CSP)
            response.headers.setdefault("Cross-Origin-Resource-Policy", "same-site")

        # Prevent MIME-type sniffing (uploaded files included)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")

        response.headers.setdefault("X-Frame-Options", "DENY")

        # HTTPS enforcement (ignored over HTTP, but ready for production)
        response.headers.setdefault(
            "Strict-Transport-Security", "max-age=31536000; includeSubDomains"
        )

        response.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")

        # Remove server identification
        response.headers.pop("Server", None)

        return response
