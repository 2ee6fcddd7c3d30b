"""
Rate limiting — per-blueprint limits on top of the app-wide Limiter.

The Limiter instance is created in ``inovasi/__init__.py`` with no
default limits; this module applies limits per route category.

Usage:
    from inovasi.middleware.rate_limiter import init_rate_limits
    init_rate_limits(app, limiter)
"""

import logging

logger = logging.getLogger(__name__)

AUTH_LIMIT = "10/minute"
WRITE_LIMIT = "60/minute"
READ_LIMIT = "200/minute"

# Credential endpoints are the brute-force target
_STRICT_ENDPOINTS = ("auth_bp.login", "auth_bp.register")

_WRITE_BLUEPRINTS = (
    "user_bp", "profil_inovasi_bp", "indikator_inovasi_bp",
    "carousel_bp", "system_title_bp", "kontak_bp",
)


def init_rate_limits(app, limiter):
    """
    Apply rate limits to API blueprints.

    Limits (per remote IP):
        - login/register:   10/minute
        - resource APIs:    60/minute
        - uploads serving:  200/minute
        - health check:     exempt

    Rate limiting is disabled in testing mode.
    """
    if app.config.get("TESTING"):
        logger.info("Rate limiter disabled (TESTING=True)")
        return

    for endpoint in _STRICT_ENDPOINTS:
        view = app.view_functions.get(endpoint)
        if view is not None:
            app.view_functions[endpoint] = limiter.limit(AUTH_LIMIT)(view)

    for bp_name in _WRITE_BLUEPRINTS:
        bp = app.blueprints.get(bp_name)
        if bp:
            limiter.limit(WRITE_LIMIT)(bp)

    bp = app.blueprints.get("uploads_bp")
    if bp:
        limiter.limit(READ_LIMIT)(bp)

    bp = app.blueprints.get("health_bp")
    if bp:
        limiter.exempt(bp)

    logger.info(
        "Rate limiter configured — auth: %s, resources: %s, uploads: %s",
        AUTH_LIMIT, WRITE_LIMIT, READ_LIMIT,
    )
