"""Throttling for the credential endpoints (register and login).

Limits are keyed by client address and read from settings at request time,
so ``AUTH_RATE_LIMIT`` can change without rebuilding the limiter.
"""

from __future__ import annotations

import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from core.config import get_settings

logger = logging.getLogger(__name__)


def limiter_enabled() -> bool:
    settings = get_settings()
    if settings.app_env.lower() == "test":
        return False
    return settings.rate_limit_enabled


def build_limiter() -> Limiter:
    settings = get_settings()
    return Limiter(
        key_func=get_remote_address,
        storage_uri=settings.rate_limit_storage_uri,
        enabled=limiter_enabled(),
        headers_enabled=True,
    )


limiter = build_limiter()


def auth_rate_limit() -> str:
    return get_settings().auth_rate_limit


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    logger.warning("rate_limited", extra={"path": request.url.path, "limit": str(exc.detail)})
    response = JSONResponse(
        status_code=429,
        content={"detail": {"code": "RATE_LIMITED", "message": f"Too many attempts, limit is {exc.detail}"}},
    )
    view_limit = getattr(request.state, "view_rate_limit", None)
    if view_limit is not None:
        # Adds Retry-After and the X-RateLimit-* headers.
        response = request.app.state.limiter._inject_headers(response, view_limit)
    return response
