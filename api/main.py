from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from api.observability import RequestContextMiddleware, configure_logging
from api.ratelimit import limiter, limiter_enabled, rate_limit_exceeded_handler
from api.routes import router
from core.config import get_settings
from core.errors import ActionError, Conflict, Forbidden, InvalidInput, StorageError, Unauthenticated

logger = logging.getLogger(__name__)

ERROR_STATUS: dict[type[ActionError], int] = {
    Unauthenticated: 401,
    Forbidden: 403,
    InvalidInput: 422,
    Conflict: 409,
    StorageError: 503,
}


def status_for(exc: ActionError) -> int:
    for cls in type(exc).__mro__:
        if cls in ERROR_STATUS:
            return ERROR_STATUS[cls]
    return 400


def action_error_handler(request: Request, exc: ActionError) -> JSONResponse:
    payload = exc.to_dict()
    if isinstance(exc, StorageError):
        # Driver detail stays in the logs.
        payload["message"] = "Storage unavailable"
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthenticated) else None
    return JSONResponse(status_code=status_for(exc), content={"detail": payload}, headers=headers)


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="FitTrack API", version="1.0.0")

    limiter.enabled = limiter_enabled()
    limiter.reset()
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_exception_handler(ActionError, action_error_handler)

    app.include_router(router)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    # Added last so it wraps everything, CORS preflights included.
    app.add_middleware(RequestContextMiddleware, header_name=settings.request_id_header_name or "X-Request-ID")

    logger.info("app_created", extra={"app_env": settings.app_env, "rate_limit_enabled": limiter.enabled})
    return app
