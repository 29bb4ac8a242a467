"""Structured JSON logging and per-request correlation ids.

Every log line carries the id of the HTTP request that produced it, so a
denied action or a storage failure can be traced back to the call that
triggered it.
"""

from __future__ import annotations

import json
import logging
import sys
import time
from contextvars import ContextVar, Token
from datetime import datetime, timezone
from typing import Any, Optional, TextIO
from uuid import uuid4

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)

_request_id: ContextVar[Optional[str]] = ContextVar("fittrack_request_id", default=None)
_configured = False

RESERVED_ATTRS = frozenset(logging.makeLogRecord({}).__dict__) | {"message", "asctime"}

# Third-party loggers that are noisy at INFO.
QUIET_LOGGERS = {
    "sqlalchemy.engine": logging.WARNING,
    "passlib": logging.ERROR,
}


def get_request_id() -> Optional[str]:
    return _request_id.get()


def set_request_id(value: Optional[str]) -> Token:
    return _request_id.set(value)


def reset_request_id(token: Token) -> None:
    _request_id.reset(token)


def new_request_id() -> str:
    return uuid4().hex


class JsonFormatter(logging.Formatter):
    """Render a record as a single JSON line; ``extra=`` fields land at the top level."""

    def format(self, record: logging.LogRecord) -> str:
        extras = {k: v for k, v in vars(record).items() if k not in RESERVED_ATTRS and not k.startswith("_")}
        entry: dict[str, Any] = {
            **extras,
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        request_id = get_request_id()
        if request_id:
            entry["request_id"] = request_id
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str, separators=(",", ":"))


def configure_logging(level: str = "INFO", stream: Optional[TextIO] = None) -> None:
    """Install the JSON handler on the root logger. Later calls are no-ops."""
    global _configured
    if _configured:
        return

    root = logging.getLogger()
    root.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    root.handlers.clear()
    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(JsonFormatter())
    root.addHandler(handler)

    # uvicorn installs its own handlers; route everything through ours.
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        uv = logging.getLogger(name)
        uv.handlers.clear()
        uv.propagate = True

    for name, quiet_level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)

    _configured = True


def access_log_fields(request: Request, status_code: int, started: float) -> dict[str, Any]:
    client = request.client
    return {
        "method": request.method,
        "path": request.url.path,
        "status_code": int(status_code),
        "duration_ms": round((time.perf_counter() - started) * 1000.0, 2),
        "client_ip": client.host if client else "",
    }


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Bind a request id for the duration of the call, echo it back and write one access log line."""

    def __init__(self, app, header_name: str = "X-Request-ID") -> None:
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = (request.headers.get(self.header_name) or "").strip() or new_request_id()
        token = set_request_id(request_id)
        started = time.perf_counter()
        try:
            try:
                response = await call_next(request)
            except Exception:
                logger.exception("http_request_error", extra=access_log_fields(request, 500, started))
                raise
            response.headers[self.header_name] = request_id
            logger.info("http_request", extra=access_log_fields(request, response.status_code, started))
            return response
        finally:
            reset_request_id(token)
