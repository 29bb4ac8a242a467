"""Session tokens: issue on login, resolve on every action.

A session is a signed HS256 JWT carrying the user id, email and role. Any
token that cannot be decoded, fails signature verification or has expired
resolves to ``None`` so callers see a single "unauthenticated" signal.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from jose import JWTError, jwt

from core.config import get_settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    id: int
    email: str
    role: str


def issue_session_token(identity: Identity, expires_minutes: Optional[int] = None) -> str:
    settings = get_settings()
    minutes = settings.jwt_expire_minutes if expires_minutes is None else expires_minutes
    payload: dict[str, Any] = {
        "sub": str(identity.id),
        "email": identity.email,
        "role": identity.role,
        "exp": datetime.now(timezone.utc) + timedelta(minutes=minutes),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def resolve_identity(token: Optional[str]) -> Optional[Identity]:
    if not token:
        return None
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as exc:
        logger.info("session_token_rejected", extra={"reason": str(exc)})
        return None

    try:
        return Identity(id=int(payload["sub"]), email=str(payload["email"]), role=str(payload["role"]))
    except (KeyError, TypeError, ValueError):
        logger.info("session_token_rejected", extra={"reason": "malformed claims"})
        return None
