"""Registration and login. These are the only actions that run without a session."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from sqlalchemy.orm import Session

from core.actions.base import ActionContext, action
from core.auth.security import hash_password, verify_password
from core.auth.session import Identity, issue_session_token
from core.errors import Conflict, Unauthenticated
from core.models import User
from core.repositories.users import UserRepository
from core.validators import LoginInput, RegisterInput, parse_input

logger = logging.getLogger(__name__)


def register_user(s: Session, data: Mapping[str, Any]) -> User:
    """Create an account. No session is issued; the caller logs in separately."""
    body = parse_input(RegisterInput, data)
    email = str(body.email).lower()
    repo = UserRepository(s)
    if repo.get_by_email(email) is not None:
        raise Conflict("Email already registered", code="EMAIL_TAKEN")
    user = repo.create(
        email=email,
        password_hash=hash_password(body.password),
        role=body.role,
        name=body.name or email.split("@")[0],
    )
    logger.info("user_registered", extra={"user_id": user.id, "role": user.role})
    return user


def authenticate(s: Session, data: Mapping[str, Any]) -> tuple[Identity, str]:
    body = parse_input(LoginInput, data)
    user = UserRepository(s).get_by_email(body.email)
    # Unknown email and wrong password are reported identically.
    if user is None or not verify_password(body.password, user.password_hash):
        logger.info("login_failed")
        raise Unauthenticated("Invalid credentials", code="INVALID_CREDENTIALS")
    identity = Identity(id=user.id, email=user.email, role=user.role)
    logger.info("login_succeeded", extra={"user_id": user.id, "role": user.role})
    return identity, issue_session_token(identity)


@action("whoami")
def whoami(ctx: ActionContext, identity: Identity) -> Identity:
    """The caller as currently stored; a token for a deleted account no longer resolves."""
    user = UserRepository(ctx.db).get(identity.id)
    if user is None:
        raise Unauthenticated("Unauthorized")
    return Identity(id=user.id, email=user.email, role=user.role)
