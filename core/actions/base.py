"""Plumbing shared by every action.

An action is a plain function ``fn(ctx, identity, *args)`` wrapped by
``@action(name)``. The wrapper resolves the session from ``ctx``, looks up
the required role in ``ACTION_ROLES`` and enforces it before the body runs,
so the same actions can sit behind HTTP, a CLI or a job runner.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import wraps
from typing import Callable, Optional, TypeVar

from sqlalchemy.orm import Session

from core.auth.guard import authorize, enforce
from core.auth.session import Identity, resolve_identity
from core.errors import ActionError, Forbidden, Unauthenticated
from core.models import ROLE_TRAINER, ROLE_USER

logger = logging.getLogger(__name__)

R = TypeVar("R")

ANY_AUTHENTICATED = None

ACTION_ROLES: dict[str, Optional[str]] = {
    "whoami": ANY_AUTHENTICATED,
    # workouts
    "list_workouts": ROLE_USER,
    "create_workout": ROLE_USER,
    "update_workout": ROLE_USER,
    "delete_workout": ROLE_USER,
    # programs
    "list_programs": ANY_AUTHENTICATED,
    "list_my_programs": ROLE_TRAINER,
    "create_program": ROLE_TRAINER,
    "update_program": ROLE_TRAINER,
    "delete_program": ROLE_TRAINER,
    "assign_program": ROLE_USER,
    # trainer CVs
    "upsert_cv": ROLE_TRAINER,
    "get_cv": ANY_AUTHENTICATED,
    "list_cvs": ANY_AUTHENTICATED,
    # dashboards
    "get_user_stats": ROLE_USER,
    "get_trainer_stats": ROLE_TRAINER,
}


@dataclass(frozen=True)
class ActionContext:
    """Ambient request state: an open database session and the caller's bearer token."""

    db: Session
    token: Optional[str] = None


def resolve_session(ctx: ActionContext) -> Identity:
    identity = resolve_identity(ctx.token)
    if identity is None:
        raise Unauthenticated("Unauthorized")
    return identity


def action(name: str) -> Callable[[Callable[..., R]], Callable[..., R]]:
    if name not in ACTION_ROLES:
        raise KeyError(f"action {name!r} has no entry in ACTION_ROLES")
    required_role = ACTION_ROLES[name]

    def decorator(fn: Callable[..., R]) -> Callable[..., R]:
        @wraps(fn)
        def wrapper(ctx: ActionContext, *args, **kwargs) -> R:
            try:
                identity = resolve_session(ctx)
                enforce(authorize(identity, required_role))
                return fn(ctx, identity, *args, **kwargs)
            except (Unauthenticated, Forbidden) as exc:
                logger.info("action_denied", extra={"action": name, "code": exc.code, "error_message": exc.message})
                raise
            except ActionError as exc:
                logger.info("action_failed", extra={"action": name, "code": exc.code, "error_message": exc.message})
                raise

        wrapper.action_name = name  # type: ignore[attr-defined]
        wrapper.required_role = required_role  # type: ignore[attr-defined]
        return wrapper

    return decorator
