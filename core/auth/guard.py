"""Authorization guard shared by every action.

Role checks are exact: there is no hierarchy between ``user`` and
``trainer``. Ownership failures are reported exactly like a missing row so a
caller cannot probe for the existence of someone else's data.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, TypeVar

from core.auth.session import Identity
from core.errors import ActionError, Forbidden, Unauthenticated

logger = logging.getLogger(__name__)

T = TypeVar("T")

NOT_FOUND_OR_UNAUTHORIZED = "not found or unauthorized"


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: str = ""
    error: Optional[type[ActionError]] = None

    @classmethod
    def permit(cls) -> "Decision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: str, error: type[ActionError] = Forbidden) -> "Decision":
        return cls(allowed=False, reason=reason, error=error)


def authorize(
    identity: Optional[Identity],
    required_role: Optional[str] = None,
    ownership_check: Optional[Callable[[int], bool]] = None,
) -> Decision:
    if identity is None:
        return Decision.deny("Unauthorized", Unauthenticated)
    if required_role is not None and identity.role != required_role:
        return Decision.deny(f"Only {required_role}s can perform this action")
    if ownership_check is not None and not ownership_check(identity.id):
        return Decision.deny(NOT_FOUND_OR_UNAUTHORIZED)
    return Decision.permit()


def enforce(decision: Decision) -> None:
    if decision.allowed:
        return
    error = decision.error or Forbidden
    raise error(decision.reason)


def require_owned(
    fetch: Callable[[int], Optional[T]],
    entity_id: int,
    caller_id: int,
    *,
    owner_of: Callable[[T], int],
    label: str,
) -> T:
    """Fetch an entity and return it only when ``caller_id`` owns it.

    A missing row and a row owned by someone else raise the same
    ``Forbidden`` with the same message.
    """
    entity = fetch(entity_id)
    if entity is None or owner_of(entity) != caller_id:
        logger.info(
            "ownership_denied",
            extra={"entity": label, "entity_id": entity_id, "caller_id": caller_id},
        )
        raise Forbidden(f"{label} {NOT_FOUND_OR_UNAUTHORIZED}")
    return entity
