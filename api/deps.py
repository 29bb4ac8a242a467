from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from core.actions.base import ActionContext
from core.db import session_scope

bearer_scheme = HTTPBearer(auto_error=False)


def get_bearer_token(credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)) -> Optional[str]:
    # A missing token is not rejected here; each action resolves the session itself.
    if credentials is None or not credentials.credentials:
        return None
    return credentials.credentials


@contextmanager
def action_scope(token: Optional[str]) -> Iterator[ActionContext]:
    """Open one transaction for the duration of a single action call."""
    with session_scope() as s:
        yield ActionContext(db=s, token=token)
