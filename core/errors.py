"""Typed failures raised by the action layer.

Every failure carries a stable ``code`` for programmatic handling and a
human-readable ``message``. Interfaces map the class to a transport status.
"""

from __future__ import annotations

from typing import Any, Optional


class ActionError(Exception):
    code = "ACTION_FAILED"

    def __init__(self, message: str, *, code: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message}


class Unauthenticated(ActionError):
    code = "AUTH_REQUIRED"


class Forbidden(ActionError):
    code = "FORBIDDEN"


class InvalidInput(ActionError):
    code = "INVALID_INPUT"

    def __init__(self, message: str, *, field: Optional[str] = None, code: Optional[str] = None) -> None:
        super().__init__(message, code=code)
        self.field = field

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        if self.field:
            payload["field"] = self.field
        return payload


class Conflict(ActionError):
    code = "CONFLICT"


class StorageError(ActionError):
    code = "STORAGE_ERROR"
