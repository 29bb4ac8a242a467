from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from core.errors import Conflict, StorageError

logger = logging.getLogger(__name__)


@contextmanager
def storage_errors(
    s: Session,
    operation: str,
    conflict_message: str = "Record already exists",
    conflict_code: Optional[str] = None,
) -> Iterator[None]:
    """Translate SQLAlchemy failures raised inside the block into action errors.

    The session is rolled back before the error propagates so it stays usable.
    """
    try:
        yield
    except IntegrityError as exc:
        s.rollback()
        logger.info("storage_conflict", extra={"operation": operation, "constraint_error": str(exc.orig)})
        raise Conflict(conflict_message, code=conflict_code) from exc
    except SQLAlchemyError as exc:
        s.rollback()
        logger.exception("storage_failure", extra={"operation": operation})
        raise StorageError(f"Storage failure during {operation}") from exc


class Repository:
    def __init__(self, s: Session) -> None:
        self.s = s
