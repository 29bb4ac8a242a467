from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from core.actions.base import ActionContext, action
from core.auth.session import Identity
from core.models import TrainerCV
from core.repositories.cvs import TrainerCVRepository
from core.validators import TrainerCVInput, parse_input

logger = logging.getLogger(__name__)


@action("upsert_cv")
def upsert_cv(ctx: ActionContext, identity: Identity, data: Mapping[str, Any]) -> TrainerCV:
    body = parse_input(TrainerCVInput, data)
    row = TrainerCVRepository(ctx.db).upsert(identity.id, body.model_dump())
    logger.info("trainer_cv_saved", extra={"trainer_id": identity.id, "cv_id": row.id})
    return row


@action("get_cv")
def get_cv(ctx: ActionContext, identity: Identity, trainer_id: int) -> Optional[TrainerCV]:
    return TrainerCVRepository(ctx.db).get_by_trainer(trainer_id)


@action("list_cvs")
def list_cvs(ctx: ActionContext, identity: Identity) -> list[TrainerCV]:
    return TrainerCVRepository(ctx.db).list_all()
