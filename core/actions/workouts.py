from __future__ import annotations

import logging
from typing import Any, Mapping

from core.actions.base import ActionContext, action
from core.auth.session import Identity
from core.models import Workout
from core.repositories.workouts import WorkoutRepository
from core.validators import WorkoutInput, parse_input

logger = logging.getLogger(__name__)


@action("list_workouts")
def list_workouts(ctx: ActionContext, identity: Identity) -> list[Workout]:
    return WorkoutRepository(ctx.db).list(identity.id)


@action("create_workout")
def create_workout(ctx: ActionContext, identity: Identity, data: Mapping[str, Any]) -> Workout:
    body = parse_input(WorkoutInput, data)
    row = WorkoutRepository(ctx.db).create(identity.id, body.model_dump())
    logger.info("workout_created", extra={"workout_id": row.id, "user_id": identity.id, "workout_type": row.type})
    return row


@action("update_workout")
def update_workout(ctx: ActionContext, identity: Identity, workout_id: int, data: Mapping[str, Any]) -> Workout:
    body = parse_input(WorkoutInput, data)
    row = WorkoutRepository(ctx.db).update(workout_id, identity.id, body.model_dump())
    logger.info("workout_updated", extra={"workout_id": row.id, "user_id": identity.id})
    return row


@action("delete_workout")
def delete_workout(ctx: ActionContext, identity: Identity, workout_id: int) -> dict[str, bool]:
    WorkoutRepository(ctx.db).delete(workout_id, identity.id)
    logger.info("workout_deleted", extra={"workout_id": workout_id, "user_id": identity.id})
    return {"success": True}
