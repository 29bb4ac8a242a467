from __future__ import annotations

import logging
from typing import Any, Mapping

from core.actions.base import ActionContext, action
from core.auth.session import Identity
from core.models import TrainerProgram, UserProgram
from core.repositories.programs import OwnedProgram, ProgramListing, TrainerProgramRepository, UserProgramRepository
from core.validators import ProgramInput, parse_input

logger = logging.getLogger(__name__)


@action("create_program")
def create_program(ctx: ActionContext, identity: Identity, data: Mapping[str, Any]) -> TrainerProgram:
    body = parse_input(ProgramInput, data)
    row = TrainerProgramRepository(ctx.db).create(identity.id, body.model_dump())
    logger.info("program_created", extra={"program_id": row.id, "trainer_id": identity.id, "is_free": row.is_free})
    return row


@action("list_my_programs")
def list_my_programs(ctx: ActionContext, identity: Identity) -> list[OwnedProgram]:
    return TrainerProgramRepository(ctx.db).list_by_owner(identity.id)


@action("list_programs")
def list_programs(ctx: ActionContext, identity: Identity) -> list[ProgramListing]:
    return TrainerProgramRepository(ctx.db).list_all()


@action("update_program")
def update_program(ctx: ActionContext, identity: Identity, program_id: int, data: Mapping[str, Any]) -> TrainerProgram:
    body = parse_input(ProgramInput, data)
    row = TrainerProgramRepository(ctx.db).update(program_id, identity.id, body.model_dump(exclude_unset=True))
    logger.info("program_updated", extra={"program_id": row.id, "trainer_id": identity.id})
    return row


@action("delete_program")
def delete_program(ctx: ActionContext, identity: Identity, program_id: int) -> dict[str, bool]:
    TrainerProgramRepository(ctx.db).delete(program_id, identity.id)
    logger.info("program_deleted", extra={"program_id": program_id, "trainer_id": identity.id})
    return {"success": True}


@action("assign_program")
def assign_program(ctx: ActionContext, identity: Identity, program_id: int) -> UserProgram:
    row = UserProgramRepository(ctx.db).create(identity.id, program_id)
    logger.info("program_assigned", extra={"program_id": program_id, "user_id": identity.id, "assignment_id": row.id})
    return row
