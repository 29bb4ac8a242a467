from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import selectinload

from core.auth.guard import require_owned
from core.errors import Conflict, InvalidInput
from core.models import TrainerProgram, User, UserProgram
from core.repositories.base import Repository, storage_errors

PROGRAM_FIELDS = ("title", "description", "is_free")


@dataclass
class OwnedProgram:
    program: TrainerProgram
    enrollment_count: int


@dataclass
class ProgramListing:
    program: TrainerProgram
    trainer_name: Optional[str]
    enrolled_user_ids: list[int] = field(default_factory=list)


class TrainerProgramRepository(Repository):
    def create(self, owner_id: int, fields: dict[str, Any]) -> TrainerProgram:
        with storage_errors(self.s, "program.create"):
            row = TrainerProgram(trainer_id=owner_id, **{k: fields.get(k) for k in PROGRAM_FIELDS})
            self.s.add(row)
            self.s.flush()
            return row

    def get(self, program_id: int) -> Optional[TrainerProgram]:
        with storage_errors(self.s, "program.get"):
            return self.s.get(TrainerProgram, program_id)

    def list_by_owner(self, owner_id: int) -> list[OwnedProgram]:
        enrollments = (
            select(UserProgram.program_id, func.count(UserProgram.id).label("n"))
            .group_by(UserProgram.program_id)
            .subquery()
        )
        q = (
            select(TrainerProgram, func.coalesce(enrollments.c.n, 0))
            .outerjoin(enrollments, enrollments.c.program_id == TrainerProgram.id)
            .where(TrainerProgram.trainer_id == owner_id)
            .order_by(TrainerProgram.id.desc())
        )
        with storage_errors(self.s, "program.list_by_owner"):
            return [OwnedProgram(program=p, enrollment_count=int(n)) for p, n in self.s.execute(q).all()]

    def list_all(self) -> list[ProgramListing]:
        q = (
            select(TrainerProgram, User.name)
            .join(User, User.id == TrainerProgram.trainer_id)
            .options(selectinload(TrainerProgram.user_programs))
            .execution_options(populate_existing=True)
            .order_by(TrainerProgram.id.desc())
        )
        with storage_errors(self.s, "program.list_all"):
            return [
                ProgramListing(
                    program=p,
                    trainer_name=trainer_name,
                    enrolled_user_ids=[up.user_id for up in p.user_programs],
                )
                for p, trainer_name in self.s.execute(q).all()
            ]

    def update(self, program_id: int, owner_id: int, fields: dict[str, Any]) -> TrainerProgram:
        row = require_owned(self.get, program_id, owner_id, owner_of=lambda p: p.trainer_id, label="Program")
        with storage_errors(self.s, "program.update"):
            # Fields left out of the update keep their stored value.
            for key in PROGRAM_FIELDS:
                if key in fields:
                    setattr(row, key, fields[key])
            self.s.flush()
            return row

    def delete(self, program_id: int, owner_id: int) -> None:
        row = require_owned(self.get, program_id, owner_id, owner_of=lambda p: p.trainer_id, label="Program")
        with storage_errors(self.s, "program.delete"):
            self.s.delete(row)
            self.s.flush()


class UserProgramRepository(Repository):
    def exists_for(self, user_id: int, program_id: int) -> bool:
        q = select(UserProgram.id).where(UserProgram.user_id == user_id, UserProgram.program_id == program_id)
        with storage_errors(self.s, "assignment.exists_for"):
            return self.s.execute(q).first() is not None

    def create(self, user_id: int, program_id: int) -> UserProgram:
        """Self-assign a user to a free program.

        Each precondition fails with its own code: unknown program, paid
        program, and an existing assignment. The unique constraint on
        (user_id, program_id) catches a concurrent duplicate that slips past
        the existence check.
        """
        with storage_errors(self.s, "assignment.lookup"):
            program = self.s.get(TrainerProgram, program_id)
        if program is None:
            raise InvalidInput("Program not found", field="program_id", code="PROGRAM_NOT_FOUND")
        if not program.is_free:
            raise InvalidInput("Only free programs can be assigned", field="program_id", code="PROGRAM_NOT_FREE")
        if self.exists_for(user_id, program_id):
            raise Conflict("You are already assigned to this program", code="ALREADY_ASSIGNED")

        with storage_errors(
            self.s,
            "assignment.create",
            conflict_message="You are already assigned to this program",
            conflict_code="ALREADY_ASSIGNED",
        ):
            row = UserProgram(user_id=user_id, program_id=program_id, start_date=datetime.utcnow(), is_active=True)
            self.s.add(row)
            self.s.flush()
            return row
