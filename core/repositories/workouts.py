from __future__ import annotations

from typing import Any, Optional

from sqlalchemy import select

from core.auth.guard import require_owned
from core.models import Workout
from core.repositories.base import Repository, storage_errors

WORKOUT_FIELDS = ("date", "type", "duration", "notes")


class WorkoutRepository(Repository):
    def create(self, owner_id: int, fields: dict[str, Any]) -> Workout:
        with storage_errors(self.s, "workout.create"):
            row = Workout(user_id=owner_id, **{k: fields.get(k) for k in WORKOUT_FIELDS})
            self.s.add(row)
            self.s.flush()
            return row

    def get(self, workout_id: int) -> Optional[Workout]:
        with storage_errors(self.s, "workout.get"):
            return self.s.get(Workout, workout_id)

    def list(self, owner_id: int) -> list[Workout]:
        with storage_errors(self.s, "workout.list"):
            q = select(Workout).where(Workout.user_id == owner_id).order_by(Workout.date.desc(), Workout.id.desc())
            return list(self.s.execute(q).scalars().all())

    def update(self, workout_id: int, owner_id: int, fields: dict[str, Any]) -> Workout:
        row = require_owned(self.get, workout_id, owner_id, owner_of=lambda w: w.user_id, label="Workout")
        with storage_errors(self.s, "workout.update"):
            for key in WORKOUT_FIELDS:
                setattr(row, key, fields.get(key))
            self.s.flush()
            return row

    def delete(self, workout_id: int, owner_id: int) -> None:
        row = require_owned(self.get, workout_id, owner_id, owner_of=lambda w: w.user_id, label="Workout")
        with storage_errors(self.s, "workout.delete"):
            self.s.delete(row)
            self.s.flush()
