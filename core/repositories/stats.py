"""Aggregate queries behind the user and trainer dashboards."""

from __future__ import annotations

from sqlalchemy import func, select

from core.models import TrainerProgram, UserProgram, Workout
from core.repositories.base import Repository, storage_errors


class UserStatsRepository(Repository):
    def count_workouts(self, user_id: int) -> int:
        q = select(func.count(Workout.id)).where(Workout.user_id == user_id)
        with storage_errors(self.s, "stats.count_workouts"):
            return int(self.s.execute(q).scalar_one())

    def count_active_programs(self, user_id: int) -> int:
        q = select(func.count(UserProgram.id)).where(UserProgram.user_id == user_id, UserProgram.is_active.is_(True))
        with storage_errors(self.s, "stats.count_active_programs"):
            return int(self.s.execute(q).scalar_one())

    def top_workout_types(self, user_id: int, limit: int = 3) -> list[tuple[str, int]]:
        n = func.count(Workout.id).label("n")
        q = (
            select(Workout.type, n)
            .where(Workout.user_id == user_id)
            .group_by(Workout.type)
            .order_by(n.desc(), Workout.type.asc())
            .limit(limit)
        )
        with storage_errors(self.s, "stats.top_workout_types"):
            return [(t, int(c)) for t, c in self.s.execute(q).all()]


class TrainerStatsRepository(Repository):
    def count_programs(self, trainer_id: int) -> int:
        q = select(func.count(TrainerProgram.id)).where(TrainerProgram.trainer_id == trainer_id)
        with storage_errors(self.s, "stats.count_programs"):
            return int(self.s.execute(q).scalar_one())

    def count_enrolled_users(self, trainer_id: int) -> int:
        # Counts assignment rows, so a user enrolled in two programs counts twice.
        q = (
            select(func.count(UserProgram.id))
            .join(TrainerProgram, TrainerProgram.id == UserProgram.program_id)
            .where(TrainerProgram.trainer_id == trainer_id)
        )
        with storage_errors(self.s, "stats.count_enrolled_users"):
            return int(self.s.execute(q).scalar_one())

    def count_by_free_flag(self, trainer_id: int) -> dict[bool, int]:
        q = (
            select(TrainerProgram.is_free, func.count(TrainerProgram.id))
            .where(TrainerProgram.trainer_id == trainer_id)
            .group_by(TrainerProgram.is_free)
        )
        with storage_errors(self.s, "stats.count_by_free_flag"):
            counts = {True: 0, False: 0}
            for is_free, c in self.s.execute(q).all():
                counts[bool(is_free)] = int(c)
            return counts
