from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.orm import joinedload

from core.models import TrainerCV
from core.repositories.base import Repository, storage_errors


class TrainerCVRepository(Repository):
    def get_by_trainer(self, trainer_id: int) -> Optional[TrainerCV]:
        q = select(TrainerCV).options(joinedload(TrainerCV.trainer)).where(TrainerCV.trainer_id == trainer_id)
        with storage_errors(self.s, "cv.get_by_trainer"):
            return self.s.execute(q).scalar_one_or_none()

    def upsert(self, trainer_id: int, fields: dict[str, Any]) -> TrainerCV:
        """Update the trainer's CV in place, or create it when absent.

        ``trainer_id`` is unique, so a concurrent first write loses with a Conflict
        instead of producing a second row.
        """
        existing = self.get_by_trainer(trainer_id)
        with storage_errors(self.s, "cv.upsert", conflict_message="CV already exists for this trainer"):
            if existing is not None:
                existing.bio = fields.get("bio")
                existing.experience = fields["experience"]
                existing.skills = fields["skills"]
                existing.updated_at = datetime.utcnow()
                self.s.flush()
                return existing

            row = TrainerCV(
                trainer_id=trainer_id,
                bio=fields.get("bio"),
                experience=fields["experience"],
                skills=fields["skills"],
            )
            self.s.add(row)
            self.s.flush()
            return row

    def list_all(self) -> list[TrainerCV]:
        q = select(TrainerCV).options(joinedload(TrainerCV.trainer)).order_by(TrainerCV.updated_at.desc(), TrainerCV.id.desc())
        with storage_errors(self.s, "cv.list_all"):
            return list(self.s.execute(q).scalars().all())
