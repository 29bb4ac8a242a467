"""Apply migrations and load a small demo dataset.

Safe to run repeatedly: every row is looked up by a natural key first.

Run with:  python -m db.seed
"""
from __future__ import annotations

import logging

from alembic import command
from alembic.config import Config
from sqlalchemy import select

from core.auth.security import hash_password
from core.db import session_scope
from core.models import ROLE_TRAINER, ROLE_USER, TrainerCV, TrainerProgram, User

logger = logging.getLogger(__name__)

DEMO_TRAINER = {"email": "coach@demo.fit", "password": "CoachPass!234", "name": "Demo Coach"}
DEMO_USER = {"email": "runner@demo.fit", "password": "RunnerPass!234", "name": "Demo Runner"}

DEMO_PROGRAMS = [
    {"title": "5K Plan", "description": "Eight weeks from couch to a comfortable 5K.", "is_free": True},
    {"title": "Marathon Build", "description": "Sixteen-week periodised marathon block.", "is_free": False},
]


def run_migrations() -> None:
    cfg = Config("alembic.ini")
    command.upgrade(cfg, "head")


def _ensure_user(s, *, email: str, password: str, name: str, role: str) -> User:
    user = s.execute(select(User).where(User.email == email)).scalar_one_or_none()
    if user is None:
        user = User(email=email, password_hash=hash_password(password), role=role, name=name)
        s.add(user)
        s.flush()
    return user


def seed_demo() -> None:
    with session_scope() as s:
        trainer = _ensure_user(s, role=ROLE_TRAINER, **DEMO_TRAINER)
        _ensure_user(s, role=ROLE_USER, **DEMO_USER)

        for program in DEMO_PROGRAMS:
            exists = s.execute(
                select(TrainerProgram.id).where(TrainerProgram.trainer_id == trainer.id, TrainerProgram.title == program["title"])
            ).first()
            if not exists:
                s.add(TrainerProgram(trainer_id=trainer.id, **program))

        if s.execute(select(TrainerCV.id).where(TrainerCV.trainer_id == trainer.id)).first() is None:
            s.add(
                TrainerCV(
                    trainer_id=trainer.id,
                    bio="Endurance coach.",
                    experience="Ten years coaching club runners.",
                    skills="Periodisation, strength for runners",
                )
            )
    logger.info("demo_data_seeded", extra={"trainer_email": DEMO_TRAINER["email"], "user_email": DEMO_USER["email"]})


if __name__ == "__main__":
    from api.observability import configure_logging
    from core.config import get_settings

    configure_logging(get_settings().log_level)
    run_migrations()
    seed_demo()
