from __future__ import annotations

from datetime import datetime

import pytest
from sqlalchemy import func, select

from core.actions import trainers
from core.errors import Forbidden, InvalidInput, Unauthenticated
from core.models import TrainerCV


def _cv(**overrides):
    data = {"bio": "Coach", "experience": "10 years", "skills": "Strength, mobility"}
    data.update(overrides)
    return data


def test_upsert_creates_then_updates_in_place(make_user, ctx_for, db):
    trainer, token = make_user("trainer")
    ctx = ctx_for(token)

    first = trainers.upsert_cv(ctx, _cv())
    second = trainers.upsert_cv(ctx, _cv(experience="11 years", bio=""))

    assert second.id == first.id
    assert first.trainer_id == trainer.id
    assert second.experience == "11 years"
    assert second.bio is None
    assert db.execute(select(func.count(TrainerCV.id))).scalar_one() == 1


def test_upsert_is_idempotent(make_user, ctx_for, db):
    _, token = make_user("trainer")
    ctx = ctx_for(token)
    trainers.upsert_cv(ctx, _cv())
    trainers.upsert_cv(ctx, _cv())
    rows = db.execute(select(TrainerCV)).scalars().all()
    assert len(rows) == 1
    assert rows[0].skills == "Strength, mobility"


def test_upsert_requires_experience_and_skills(make_user, ctx_for):
    _, token = make_user("trainer")
    with pytest.raises(InvalidInput) as exc:
        trainers.upsert_cv(ctx_for(token), _cv(skills=" "))
    assert exc.value.field == "skills"


def test_users_cannot_write_cvs(make_user, ctx_for):
    _, token = make_user("user")
    with pytest.raises(Forbidden):
        trainers.upsert_cv(ctx_for(token), _cv())


def test_any_authenticated_caller_reads_cvs(make_user, ctx_for):
    trainer, t_token = make_user("trainer", email="ana@example.com")
    _, u_token = make_user("user")
    trainers.upsert_cv(ctx_for(t_token), _cv())

    cv = trainers.get_cv(ctx_for(u_token), trainer.id)
    assert cv is not None
    assert cv.trainer.email == "ana@example.com"
    assert cv.trainer.name == "ana"

    assert trainers.get_cv(ctx_for(u_token), 987654) is None
    assert [c.trainer_id for c in trainers.list_cvs(ctx_for(u_token))] == [trainer.id]


def test_reading_requires_session(ctx_for):
    with pytest.raises(Unauthenticated):
        trainers.list_cvs(ctx_for(None))


def test_list_orders_by_most_recent_update(make_user, ctx_for, db):
    t1, tok1 = make_user("trainer")
    t2, tok2 = make_user("trainer")
    trainers.upsert_cv(ctx_for(tok1), _cv())
    trainers.upsert_cv(ctx_for(tok2), _cv())

    db.execute(TrainerCV.__table__.update().where(TrainerCV.trainer_id == t1.id).values(updated_at=datetime(2030, 1, 1)))
    db.execute(TrainerCV.__table__.update().where(TrainerCV.trainer_id == t2.id).values(updated_at=datetime(2020, 1, 1)))
    db.expire_all()

    assert [c.trainer_id for c in trainers.list_cvs(ctx_for(tok1))] == [t1.id, t2.id]
