from __future__ import annotations

import pytest

from core.actions import programs, stats, workouts
from core.errors import Forbidden


def _log(ctx, kind: str, n: int = 1):
    for i in range(n):
        workouts.create_workout(ctx, {"date": f"2025-01-{i + 1:02d}T07:00:00", "type": kind, "duration": 20 + i})


def test_user_stats(make_user, ctx_for):
    _, trainer = make_user("trainer")
    _, user = make_user("user")
    ctx = ctx_for(user)
    _log(ctx, "Running", 3)
    _log(ctx, "Yoga", 2)
    _log(ctx, "Cycling", 1)
    _log(ctx, "Rowing", 1)
    p = programs.create_program(ctx_for(trainer), {"title": "Base", "description": "d", "is_free": True})
    programs.assign_program(ctx, p.id)

    result = stats.get_user_stats(ctx)
    assert result["total_workouts"] == 7
    assert result["total_programs"] == 1
    top = result["recent_workout_types"]
    assert len(top) == 3
    assert top[0] == {"type": "Running", "count": 3}
    assert top[1] == {"type": "Yoga", "count": 2}
    # Ties break on type name.
    assert top[2] == {"type": "Cycling", "count": 1}


def test_user_stats_empty(make_user, ctx_for):
    _, user = make_user("user")
    assert stats.get_user_stats(ctx_for(user)) == {"total_workouts": 0, "total_programs": 0, "recent_workout_types": []}


def test_trainer_stats_counts_assignment_rows(make_user, ctx_for):
    _, trainer = make_user("trainer")
    _, other_trainer = make_user("trainer")
    _, u1 = make_user("user")
    _, u2 = make_user("user")
    a = programs.create_program(ctx_for(trainer), {"title": "A", "description": "d", "is_free": True})
    b = programs.create_program(ctx_for(trainer), {"title": "B", "description": "d", "is_free": True})
    programs.create_program(ctx_for(trainer), {"title": "C", "description": "d", "is_free": False})
    foreign = programs.create_program(ctx_for(other_trainer), {"title": "X", "description": "d", "is_free": True})

    # u1 in two of this trainer's programs counts twice.
    programs.assign_program(ctx_for(u1), a.id)
    programs.assign_program(ctx_for(u1), b.id)
    programs.assign_program(ctx_for(u2), a.id)
    programs.assign_program(ctx_for(u2), foreign.id)

    assert stats.get_trainer_stats(ctx_for(trainer)) == {
        "total_programs": 3,
        "total_users": 3,
        "free_programs": 2,
        "paid_programs": 1,
    }


def test_stats_are_role_gated(make_user, ctx_for):
    _, trainer = make_user("trainer")
    _, user = make_user("user")
    with pytest.raises(Forbidden):
        stats.get_user_stats(ctx_for(trainer))
    with pytest.raises(Forbidden):
        stats.get_trainer_stats(ctx_for(user))
