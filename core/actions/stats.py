from __future__ import annotations

from typing import Any

from core.actions.base import ActionContext, action
from core.auth.session import Identity
from core.repositories.stats import TrainerStatsRepository, UserStatsRepository

TOP_WORKOUT_TYPES = 3


@action("get_user_stats")
def get_user_stats(ctx: ActionContext, identity: Identity) -> dict[str, Any]:
    repo = UserStatsRepository(ctx.db)
    return {
        "total_workouts": repo.count_workouts(identity.id),
        "total_programs": repo.count_active_programs(identity.id),
        "recent_workout_types": [
            {"type": t, "count": c} for t, c in repo.top_workout_types(identity.id, limit=TOP_WORKOUT_TYPES)
        ],
    }


@action("get_trainer_stats")
def get_trainer_stats(ctx: ActionContext, identity: Identity) -> dict[str, int]:
    repo = TrainerStatsRepository(ctx.db)
    distribution = repo.count_by_free_flag(identity.id)
    return {
        "total_programs": repo.count_programs(identity.id),
        "total_users": repo.count_enrolled_users(identity.id),
        "free_programs": distribution[True],
        "paid_programs": distribution[False],
    }
