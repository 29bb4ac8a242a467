import logging
from typing import Annotated, Any, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Request, Response

from api.deps import action_scope, get_bearer_token
from api.ratelimit import auth_rate_limit, limiter
from api.schemas import (
    AssignmentOut,
    HealthResponse,
    IdentityOut,
    OwnedProgramOut,
    ProgramListingOut,
    ProgramOut,
    RegisterResponse,
    SuccessResponse,
    TokenResponse,
    TrainerCVOut,
    TrainerStatsOut,
    UserOut,
    UserStatsOut,
    WorkoutOut,
)
from core.actions import accounts, programs, stats, trainers, workouts
from core.config import get_settings
from core.db import session_scope

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1")

Token = Annotated[Optional[str], Depends(get_bearer_token)]
JsonBody = Annotated[dict[str, Any], Body()]


@router.get("/health", response_model=HealthResponse, tags=["ops"])
def health():
    return HealthResponse(status="ok", app_env=get_settings().app_env)


# -- auth --


@router.post("/auth/register", response_model=RegisterResponse, status_code=201, tags=["auth"])
@limiter.limit(auth_rate_limit)
def register(request: Request, response: Response, body: JsonBody):
    with session_scope() as s:
        user = accounts.register_user(s, body)
        return RegisterResponse(user=UserOut.model_validate(user))


@router.post("/auth/token", response_model=TokenResponse, tags=["auth"])
@limiter.limit(auth_rate_limit)
def login(request: Request, response: Response, body: JsonBody):
    with session_scope() as s:
        identity, token = accounts.authenticate(s, body)
    return TokenResponse(access_token=token, user_id=identity.id, email=identity.email, role=identity.role)


@router.get("/auth/me", response_model=IdentityOut, tags=["auth"])
def me(token: Token):
    with action_scope(token) as ctx:
        return IdentityOut.model_validate(accounts.whoami(ctx))


# -- workouts --


@router.get("/workouts", response_model=list[WorkoutOut], tags=["workouts"])
def list_workouts(token: Token):
    with action_scope(token) as ctx:
        return [WorkoutOut.model_validate(w) for w in workouts.list_workouts(ctx)]


@router.post("/workouts", response_model=WorkoutOut, status_code=201, tags=["workouts"])
def create_workout(token: Token, body: JsonBody):
    with action_scope(token) as ctx:
        return WorkoutOut.model_validate(workouts.create_workout(ctx, body))


@router.put("/workouts/{workout_id}", response_model=WorkoutOut, tags=["workouts"])
def update_workout(workout_id: int, token: Token, body: JsonBody):
    with action_scope(token) as ctx:
        return WorkoutOut.model_validate(workouts.update_workout(ctx, workout_id, body))


@router.delete("/workouts/{workout_id}", response_model=SuccessResponse, tags=["workouts"])
def delete_workout(workout_id: int, token: Token):
    with action_scope(token) as ctx:
        return SuccessResponse(**workouts.delete_workout(ctx, workout_id))


# -- programs --


@router.get("/programs", response_model=list[ProgramListingOut], tags=["programs"])
def list_programs(token: Token):
    with action_scope(token) as ctx:
        return [
            ProgramListingOut(
                **ProgramOut.model_validate(item.program).model_dump(),
                trainer_name=item.trainer_name,
                enrolled_user_ids=item.enrolled_user_ids,
            )
            for item in programs.list_programs(ctx)
        ]


@router.get("/programs/mine", response_model=list[OwnedProgramOut], tags=["programs"])
def list_my_programs(token: Token):
    with action_scope(token) as ctx:
        return [
            OwnedProgramOut(**ProgramOut.model_validate(item.program).model_dump(), enrollment_count=item.enrollment_count)
            for item in programs.list_my_programs(ctx)
        ]


@router.post("/programs", response_model=ProgramOut, status_code=201, tags=["programs"])
def create_program(token: Token, body: JsonBody):
    with action_scope(token) as ctx:
        return ProgramOut.model_validate(programs.create_program(ctx, body))


@router.put("/programs/{program_id}", response_model=ProgramOut, tags=["programs"])
def update_program(program_id: int, token: Token, body: JsonBody):
    with action_scope(token) as ctx:
        return ProgramOut.model_validate(programs.update_program(ctx, program_id, body))


@router.delete("/programs/{program_id}", response_model=SuccessResponse, tags=["programs"])
def delete_program(program_id: int, token: Token):
    with action_scope(token) as ctx:
        return SuccessResponse(**programs.delete_program(ctx, program_id))


@router.post("/programs/{program_id}/assign", response_model=AssignmentOut, status_code=201, tags=["programs"])
def assign_program(program_id: int, token: Token):
    with action_scope(token) as ctx:
        return AssignmentOut.model_validate(programs.assign_program(ctx, program_id))


# -- trainer CVs --


@router.get("/trainers/cv", response_model=list[TrainerCVOut], tags=["trainers"])
def list_cvs(token: Token):
    with action_scope(token) as ctx:
        return [TrainerCVOut.model_validate(cv) for cv in trainers.list_cvs(ctx)]


@router.put("/trainers/cv", response_model=TrainerCVOut, tags=["trainers"])
def upsert_cv(token: Token, body: JsonBody):
    with action_scope(token) as ctx:
        return TrainerCVOut.model_validate(trainers.upsert_cv(ctx, body))


@router.get("/trainers/{trainer_id}/cv", response_model=TrainerCVOut, tags=["trainers"])
def get_cv(trainer_id: int, token: Token):
    with action_scope(token) as ctx:
        cv = trainers.get_cv(ctx, trainer_id)
        if cv is None:
            raise HTTPException(status_code=404, detail={"code": "CV_NOT_FOUND", "message": "Trainer CV not found"})
        return TrainerCVOut.model_validate(cv)


# -- dashboards --


@router.get("/stats/user", response_model=UserStatsOut, tags=["stats"])
def user_stats(token: Token):
    with action_scope(token) as ctx:
        return UserStatsOut(**stats.get_user_stats(ctx))


@router.get("/stats/trainer", response_model=TrainerStatsOut, tags=["stats"])
def trainer_stats(token: Token):
    with action_scope(token) as ctx:
        return TrainerStatsOut(**stats.get_trainer_stats(ctx))
