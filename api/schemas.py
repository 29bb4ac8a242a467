from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ErrorDetail(BaseModel):
    code: str
    message: str
    field: Optional[str] = None


class ErrorResponse(BaseModel):
    detail: ErrorDetail


class HealthResponse(BaseModel):
    status: str
    app_env: str


class SuccessResponse(BaseModel):
    success: bool = True


# -- auth --


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    role: str
    name: Optional[str] = None


class RegisterResponse(BaseModel):
    message: str = "User registered"
    user: UserOut


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: int
    email: str
    role: str


class IdentityOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    role: str


# -- workouts --


class WorkoutOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    date: datetime
    type: str
    duration: int
    notes: Optional[str] = None


# -- programs --


class ProgramOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    trainer_id: int
    title: str
    description: str
    is_free: bool


class OwnedProgramOut(ProgramOut):
    enrollment_count: int = 0


class ProgramListingOut(ProgramOut):
    trainer_name: Optional[str] = None
    enrolled_user_ids: list[int] = Field(default_factory=list)


class AssignmentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    program_id: int
    start_date: datetime
    is_active: bool


# -- trainer CVs --


class TrainerSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: Optional[str] = None
    email: str


class TrainerCVOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    trainer_id: int
    bio: Optional[str] = None
    experience: str
    skills: str
    updated_at: datetime
    trainer: Optional[TrainerSummary] = None


# -- dashboards --


class WorkoutTypeCount(BaseModel):
    type: str
    count: int


class UserStatsOut(BaseModel):
    total_workouts: int
    total_programs: int
    recent_workout_types: list[WorkoutTypeCount]


class TrainerStatsOut(BaseModel):
    total_programs: int
    total_users: int
    free_programs: int
    paid_programs: int
