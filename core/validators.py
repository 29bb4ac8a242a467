"""Pydantic validation models for all user-facing data entry points."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Literal, Mapping, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationError, field_validator

from core.errors import InvalidInput

M = TypeVar("M", bound=BaseModel)


def _required_text(v: Any) -> Any:
    if isinstance(v, str) and not v.strip():
        raise ValueError("is required")
    return v


def _optional_text(v: Any) -> Any:
    if isinstance(v, str) and not v.strip():
        return None
    return v


class WorkoutInput(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    date: datetime
    type: str = Field(max_length=80)
    duration: int = Field(gt=0)
    notes: Optional[str] = Field(default=None, max_length=2000)

    @field_validator("date", mode="before")
    @classmethod
    def date_present(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            raise ValueError("is required")
        return v

    @field_validator("date")
    @classmethod
    def date_as_naive_utc(cls, v: datetime) -> datetime:
        # Stored without an offset; aware inputs are converted to UTC first.
        if v.tzinfo is not None:
            return v.astimezone(timezone.utc).replace(tzinfo=None)
        return v

    @field_validator("type", mode="before")
    @classmethod
    def type_present(cls, v):
        return _required_text(v)

    @field_validator("duration", mode="before")
    @classmethod
    def duration_whole_minutes(cls, v):
        # bool is an int subclass; a checkbox value is never a duration.
        if isinstance(v, bool):
            raise ValueError("must be a positive number of minutes")
        if isinstance(v, float) and not v.is_integer():
            raise ValueError("must be a whole number of minutes")
        return v

    @field_validator("notes", mode="before")
    @classmethod
    def blank_notes_are_null(cls, v):
        return _optional_text(v)


class ProgramInput(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(max_length=200)
    description: str
    is_free: bool = False

    @field_validator("title", "description", mode="before")
    @classmethod
    def text_present(cls, v):
        return _required_text(v)


class TrainerCVInput(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    bio: Optional[str] = None
    experience: str
    skills: str

    @field_validator("experience", "skills", mode="before")
    @classmethod
    def text_present(cls, v):
        return _required_text(v)

    @field_validator("bio", mode="before")
    @classmethod
    def blank_bio_is_null(cls, v):
        return _optional_text(v)


class RegisterInput(BaseModel):
    email: EmailStr
    # Never stripped; whitespace is part of the secret.
    password: str = Field(min_length=1, max_length=72)
    role: Literal["user", "trainer"]
    name: Optional[str] = Field(default=None, max_length=120)

    @field_validator("email", "role", mode="before")
    @classmethod
    def text_present(cls, v):
        v = _required_text(v)
        return v.strip() if isinstance(v, str) else v

    @field_validator("name", mode="before")
    @classmethod
    def blank_name_is_null(cls, v):
        v = _optional_text(v)
        return v.strip() if isinstance(v, str) else v


class LoginInput(BaseModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


def parse_input(model: type[M], data: Mapping[str, Any] | BaseModel) -> M:
    """Validate ``data`` against ``model``; the first failing field becomes an InvalidInput."""
    if isinstance(data, model):
        return data
    if isinstance(data, BaseModel):
        data = data.model_dump()
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or None
        message = first.get("msg", "Invalid value")
        if first.get("type") == "missing":
            message = "is required"
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        raise InvalidInput(f"{field} {message}" if field else message, field=field) from exc
