from __future__ import annotations

import datetime as dt
from typing import Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

ROLE_USER = "user"
ROLE_TRAINER = "trainer"
ROLES = (ROLE_USER, ROLE_TRAINER)


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"
    id: Mapped[int] = mapped_column(primary_key=True)
    email: Mapped[str] = mapped_column(String(255), unique=True)
    password_hash: Mapped[str] = mapped_column(String(255))
    role: Mapped[str] = mapped_column(String(20), index=True)
    name: Mapped[str | None] = mapped_column(String(120))
    created_at: Mapped[dt.datetime] = mapped_column(DateTime, default=dt.datetime.utcnow)

    workouts: Mapped[list["Workout"]] = relationship(back_populates="user", cascade="all, delete-orphan")
    programs: Mapped[list["TrainerProgram"]] = relationship(back_populates="trainer", cascade="all, delete-orphan")
    cv: Mapped[Optional["TrainerCV"]] = relationship(back_populates="trainer", cascade="all, delete-orphan")

    __table_args__ = (CheckConstraint("role in ('user', 'trainer')", name="ck_users_role"),)


class Workout(Base):
    __tablename__ = "workouts"
    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    date: Mapped[dt.datetime] = mapped_column(DateTime, index=True)
    type: Mapped[str] = mapped_column(String(80))
    duration: Mapped[int] = mapped_column(Integer)
    notes: Mapped[str | None] = mapped_column(Text)

    user: Mapped[User] = relationship(back_populates="workouts")

    __table_args__ = (CheckConstraint("duration > 0", name="ck_workouts_duration_positive"),)


class TrainerProgram(Base):
    __tablename__ = "trainer_programs"
    id: Mapped[int] = mapped_column(primary_key=True)
    trainer_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    title: Mapped[str] = mapped_column(String(200))
    description: Mapped[str] = mapped_column(Text)
    is_free: Mapped[bool] = mapped_column(Boolean, default=False)

    trainer: Mapped[User] = relationship(back_populates="programs")
    user_programs: Mapped[list["UserProgram"]] = relationship(back_populates="program", cascade="all, delete-orphan")


class UserProgram(Base):
    __tablename__ = "user_programs"
    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    program_id: Mapped[int] = mapped_column(ForeignKey("trainer_programs.id", ondelete="CASCADE"), index=True)
    start_date: Mapped[dt.datetime] = mapped_column(DateTime, default=dt.datetime.utcnow)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    program: Mapped[TrainerProgram] = relationship(back_populates="user_programs")

    __table_args__ = (UniqueConstraint("user_id", "program_id", name="uq_user_programs_user_program"),)


class TrainerCV(Base):
    __tablename__ = "trainer_cvs"
    id: Mapped[int] = mapped_column(primary_key=True)
    trainer_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), unique=True)
    bio: Mapped[str | None] = mapped_column(Text)
    experience: Mapped[str] = mapped_column(Text)
    skills: Mapped[str] = mapped_column(Text)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime, default=dt.datetime.utcnow)
    updated_at: Mapped[dt.datetime] = mapped_column(DateTime, default=dt.datetime.utcnow, onupdate=dt.datetime.utcnow)

    trainer: Mapped[User] = relationship(back_populates="cv")
