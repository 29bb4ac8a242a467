from __future__ import annotations

import sys
from pathlib import Path
from typing import Iterator

import pytest
from sqlalchemy.orm import Session


def _reset_runtime_caches() -> None:
    import core.db as db_mod
    from core.config import get_settings

    get_settings.cache_clear()
    db_mod.dispose_engine()


def _purge_api_modules() -> None:
    for name in ["api.main", "api.routes", "api.ratelimit"]:
        sys.modules.pop(name, None)


@pytest.fixture
def app_env(tmp_path: Path, monkeypatch) -> Iterator[Path]:
    """Point the app at a fresh sqlite file and build the schema."""
    db_path = tmp_path / "fittrack_test.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite+pysqlite:///{db_path}")
    monkeypatch.setenv("APP_ENV", "test")
    monkeypatch.setenv("JWT_SECRET", "test-secret")
    monkeypatch.delenv("JWT_EXPIRE_MINUTES", raising=False)
    monkeypatch.delenv("RATE_LIMIT_ENABLED", raising=False)
    _reset_runtime_caches()

    from core.db import Base, get_engine

    Base.metadata.create_all(bind=get_engine())
    yield db_path
    _reset_runtime_caches()


@pytest.fixture
def db(app_env) -> Iterator[Session]:
    from core.db import get_session_factory

    s = get_session_factory()()
    try:
        yield s
    finally:
        s.rollback()
        s.close()


@pytest.fixture
def make_user(db):
    """Register a user through the registration action and return (user, session token)."""
    from core.actions.accounts import register_user
    from core.auth.session import Identity, issue_session_token

    counter = {"n": 0}

    def _make(role: str = "user", email: str | None = None, password: str = "secret1"):
        counter["n"] += 1
        address = email or f"{role}{counter['n']}@example.com"
        user = register_user(db, {"email": address, "password": password, "role": role})
        token = issue_session_token(Identity(id=user.id, email=user.email, role=user.role))
        return user, token

    return _make


@pytest.fixture
def ctx_for(db):
    from core.actions.base import ActionContext

    def _ctx(token: str | None) -> ActionContext:
        return ActionContext(db=db, token=token)

    return _ctx


@pytest.fixture
def client(app_env, monkeypatch):
    from fastapi.testclient import TestClient

    _purge_api_modules()
    from api.main import create_app

    with TestClient(create_app()) as c:
        yield c
