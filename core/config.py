"""Runtime settings for FitTrack.

``APP_ENV`` picks a profile (dev, staging, production, test) that supplies
defaults; any individual value can still be set through its own environment
variable. ``get_settings()`` is cached; tests call ``get_settings.cache_clear()``
after changing the environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any

DEFAULT_DATABASE_URL = "sqlite+pysqlite:///./fittrack.db"


@dataclass(frozen=True)
class Settings:
    database_url: str
    app_env: str = "dev"

    # Session tokens
    jwt_secret: str = "jwt-change-me"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 480

    # bcrypt work factor for new password hashes
    bcrypt_rounds: int = 12

    log_level: str = "INFO"
    cors_origins: list[str] = field(default_factory=lambda: ["http://localhost:3000"])
    request_id_header_name: str = "X-Request-ID"

    # Throttling applies to the credential endpoints only.
    rate_limit_enabled: bool = True
    rate_limit_storage_uri: str = "memory://"
    auth_rate_limit: str = "10/minute"

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def is_dev(self) -> bool:
        return self.app_env == "dev"


_ENV_PROFILES: dict[str, dict[str, Any]] = {
    "dev": {"log_level": "DEBUG", "jwt_expire_minutes": 1440},
    "staging": {"log_level": "INFO", "jwt_expire_minutes": 480},
    "production": {"log_level": "WARNING", "jwt_expire_minutes": 240, "auth_rate_limit": "5/minute"},
    # Minimum bcrypt cost keeps the suite fast.
    "test": {"log_level": "WARNING", "jwt_expire_minutes": 30, "bcrypt_rounds": 4, "rate_limit_enabled": False},
}


def get_database_url() -> str:
    return os.getenv("DATABASE_URL") or DEFAULT_DATABASE_URL


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    return int(raw) if raw else default


def _env_list(name: str, default: list[str]) -> list[str]:
    raw = os.getenv(name)
    if not raw:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    app_env = os.getenv("APP_ENV", "dev")
    profile = _ENV_PROFILES.get(app_env, _ENV_PROFILES["dev"])

    def pick(key: str, default: Any) -> Any:
        return profile.get(key, default)

    return Settings(
        database_url=get_database_url(),
        app_env=app_env,
        # Falls back to SECRET_KEY so a single secret is enough in small deployments.
        jwt_secret=os.getenv("JWT_SECRET") or os.getenv("SECRET_KEY") or "jwt-change-me",
        jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
        jwt_expire_minutes=_env_int("JWT_EXPIRE_MINUTES", pick("jwt_expire_minutes", 480)),
        bcrypt_rounds=_env_int("BCRYPT_ROUNDS", pick("bcrypt_rounds", 12)),
        log_level=os.getenv("LOG_LEVEL", pick("log_level", "INFO")),
        cors_origins=_env_list("CORS_ORIGINS", ["http://localhost:3000"]),
        request_id_header_name=os.getenv("REQUEST_ID_HEADER_NAME", "X-Request-ID"),
        rate_limit_enabled=_env_bool("RATE_LIMIT_ENABLED", pick("rate_limit_enabled", True)),
        rate_limit_storage_uri=os.getenv("RATE_LIMIT_STORAGE_URI", "memory://"),
        auth_rate_limit=os.getenv("AUTH_RATE_LIMIT", pick("auth_rate_limit", "10/minute")),
    )
