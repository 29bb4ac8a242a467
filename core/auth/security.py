from __future__ import annotations

from functools import lru_cache

from passlib.context import CryptContext

from core.config import get_settings


@lru_cache(maxsize=4)
def _context(rounds: int) -> CryptContext:
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


def password_context() -> CryptContext:
    """The passlib context for the configured bcrypt cost."""
    return _context(get_settings().bcrypt_rounds)


def hash_password(password: str) -> str:
    if not password:
        raise ValueError("Password must not be empty")
    return password_context().hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    if not password or not password_hash:
        return False
    try:
        # Verification reads the cost from the hash itself.
        return password_context().verify(password, password_hash)
    except ValueError:
        # Unrecognised or corrupted hash.
        return False
