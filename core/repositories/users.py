from __future__ import annotations

from typing import Optional

from sqlalchemy import func, select

from core.models import User
from core.repositories.base import Repository, storage_errors


class UserRepository(Repository):
    def create(self, *, email: str, password_hash: str, role: str, name: Optional[str]) -> User:
        with storage_errors(self.s, "user.create", conflict_message="Email already registered", conflict_code="EMAIL_TAKEN"):
            row = User(email=email, password_hash=password_hash, role=role, name=name)
            self.s.add(row)
            self.s.flush()
            return row

    def get(self, user_id: int) -> Optional[User]:
        with storage_errors(self.s, "user.get"):
            return self.s.get(User, user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        q = select(User).where(func.lower(User.email) == email.strip().lower())
        with storage_errors(self.s, "user.get_by_email"):
            return self.s.execute(q).scalar_one_or_none()
