"""User persistence helpers."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from jobboard.db import User
from jobboard.repositories.base import SQLAlchemyRepository


class UserRepository(SQLAlchemyRepository[User]):
    """Encapsulates user-related queries."""

    model = User

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.get(user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        return self.first_where(User.email == email.lower())

    def email_taken(self, email: str, *, exclude_id: Optional[int] = None) -> bool:
        query = self.session.query(User.id).filter(User.email == email.lower())
        if exclude_id is not None:
            query = query.filter(User.id != exclude_id)
        return query.first() is not None

    def get_by_reset_token(self, token_hash: str, now: datetime) -> Optional[User]:
        """Holder of an unexpired reset token, matched by its SHA-256 digest."""
        return self.first_where(
            User.reset_password_token == token_hash, User.reset_password_expire > now
        )
