"""Request-scoped context helpers."""

from dataclasses import dataclass

from jobboard.db import User
from jobboard.domain.exceptions import ForbiddenError


@dataclass(slots=True)
class RequestContext:
    """Wraps the authenticated user for service-layer ownership checks."""

    user: User

    @property
    def user_id(self) -> int:
        return self.user.id

    @property
    def is_admin(self) -> bool:
        return self.user.role == "admin"

    def assert_owner_or_admin(self, owner_id: int, action: str = "modify") -> None:
        """Only the resource owner or an administrator may mutate it."""
        if not self.is_admin and owner_id != self.user.id:
            raise ForbiddenError(f"User: {self.user.id} is not allowed to {action} this job")
