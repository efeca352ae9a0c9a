"""Account self-service and user administration."""

from __future__ import annotations

from typing import Any, Optional, Sequence

from sqlalchemy.orm import Session

from jobboard.core.logging import get_logger
from jobboard.core.security import create_access_token, get_password_hash, verify_password
from jobboard.db import Job, User
from jobboard.domain.exceptions import DuplicateEmailError, NotFoundError, UnauthorizedError
from jobboard.repositories import ApiFilters, ApplicationRepository, JobRepository, UserRepository
from jobboard.schemas.user import UserResponse
from jobboard.services.storage import ResumeStorage

logger = get_logger(__name__)

HIDDEN_USER_FIELDS = ("hashed_password", "reset_password_token", "reset_password_expire")


class UserService:
    """Profile management for the caller plus admin-only user operations."""

    def __init__(self, session: Session) -> None:
        self.session = session
        self.users = UserRepository(session)
        self.jobs = JobRepository(session)
        self.applications = ApplicationRepository(session)

    def get_user(self, user_id: int) -> User:
        user = self.users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def update_profile(self, user: User, payload) -> User:
        data = payload.model_dump(exclude_unset=True, exclude_none=True)
        if "email" in data:
            data["email"] = data["email"].lower()
            if self.users.email_taken(data["email"], exclude_id=user.id):
                raise DuplicateEmailError("Duplicate field entered")

        for field, value in data.items():
            setattr(user, field, value)
        self.users.commit()
        self.users.refresh(user)
        return user

    def update_password(self, user: User, current_password: str, new_password: str) -> str:
        if not verify_password(current_password, user.hashed_password):
            logger.warning(
                "Password update rejected",
                extra={"event": "user.password.update.failure", "user_id": user.id},
            )
            raise UnauthorizedError("Old Password is incorrect")

        user.hashed_password = get_password_hash(new_password)
        self.users.commit()
        logger.info(
            "Password updated", extra={"event": "user.password.update", "user_id": user.id}
        )
        return create_access_token(user.id)

    def applied_jobs(self, user: User) -> Sequence[Job]:
        return self.jobs.list_applied_by(user.id)

    def published_jobs(self, user: User) -> Sequence[Job]:
        return self.jobs.list_published_by(user.id)

    # ------------------------------------------------------------------
    # Administration

    def list_users(self, query_params: Any) -> list[dict[str, Any]]:
        filters = (
            ApiFilters(
                self.users.query(),
                query_params,
                model=User,
                default_sort="-created_at",
                excluded_fields=(),
                hidden_fields=HIDDEN_USER_FIELDS,
            )
            .filter()
            .paginate()
            .sort()
            .limit_fields()
        )
        return [
            filters.projection.apply(UserResponse.model_validate(user).model_dump(mode="json"))
            for user in filters.all()
        ]

    def delete_user(
        self, user_id: int, storage: ResumeStorage, *, acting_user_id: Optional[int] = None
    ) -> None:
        self.delete_account(self.get_user(user_id), storage, acting_user_id=acting_user_id)

    def delete_account(
        self, user: User, storage: ResumeStorage, *, acting_user_id: Optional[int] = None
    ) -> None:
        """Delete ``user`` with their postings, applications and resume files.

        Rows go first; resume files are removed after the commit and a file
        that cannot be removed never fails the request.
        """
        resumes = [a.resume for a in self.applications.list_for_user(user.id)]
        resumes.extend(a.resume for a in self.applications.list_for_jobs_owned_by(user.id))

        user_id = user.id
        self.users.remove(user)
        self.users.commit()

        for resume in resumes:
            storage.delete(resume)

        logger.info(
            "Account deleted",
            extra={
                "event": "user.delete",
                "user_id": user_id,
                "acting_user_id": acting_user_id if acting_user_id is not None else user_id,
                "resumes_removed": len(resumes),
            },
        )
