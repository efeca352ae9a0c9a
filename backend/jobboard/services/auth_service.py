"""Registration, login and password recovery."""

from __future__ import annotations

from datetime import timedelta

from sqlalchemy.orm import Session

from jobboard.core.config import settings
from jobboard.core.logging import get_logger
from jobboard.core.metrics import record_login_attempt, record_registration
from jobboard.core.security import (
    create_access_token,
    generate_reset_token,
    get_password_hash,
    hash_reset_token,
    verify_password,
)
from jobboard.core.time import utcnow
from jobboard.db import User
from jobboard.domain.exceptions import (
    DuplicateEmailError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from jobboard.repositories.user_repository import UserRepository
from jobboard.services.mailer import Mailer

logger = get_logger(__name__)


class AuthService:
    """Issues session tokens and manages password reset tokens."""

    def __init__(self, session: Session) -> None:
        self.session = session
        self.users = UserRepository(session)

    def register(self, payload) -> tuple[User, str]:
        if self.users.email_taken(payload.email):
            raise DuplicateEmailError("Duplicate field entered")

        user = User(
            name=payload.name,
            email=payload.email.lower(),
            role=payload.role,
            hashed_password=get_password_hash(payload.password),
        )
        self.users.add(user)
        self.users.commit()
        self.users.refresh(user)

        record_registration(user.role)
        logger.info(
            "User registered",
            extra={"event": "auth.register", "user_id": user.id, "role": user.role},
        )
        return user, create_access_token(user.id)

    def login(self, email: str, password: str) -> tuple[User, str]:
        if not email or not password:
            raise ValidationError("Please enter email and password")

        user = self.users.get_by_email(email)
        if not user or not verify_password(password, user.hashed_password):
            record_login_attempt(success=False)
            logger.warning(
                "Login failed: invalid credentials",
                extra={"event": "auth.login.failure", "email": email.lower()},
            )
            raise UnauthorizedError("Invalid Credentials")

        record_login_attempt(success=True)
        logger.info("Login successful", extra={"event": "auth.login.success", "user_id": user.id})
        return user, create_access_token(user.id)

    async def forgot_password(self, email: str, mailer: Mailer) -> User:
        """Store a hashed reset token and mail the plain token as a link."""
        user = self.users.get_by_email(email)
        if not user:
            raise NotFoundError("User not found")

        token, token_hash = generate_reset_token()
        user.reset_password_token = token_hash
        user.reset_password_expire = utcnow() + timedelta(
            minutes=settings.reset_token_expire_minutes
        )
        self.users.commit()

        reset_url = (
            f"{settings.public_base_url.rstrip('/')}{settings.api_prefix}/password/reset/{token}"
        )
        message = (
            f"Your password link is as follows:\n{reset_url}\n\n"
            "If you have not requested this then please ignore."
        )
        try:
            await mailer.send(
                to=user.email,
                subject=f"{settings.smtp_from_name} Reset Password Recovery",
                text=message,
            )
        except Exception:
            user.reset_password_token = None
            user.reset_password_expire = None
            self.users.commit()
            raise

        logger.info(
            "Password reset requested",
            extra={"event": "auth.password.forgot", "user_id": user.id},
        )
        return user

    def reset_password(self, token: str, new_password: str) -> tuple[User, str]:
        user = self.users.get_by_reset_token(hash_reset_token(token), utcnow())
        if not user:
            raise ValidationError("Reset password token is invalid")

        user.hashed_password = get_password_hash(new_password)
        user.reset_password_token = None
        user.reset_password_expire = None
        self.users.commit()
        self.users.refresh(user)

        logger.info(
            "Password reset completed",
            extra={"event": "auth.password.reset", "user_id": user.id},
        )
        return user, create_access_token(user.id)
