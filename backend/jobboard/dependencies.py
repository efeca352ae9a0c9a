"""Shared FastAPI dependency factories."""

from fastapi import Depends
from sqlalchemy.orm import Session

from jobboard.core.auth import require_admin
from jobboard.core.config import settings
from jobboard.db import User, get_db
from jobboard.services import (
    AuthService,
    Geocoder,
    JobService,
    Mailer,
    ResumeStorage,
    SmtpConfig,
    UserService,
)


def get_session(db: Session = Depends(get_db)) -> Session:
    """Expose the SQLAlchemy session (alias for clarity)."""
    return db


def get_admin_user(user: User = Depends(require_admin)) -> User:
    return user


def get_auth_service(session: Session = Depends(get_session)) -> AuthService:
    return AuthService(session)


def get_user_service(session: Session = Depends(get_session)) -> UserService:
    return UserService(session)


def get_job_service(session: Session = Depends(get_session)) -> JobService:
    return JobService(session)


def get_geocoder() -> Geocoder:
    return Geocoder(
        settings.geocoder_url,
        settings.geocoder_api_key,
        timeout=settings.geocoder_timeout,
    )


def get_mailer() -> Mailer:
    return Mailer(
        SmtpConfig(
            hostname=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.smtp_user,
            password=settings.smtp_password,
            start_tls=settings.smtp_start_tls,
            timeout=settings.smtp_timeout,
            from_name=settings.smtp_from_name,
            from_email=settings.smtp_from_email,
        )
    )


def get_resume_storage() -> ResumeStorage:
    return ResumeStorage(settings.file_upload_path)
