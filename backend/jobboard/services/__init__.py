"""Service layer entry points."""

from .auth_service import AuthService
from .geocoder import GeocodedLocation, Geocoder
from .job_service import JobService, job_document
from .mailer import Mailer, SmtpConfig
from .storage import ResumeStorage
from .user_service import UserService

__all__ = [
    "AuthService",
    "GeocodedLocation",
    "Geocoder",
    "JobService",
    "Mailer",
    "ResumeStorage",
    "SmtpConfig",
    "UserService",
    "job_document",
]
