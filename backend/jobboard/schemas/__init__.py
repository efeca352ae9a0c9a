"""Schemas module initialization."""

from .auth import (
    ForgotPasswordRequest,
    LoginRequest,
    PasswordUpdateRequest,
    RegisterRequest,
    ResetPasswordRequest,
)
from .job import JobCreate, JobResponse, JobStats, JobUpdate
from .user import ProfileResponse, UserResponse, UserUpdate

__all__ = [
    "ForgotPasswordRequest",
    "JobCreate",
    "JobResponse",
    "JobStats",
    "JobUpdate",
    "LoginRequest",
    "PasswordUpdateRequest",
    "ProfileResponse",
    "RegisterRequest",
    "ResetPasswordRequest",
    "UserResponse",
    "UserUpdate",
]
