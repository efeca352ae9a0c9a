"""Repository layer for persistence access."""

from .api_filters import ApiFilters, Projection, parse_filter_request
from .job_repository import ApplicationRepository, JobRepository
from .user_repository import UserRepository

__all__ = [
    "ApiFilters",
    "ApplicationRepository",
    "JobRepository",
    "Projection",
    "UserRepository",
    "parse_filter_request",
]
