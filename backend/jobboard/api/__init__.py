"""API module initialization."""

from . import auth, jobs, users

__all__ = ["auth", "jobs", "users"]
