"""Database module initialization."""

from .models import Application, Base, Job, JobIndustry, User
from .session import Database, get_database, get_db
from .utils import create_tables, seed_default_data

__all__ = [
    "Application",
    "Base",
    "Job",
    "JobIndustry",
    "User",
    "Database",
    "get_database",
    "get_db",
    "create_tables",
    "seed_default_data",
]
