"""Domain layer primitives (contexts, value objects, exceptions)."""

from . import exceptions, geo, jobs
from .context import RequestContext

__all__ = ["RequestContext", "exceptions", "geo", "jobs"]
