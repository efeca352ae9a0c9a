"""Prometheus metrics for the Job Board API.

Metrics are exposed at the /metrics endpoint.

Metrics Categories:
- HTTP request metrics (latency, count, in-flight)
- Authentication metrics (login attempts, registrations)
- Job board activity (postings, applications)
"""

from typing import Iterable

from prometheus_client import Counter, Gauge, Histogram, Info
from starlette.routing import BaseRoute, Match
from starlette.types import Scope

UNMATCHED_ENDPOINT = "<unmatched>"

APP_INFO = Info("jobboard_app", "Job board application information")

HTTP_REQUESTS_TOTAL = Counter(
    "jobboard_http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

HTTP_REQUEST_DURATION_SECONDS = Histogram(
    "jobboard_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

HTTP_REQUESTS_IN_PROGRESS = Gauge(
    "jobboard_http_requests_in_progress",
    "Number of HTTP requests currently in progress",
    ["method", "endpoint"],
)

AUTH_LOGIN_ATTEMPTS_TOTAL = Counter(
    "jobboard_auth_login_attempts_total",
    "Total login attempts",
    ["status"],  # success, failure
)

USER_REGISTRATIONS_TOTAL = Counter(
    "jobboard_user_registrations_total",
    "Total self-service registrations",
    ["role"],
)

JOBS_POSTED_TOTAL = Counter(
    "jobboard_jobs_posted_total",
    "Total job postings created",
    ["job_type"],
)

APPLICATIONS_TOTAL = Counter(
    "jobboard_applications_total",
    "Total resume applications",
    ["status"],  # accepted, rejected
)


def set_app_info(version: str, environment: str) -> None:
    APP_INFO.info({"version": version, "environment": environment})


def endpoint_label(routes: Iterable[BaseRoute], scope: Scope) -> str:
    """Template of the route serving ``scope`` (``/api/v1/stats/{topic}``).

    Path parameters never reach a label. Paths no route serves share
    :data:`UNMATCHED_ENDPOINT`.
    """
    partial = None
    for route in routes:
        match, _ = route.matches(scope)
        if match == Match.FULL:
            return getattr(route, "path", UNMATCHED_ENDPOINT)
        if match == Match.PARTIAL and partial is None:
            partial = route
    if partial is not None:
        return getattr(partial, "path", UNMATCHED_ENDPOINT)
    return UNMATCHED_ENDPOINT


def record_login_attempt(success: bool) -> None:
    AUTH_LOGIN_ATTEMPTS_TOTAL.labels(status="success" if success else "failure").inc()


def record_registration(role: str) -> None:
    USER_REGISTRATIONS_TOTAL.labels(role=role).inc()


def record_job_posted(job_type: str) -> None:
    JOBS_POSTED_TOTAL.labels(job_type=job_type).inc()


def record_application(accepted: bool) -> None:
    APPLICATIONS_TOTAL.labels(status="accepted" if accepted else "rejected").inc()
