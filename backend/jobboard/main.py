"""Main FastAPI application."""

import time
import traceback
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from jobboard.api import auth, errors, jobs, users
from jobboard.core import settings, setup_logging
from jobboard.core.logging import get_logger
from jobboard.core.metrics import (
    HTTP_REQUEST_DURATION_SECONDS,
    HTTP_REQUESTS_IN_PROGRESS,
    HTTP_REQUESTS_TOTAL,
    endpoint_label,
    set_app_info,
)
from jobboard.db import Base, Database, get_database, seed_default_data
from jobboard.domain.exceptions import ConflictError, DomainError

# Setup logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the connection pool for the life of the process."""
    database = Database(settings.database_url, echo=settings.database_echo)
    database.connect()
    app.state.database = database
    Base.metadata.create_all(bind=database.engine)

    if settings.seed_default_data:
        db = database.session()
        try:
            seed_default_data(db)
        except SQLAlchemyError as exc:
            logger.warning("Skipping default seed (operation error): %s", exc)
        finally:
            db.close()

    try:
        yield
    finally:
        database.dispose()


# Create app
app = FastAPI(
    title=settings.api_title,
    version=settings.api_version,
    lifespan=lifespan,
)

# Set application info metric
set_app_info(version=settings.api_version, environment=settings.environment)

# Global rate limit per client IP - disabled during testing
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.rate_limit],
    storage_uri=settings.rate_limit_storage_uri,
    enabled=not settings.testing,
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def security_headers_middleware(request: Request, call_next):
    response = await call_next(request)
    response.headers.setdefault("X-Content-Type-Options", "nosniff")
    response.headers.setdefault("X-Frame-Options", "DENY")
    response.headers.setdefault("Referrer-Policy", "no-referrer")
    if settings.is_production:
        response.headers.setdefault(
            "Strict-Transport-Security", "max-age=31536000; includeSubDomains"
        )
    return response


@app.middleware("http")
async def prometheus_metrics_middleware(request: Request, call_next):
    """Middleware to collect Prometheus metrics for all HTTP requests."""
    # Skip metrics for the metrics endpoint itself to avoid recursion
    if request.url.path == "/metrics":
        return await call_next(request)

    method = request.method
    endpoint = endpoint_label(request.app.router.routes, request.scope)

    HTTP_REQUESTS_IN_PROGRESS.labels(method=method, endpoint=endpoint).inc()
    start_time = time.perf_counter()

    try:
        response = await call_next(request)
        status_code = str(response.status_code)
    except Exception:
        status_code = "500"
        raise
    finally:
        duration = time.perf_counter() - start_time
        HTTP_REQUESTS_IN_PROGRESS.labels(method=method, endpoint=endpoint).dec()
        HTTP_REQUEST_DURATION_SECONDS.labels(method=method, endpoint=endpoint).observe(duration)
        HTTP_REQUESTS_TOTAL.labels(method=method, endpoint=endpoint, status_code=status_code).inc()

    return response


# Include routers
app.include_router(auth.router, prefix=settings.api_prefix)
app.include_router(users.router, prefix=settings.api_prefix)
app.include_router(jobs.router, prefix=settings.api_prefix)


@app.get("/metrics", include_in_schema=False)
@limiter.exempt
async def metrics() -> Response:
    """Prometheus metrics in text exposition format."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


@app.get("/health")
@limiter.exempt
async def health() -> dict:
    """Liveness probe; only verifies the process answers."""
    return {"status": "healthy"}


@app.get("/health/ready")
@limiter.exempt
async def health_ready(database: Database = Depends(get_database)):
    """Readiness probe; 503 when the database cannot be reached."""
    try:
        database.ping()
    except (SQLAlchemyError, RuntimeError) as exc:
        logger.error("Readiness check failed", extra={"error": str(exc)})
        return JSONResponse(
            status_code=503,
            content={
                "status": "unhealthy",
                "dependencies": {"database": {"status": "unhealthy", "error": str(exc)}},
            },
        )
    return {"status": "healthy", "dependencies": {"database": {"status": "healthy"}}}


@app.get("/")
async def root() -> dict:
    """Root endpoint."""
    return {
        "message": "Job Board API",
        "version": settings.api_version,
        "docs": "/docs",
    }


def _error(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content={"success": False, "message": message, **extra}
    )


@app.exception_handler(DomainError)
async def domain_exception_handler(request: Request, exc: DomainError):
    """Translate domain errors to HTTP responses globally."""
    http_exc = errors.to_http(exc)
    return _error(http_exc.status_code, http_exc.detail)


@app.exception_handler(IntegrityError)
async def integrity_exception_handler(request: Request, exc: IntegrityError):
    """Unique constraint violations surface as conflicts."""
    logger.warning("Integrity error", extra={"path": request.url.path, "error": str(exc.orig)})
    http_exc = errors.to_http(ConflictError("Duplicate field entered"))
    return _error(http_exc.status_code, http_exc.detail)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        text = error.get("msg", "Invalid value")
        messages.append(f"{location}: {text}" if location else text)
    return _error(400, ", ".join(messages) or "Invalid request")


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404 and exc.detail == "Not Found":
        return _error(404, f"Route: {request.url.path} not found")
    response = _error(exc.status_code, str(exc.detail))
    for name, value in (getattr(exc, "headers", None) or {}).items():
        response.headers[name] = value
    return response


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error", extra={"path": request.url.path})
    if settings.is_production:
        return _error(500, "Internal Server Error")
    stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return _error(500, "Internal Server Error", stack=stack)
