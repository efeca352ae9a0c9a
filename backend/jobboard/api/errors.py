"""Utilities for translating domain errors to HTTP responses."""

from fastapi import HTTPException, status

from jobboard.domain.exceptions import (
    ConflictError,
    DomainError,
    ForbiddenError,
    InvalidUploadError,
    NotFoundError,
    UnauthorizedError,
    UploadFailedError,
    UpstreamError,
    ValidationError,
)

# Subclasses precede their bases: InvalidUploadError is an UploadFailedError.
STATUS_BY_ERROR: tuple[tuple[type[DomainError], int], ...] = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (UnauthorizedError, status.HTTP_401_UNAUTHORIZED),
    (ForbiddenError, status.HTTP_403_FORBIDDEN),
    (ConflictError, status.HTTP_400_BAD_REQUEST),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (InvalidUploadError, status.HTTP_400_BAD_REQUEST),
    (UploadFailedError, status.HTTP_500_INTERNAL_SERVER_ERROR),
    (UpstreamError, status.HTTP_502_BAD_GATEWAY),
)


def status_for(exc: DomainError) -> int:
    for error_type, status_code in STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_400_BAD_REQUEST


def to_http(exc: DomainError) -> HTTPException:
    return HTTPException(status_code=status_for(exc), detail=exc.message)
