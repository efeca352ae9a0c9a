"""Tests for domain error to HTTP status translation."""

import pytest

from jobboard.api.errors import to_http
from jobboard.domain.exceptions import (
    ConflictError,
    DuplicateEmailError,
    ForbiddenError,
    InvalidUploadError,
    NotFoundError,
    UnauthorizedError,
    UploadFailedError,
    UpstreamError,
    ValidationError,
)


@pytest.mark.parametrize(
    "error,expected",
    [
        (NotFoundError("missing"), 404),
        (UnauthorizedError("login"), 401),
        (ForbiddenError("role"), 403),
        (ConflictError("dup"), 400),
        (DuplicateEmailError("dup"), 400),
        (ValidationError("bad"), 400),
        (InvalidUploadError("Please upload a file"), 400),
        (UploadFailedError("Resume Upload Failed"), 500),
        (UpstreamError("smtp down"), 502),
    ],
)
def test_status_mapping(error, expected):
    http_exc = to_http(error)
    assert http_exc.status_code == expected
    assert http_exc.detail == error.message
