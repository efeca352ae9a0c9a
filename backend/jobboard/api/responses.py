"""Response envelope and session cookie helpers shared by the routers."""

from datetime import timedelta
from typing import Any

from fastapi import status
from fastapi.responses import JSONResponse

from jobboard.core.auth import TOKEN_COOKIE
from jobboard.core.config import settings


def envelope(status_code: int = status.HTTP_200_OK, **fields: Any) -> JSONResponse:
    """``{"success": true, ...}`` with ``fields`` merged in."""
    return JSONResponse(status_code=status_code, content={"success": True, **fields})


def token_response(token: str, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    """Return the session token in the body and as an HTTP-only cookie."""
    response = envelope(status_code, token=token)
    response.set_cookie(
        TOKEN_COOKIE,
        token,
        max_age=int(timedelta(days=settings.cookie_expires_days).total_seconds()),
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )
    return response


def expire_session_cookie(response: JSONResponse) -> JSONResponse:
    response.delete_cookie(TOKEN_COOKIE, httponly=True, samesite="lax")
    return response
