"""Authentication API endpoints."""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from jobboard.core.auth import get_current_user
from jobboard.db import User
from jobboard.dependencies import get_auth_service, get_mailer
from jobboard.schemas.auth import (
    ForgotPasswordRequest,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
)
from jobboard.services import AuthService, Mailer

from .responses import envelope, expire_session_cookie, token_response

router = APIRouter(tags=["auth"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(
    payload: RegisterRequest, service: AuthService = Depends(get_auth_service)
) -> JSONResponse:
    """Register a job seeker or employer and start a session."""
    _, token = service.register(payload)
    return token_response(token, status.HTTP_201_CREATED)


@router.post("/login")
def login(payload: LoginRequest, service: AuthService = Depends(get_auth_service)) -> JSONResponse:
    _, token = service.login(payload.email, payload.password)
    return token_response(token)


@router.post("/password/forgot")
async def forgot_password(
    payload: ForgotPasswordRequest,
    service: AuthService = Depends(get_auth_service),
    mailer: Mailer = Depends(get_mailer),
) -> JSONResponse:
    """Email a single-use reset link to the account holder."""
    user = await service.forgot_password(payload.email, mailer)
    return envelope(message=f"Email sent successfully to {user.email}")


@router.post("/password/reset/{token}")
def reset_password(
    token: str,
    payload: ResetPasswordRequest,
    service: AuthService = Depends(get_auth_service),
) -> JSONResponse:
    _, session_token = service.reset_password(token, payload.password)
    return token_response(session_token)


@router.get("/logout")
def logout(_: User = Depends(get_current_user)) -> JSONResponse:
    return expire_session_cookie(envelope(message="User logout successfully"))
