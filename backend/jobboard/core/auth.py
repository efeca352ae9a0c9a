"""Authentication dependencies."""

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.orm import Session

from jobboard.core.security import decode_token
from jobboard.db import User, get_db
from jobboard.domain.exceptions import ForbiddenError, UnauthorizedError
from jobboard.repositories.user_repository import UserRepository

security = HTTPBearer(auto_error=False)

TOKEN_COOKIE = "token"


def _extract_token(
    request: Request, credentials: Optional[HTTPAuthorizationCredentials]
) -> Optional[str]:
    if credentials and credentials.scheme.lower() == "bearer" and credentials.credentials:
        return credentials.credentials
    cookie = request.cookies.get(TOKEN_COOKIE)
    if cookie and cookie != "none":
        return cookie
    return None


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the caller from a Bearer header, falling back to the session cookie."""
    token = _extract_token(request, credentials)
    if not token:
        raise UnauthorizedError("Login first to access this resource")

    try:
        payload = decode_token(token)
    except JWTError:
        raise UnauthorizedError("Invalid or expired token") from None

    subject = payload.get("sub")
    if subject is None or payload.get("type") != "access" or not str(subject).isdigit():
        raise UnauthorizedError("Invalid or expired token")

    user = UserRepository(db).get_by_id(int(subject))
    if user is None:
        raise UnauthorizedError("User not found")
    return user


def authorize(*roles: str):
    """Dependency factory restricting a route to the given roles."""

    def role_checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in roles:
            raise ForbiddenError(
                f"Role: {current_user.role} is not authorized to access this resource"
            )
        return current_user

    return role_checker


# Common role dependencies
require_job_seeker = authorize("user")
require_employer = authorize("employer", "admin")
require_admin = authorize("admin")
