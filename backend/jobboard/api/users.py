"""Account and user administration endpoints."""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from jobboard.core.auth import get_current_user, require_employer, require_job_seeker
from jobboard.db import User
from jobboard.dependencies import get_admin_user, get_resume_storage, get_user_service
from jobboard.schemas.auth import PasswordUpdateRequest
from jobboard.schemas.user import ProfileResponse, UserResponse, UserUpdate
from jobboard.services import ResumeStorage, UserService, job_document

from .responses import envelope, expire_session_cookie, token_response

router = APIRouter(tags=["users"])


@router.get("/me")
def get_me(current_user: User = Depends(get_current_user)) -> JSONResponse:
    """Current profile including the jobs the caller has posted."""
    profile = ProfileResponse.model_validate(current_user)
    return envelope(data=profile.model_dump(mode="json"))


@router.put("/me/update")
def update_me(
    payload: UserUpdate,
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
) -> JSONResponse:
    user = service.update_profile(current_user, payload)
    return envelope(data=UserResponse.model_validate(user).model_dump(mode="json"))


@router.put("/password/update")
def update_password(
    payload: PasswordUpdateRequest,
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
) -> JSONResponse:
    token = service.update_password(current_user, payload.current_password, payload.new_password)
    return token_response(token)


@router.delete("/me/delete")
def delete_me(
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
    storage: ResumeStorage = Depends(get_resume_storage),
) -> JSONResponse:
    service.delete_account(current_user, storage)
    return expire_session_cookie(envelope(message="Your account has been deleted"))


@router.get("/jobs/applied")
def applied_jobs(
    current_user: User = Depends(require_job_seeker),
    service: UserService = Depends(get_user_service),
) -> JSONResponse:
    jobs = [job_document(job) for job in service.applied_jobs(current_user)]
    return envelope(results=len(jobs), data=jobs)


@router.get("/jobs/published")
def published_jobs(
    current_user: User = Depends(require_employer),
    service: UserService = Depends(get_user_service),
) -> JSONResponse:
    jobs = [job_document(job) for job in service.published_jobs(current_user)]
    return envelope(results=len(jobs), data=jobs)


@router.get("/users")
def list_users(
    request: Request,
    service: UserService = Depends(get_user_service),
    _: User = Depends(get_admin_user),
) -> JSONResponse:
    """List users; accepts the same filter, sort, fields and paging keys as ``/jobs``."""
    users = service.list_users(request.query_params)
    return envelope(results=len(users), data=users)


@router.delete("/user/{user_id}")
def delete_user(
    user_id: int,
    service: UserService = Depends(get_user_service),
    storage: ResumeStorage = Depends(get_resume_storage),
    admin: User = Depends(get_admin_user),
) -> JSONResponse:
    service.delete_user(user_id, storage, acting_user_id=admin.id)
    return envelope(message="Account has been deleted")
