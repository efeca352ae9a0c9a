"""Job posting endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, File, Request, UploadFile, status
from fastapi.responses import JSONResponse

from jobboard.core.auth import require_employer, require_job_seeker
from jobboard.db import User
from jobboard.dependencies import get_geocoder, get_job_service, get_resume_storage
from jobboard.schemas.job import JobCreate, JobUpdate
from jobboard.services import Geocoder, JobService, ResumeStorage, job_document

from .responses import envelope

router = APIRouter(tags=["jobs"])


@router.get("/jobs")
def list_jobs(request: Request, service: JobService = Depends(get_job_service)) -> JSONResponse:
    """List jobs.

    Query keys: ``field=value`` and ``field[gt|gte|lt|lte|in]=value`` filter,
    ``q`` searches titles, ``sort`` orders (``-`` for descending), ``fields``
    projects, ``page`` and ``limit`` paginate.
    """
    jobs = service.list_jobs(request.query_params)
    return envelope(results=len(jobs), data=jobs)


@router.get("/job/{job_id}/{slug}")
def get_job(job_id: int, slug: str, service: JobService = Depends(get_job_service)) -> JSONResponse:
    job = service.get_job(job_id, slug)
    return envelope(data=job_document(job, with_owner=True))


@router.post("/job/new", status_code=status.HTTP_201_CREATED)
def create_job(
    payload: JobCreate,
    current_user: User = Depends(require_employer),
    service: JobService = Depends(get_job_service),
    geocoder: Geocoder = Depends(get_geocoder),
) -> JSONResponse:
    job = service.create_job(payload, current_user, geocoder)
    return envelope(status.HTTP_201_CREATED, data=job_document(job))


@router.put("/job/{job_id}")
def update_job(
    job_id: int,
    payload: JobUpdate,
    current_user: User = Depends(require_employer),
    service: JobService = Depends(get_job_service),
    geocoder: Geocoder = Depends(get_geocoder),
) -> JSONResponse:
    job = service.update_job(job_id, payload, current_user, geocoder)
    return envelope(data=job_document(job))


@router.delete("/job/{job_id}")
def delete_job(
    job_id: int,
    current_user: User = Depends(require_employer),
    service: JobService = Depends(get_job_service),
    storage: ResumeStorage = Depends(get_resume_storage),
) -> JSONResponse:
    service.delete_job(job_id, current_user, storage)
    return envelope(message="Job removed")


@router.get("/jobs/{zipcode}/{distance}")
def jobs_in_radius(
    zipcode: str,
    distance: float,
    service: JobService = Depends(get_job_service),
    geocoder: Geocoder = Depends(get_geocoder),
) -> JSONResponse:
    """Jobs located within ``distance`` miles of ``zipcode``."""
    jobs = [job_document(job) for job in service.jobs_in_radius(zipcode, distance, geocoder)]
    return envelope(count=len(jobs), data=jobs)


@router.get("/stats/{topic}")
def job_stats(topic: str, service: JobService = Depends(get_job_service)) -> JSONResponse:
    stats = service.stats(topic)
    return envelope(data=[row.model_dump() for row in stats])


@router.put("/job/{job_id}/apply")
def apply_to_job(
    job_id: int,
    file: Optional[UploadFile] = File(None),
    current_user: User = Depends(require_job_seeker),
    service: JobService = Depends(get_job_service),
    storage: ResumeStorage = Depends(get_resume_storage),
) -> JSONResponse:
    """Upload a ``.pdf`` or ``.docx`` resume for a job."""
    stored_name = service.apply(
        job_id,
        current_user,
        filename=file.filename if file else None,
        stream=file.file if file else None,
        storage=storage,
    )
    return envelope(message="Applied to Job successfully", data=stored_name)
