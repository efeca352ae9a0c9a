"""Job posting lifecycle, search and applications."""

from __future__ import annotations

import os
from typing import Any, BinaryIO, Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from jobboard.core.config import settings
from jobboard.core.logging import LoggerAdapter, get_logger
from jobboard.core.metrics import record_application, record_job_posted
from jobboard.core.time import to_naive_utc, utcnow
from jobboard.db import Application, Job, JobIndustry, User
from jobboard.domain.context import RequestContext
from jobboard.domain.exceptions import (
    ConflictError,
    DomainError,
    InvalidUploadError,
    NotFoundError,
    ValidationError,
)
from jobboard.domain.geo import Coordinates, bounding_box, distance_miles
from jobboard.domain.jobs import ALLOWED_RESUME_EXTENSIONS, resume_filename, slugify
from jobboard.repositories import ApiFilters, ApplicationRepository, JobRepository, Projection
from jobboard.schemas.job import JobResponse, JobStats
from jobboard.services.geocoder import GeocodedLocation, Geocoder
from jobboard.services.storage import ResumeStorage

logger = get_logger(__name__)

LOCATION_FIELDS = frozenset(
    {"latitude", "longitude", "formatted_address", "city", "state", "zipcode", "country"}
)


def job_document(
    job: Job, projection: Optional[Projection] = None, *, with_owner: bool = False
) -> dict[str, Any]:
    """Serialize a job, honoring a field projection.

    Location columns live under ``location`` in the document, so selecting
    any of them keeps that block.
    """
    document = JobResponse.from_job(job, with_owner=with_owner).document()
    projection = projection or Projection(exclude=frozenset({"version"}))
    if projection.include is not None and projection.include & LOCATION_FIELDS:
        projection = Projection(include=projection.include | {"location"})
    return projection.apply(document)


class JobService:
    """Coordinates job postings, radius search, statistics and applications."""

    def __init__(self, session: Session) -> None:
        self.session = session
        self.jobs = JobRepository(session)
        self.applications = ApplicationRepository(session)

    # ------------------------------------------------------------------
    # Queries

    def list_jobs(self, query_params: Any) -> list[dict[str, Any]]:
        filters = (
            ApiFilters(self.jobs.query(), query_params, model=Job)
            .filter()
            .sort()
            .limit_fields()
            .search_by_query()
            .paginate()
        )
        return [job_document(job, filters.projection) for job in filters.all()]

    def get_job(self, job_id: int, slug: str) -> Job:
        job = self.jobs.get_by_id_and_slug(job_id, slug)
        if not job:
            raise NotFoundError("Job not found")
        return job

    def jobs_in_radius(self, zipcode: str, distance: float, geocoder: Geocoder) -> list[Job]:
        if distance < 0:
            raise ValidationError("Distance must be a non-negative number of miles")

        origin = geocoder.geocode(zipcode)
        center = Coordinates(origin.latitude, origin.longitude)
        box = bounding_box(center, distance)
        candidates = self.jobs.list_within_bounds(
            min_lat=box.min_lat, max_lat=box.max_lat, min_lng=box.min_lng, max_lng=box.max_lng
        )
        return [
            job
            for job in candidates
            if distance_miles(center, Coordinates(job.latitude, job.longitude)) <= distance
        ]

    def stats(self, topic: str) -> list[JobStats]:
        rows = self.jobs.stats_by_experience(topic)
        if not rows:
            raise NotFoundError(f"No stats found for {topic}")
        return [JobStats(**row) for row in rows]

    # ------------------------------------------------------------------
    # Mutations

    def create_job(self, payload, user: User, geocoder: Geocoder) -> Job:
        data = payload.model_dump(exclude={"industry", "last_date"})
        job = Job(**data, slug=slugify(payload.title), user_id=user.id)
        if payload.email:
            job.email = str(payload.email).lower()
        if payload.last_date is not None:
            job.last_date = to_naive_utc(payload.last_date)
        _set_industries(job, payload.industry)
        _apply_location(job, geocoder.geocode(payload.address))

        self.jobs.add(job)
        self.jobs.commit()
        self.jobs.refresh(job)

        record_job_posted(job.job_type)
        logger.info(
            "Job posted",
            extra={"event": "job.create", "job_id": job.id, "user_id": user.id},
        )
        return job

    def update_job(self, job_id: int, payload, user: User, geocoder: Geocoder) -> Job:
        job = self._get_or_404(job_id)
        RequestContext(user).assert_owner_or_admin(job.user_id, "update")

        data = payload.model_dump(exclude_unset=True)
        industries = data.pop("industry", None)
        last_date = data.pop("last_date", None)
        for field, value in data.items():
            if value is None:
                continue
            setattr(job, field, value)

        if "email" in data and data["email"] is not None:
            job.email = str(data["email"]).lower()
        if last_date is not None:
            job.last_date = to_naive_utc(last_date)
        if industries is not None:
            _set_industries(job, industries)
        if data.get("title"):
            job.slug = slugify(job.title)
        if data.get("address"):
            _apply_location(job, geocoder.geocode(job.address))

        self.jobs.commit()
        self.jobs.refresh(job)
        logger.info(
            "Job updated",
            extra={"event": "job.update", "job_id": job.id, "user_id": user.id},
        )
        return job

    def delete_job(self, job_id: int, user: User, storage: ResumeStorage) -> None:
        job = self._get_or_404(job_id)
        RequestContext(user).assert_owner_or_admin(job.user_id, "delete")

        resumes = [application.resume for application in job.applications]
        self.jobs.remove(job)
        self.jobs.commit()

        for resume in resumes:
            storage.delete(resume)
        logger.info(
            "Job deleted",
            extra={"event": "job.delete", "job_id": job_id, "user_id": user.id},
        )

    def apply(
        self,
        job_id: int,
        user: User,
        *,
        filename: Optional[str],
        stream: Optional[BinaryIO],
        storage: ResumeStorage,
    ) -> str:
        """Attach the caller's resume to a job and return the stored file name."""
        log = LoggerAdapter(logger, {"job_id": job_id, "user_id": user.id})
        try:
            stored_name = self._apply(job_id, user, filename, stream, storage)
        except DomainError as exc:
            record_application(accepted=False)
            log.info("Application rejected", extra={"reason": exc.message})
            raise
        log.info("Applied to job", extra={"event": "job.apply", "resume": stored_name})
        record_application(accepted=True)
        return stored_name

    # ------------------------------------------------------------------
    # Helpers

    def _apply(
        self,
        job_id: int,
        user: User,
        filename: Optional[str],
        stream: Optional[BinaryIO],
        storage: ResumeStorage,
    ) -> str:
        job = self._get_or_404(job_id)

        if job.last_date < utcnow():
            raise ValidationError("You cannot apply to this job, Last date has expired")

        if self.applications.get_for(job.id, user.id):
            raise ConflictError("You have already applied to this job")

        if stream is None or not filename:
            raise InvalidUploadError("Please upload a file")

        extension = os.path.splitext(filename)[1].lower()
        if extension not in ALLOWED_RESUME_EXTENSIONS:
            raise InvalidUploadError("Please upload document file")

        if _stream_size(stream) > settings.max_file_size:
            limit_mb = settings.max_file_size / (1024 * 1024)
            raise InvalidUploadError(f"Please upload file less than {limit_mb:g}mb")

        stored_name = resume_filename(user.id, user.name, job.id, extension)
        storage.save(stored_name, stream)

        try:
            self.applications.add(
                Application(job_id=job.id, user_id=user.id, resume=stored_name)
            )
            self.applications.commit()
        except SQLAlchemyError:
            self.applications.rollback()
            # A concurrent apply may have committed a row pointing at the same file.
            if self.applications.get_by_resume(stored_name) is None:
                storage.delete(stored_name)
            logger.warning(
                "Application not recorded",
                extra={"job_id": job_id, "user_id": user.id, "resume": stored_name},
            )
            raise
        return stored_name

    def _get_or_404(self, job_id: int) -> Job:
        job = self.jobs.get_by_id(job_id)
        if not job:
            raise NotFoundError("Job not found")
        return job


def _stream_size(stream: BinaryIO) -> int:
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(0)
    return size


def _set_industries(job: Job, names: Iterable[str]) -> None:
    # Existing rows are reused so the (job, name) uniqueness holds across a flush.
    current = {industry.name: industry for industry in job.industries}
    job.industries = [current.get(name) or JobIndustry(name=name) for name in dict.fromkeys(names)]


def _apply_location(job: Job, location: GeocodedLocation) -> None:
    job.latitude = location.latitude
    job.longitude = location.longitude
    job.formatted_address = location.formatted_address
    job.city = location.city
    job.state = location.state
    job.zipcode = location.zipcode
    job.country = location.country
