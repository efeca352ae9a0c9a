"""Job and application persistence helpers."""

from __future__ import annotations

from typing import Any, Optional, Sequence

from sqlalchemy import func
from sqlalchemy.orm import joinedload

from jobboard.db import Application, Job
from jobboard.repositories.base import SQLAlchemyRepository, fits_db_int


class JobRepository(SQLAlchemyRepository[Job]):
    """Encapsulates job queries."""

    model = Job

    def get_by_id(self, job_id: int) -> Optional[Job]:
        return self.get(job_id)

    def get_by_id_and_slug(self, job_id: int, slug: str) -> Optional[Job]:
        if not fits_db_int(job_id):
            return None
        return (
            self.query()
            .options(joinedload(Job.user))
            .filter(Job.id == job_id, Job.slug == slug)
            .first()
        )

    def list_published_by(self, user_id: int) -> Sequence[Job]:
        return self.list_where(
            Job.user_id == user_id, order_by=(Job.posting_date.desc(), Job.id.asc())
        )

    def list_applied_by(self, user_id: int) -> Sequence[Job]:
        return (
            self.query()
            .join(Application, Application.job_id == Job.id)
            .filter(Application.user_id == user_id)
            .order_by(Application.applied_at.desc(), Job.id.asc())
            .all()
        )

    def list_within_bounds(
        self, *, min_lat: float, max_lat: float, min_lng: float, max_lng: float
    ) -> Sequence[Job]:
        """Jobs inside a latitude/longitude box; callers refine to an exact radius."""
        return self.list_where(
            Job.latitude.is_not(None),
            Job.longitude.is_not(None),
            Job.latitude.between(min_lat, max_lat),
            Job.longitude.between(min_lng, max_lng),
            order_by=(Job.id.asc(),),
        )

    def stats_by_experience(self, topic: str) -> list[dict[str, Any]]:
        """Aggregate salary and positions per experience level for matching titles."""
        rows = (
            self.session.query(
                Job.experience.label("experience"),
                func.count(Job.id).label("total_jobs"),
                func.avg(Job.salary).label("avg_salary"),
                func.avg(Job.positions).label("avg_positions"),
                func.min(Job.salary).label("min_salary"),
                func.max(Job.salary).label("max_salary"),
            )
            .filter(Job.title.icontains(topic, autoescape=True))
            .group_by(Job.experience)
            .order_by(Job.experience.asc())
            .all()
        )
        return [
            {
                "experience": row.experience,
                "total_jobs": row.total_jobs,
                "avg_salary": float(row.avg_salary) if row.avg_salary is not None else None,
                "avg_positions": (
                    float(row.avg_positions) if row.avg_positions is not None else None
                ),
                "min_salary": row.min_salary,
                "max_salary": row.max_salary,
            }
            for row in rows
        ]


class ApplicationRepository(SQLAlchemyRepository[Application]):
    """Encapsulates resume application queries."""

    model = Application

    def get_for(self, job_id: int, user_id: int) -> Optional[Application]:
        return self.first_where(Application.job_id == job_id, Application.user_id == user_id)

    def get_by_resume(self, resume: str) -> Optional[Application]:
        return self.first_where(Application.resume == resume)

    def list_for_user(self, user_id: int) -> Sequence[Application]:
        return self.list_where(Application.user_id == user_id)

    def list_for_jobs_owned_by(self, owner_id: int) -> Sequence[Application]:
        return (
            self.query()
            .join(Job, Job.id == Application.job_id)
            .filter(Job.user_id == owner_id)
            .all()
        )
