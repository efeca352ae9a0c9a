"""Database models."""

from datetime import datetime
from typing import Optional

from sqlalchemy import (
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.ext.associationproxy import AssociationProxy, association_proxy
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from jobboard.core.time import days_from_now, utcnow

ROLES = ("user", "employer", "admin")

INDUSTRIES = (
    "Business",
    "Information Technology",
    "Banking",
    "Education/Training",
    "Telecommunication",
    "Others",
)
JOB_TYPES = ("Permanent", "Temporary", "Internship")
EDUCATION_LEVELS = ("Bachelors", "Masters", "Phd")
EXPERIENCE_LEVELS = ("No Experience", "1 Year - 2 Years", "2 Years - 5 Years", "5 Years+")

APPLICATION_WINDOW_DAYS = 7


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class User(Base):
    """Job seeker, employer or administrator account."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default="user")
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    reset_password_token: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    reset_password_expire: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, onupdate=utcnow, nullable=False
    )

    jobs_posted: Mapped[list["Job"]] = relationship(
        "Job", back_populates="user", cascade="all, delete-orphan", order_by="Job.posting_date"
    )
    applications: Mapped[list["Application"]] = relationship(
        "Application", back_populates="user", cascade="all, delete-orphan"
    )


class Job(Base):
    """Job posting with a geocoded location."""

    __tablename__ = "jobs"
    __table_args__ = (
        Index("ix_jobs_lat_lng", "latitude", "longitude"),
        Index("ix_jobs_posting_date", "posting_date"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str] = mapped_column(String(120), nullable=False, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    address: Mapped[str] = mapped_column(String(255), nullable=False)

    latitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    longitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    formatted_address: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    city: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    state: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    zipcode: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    country: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    company: Mapped[str] = mapped_column(String(255), nullable=False)
    job_type: Mapped[str] = mapped_column(String(20), nullable=False)
    min_education: Mapped[str] = mapped_column(String(20), nullable=False)
    positions: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    experience: Mapped[str] = mapped_column(String(30), nullable=False)
    salary: Mapped[int] = mapped_column(Integer, nullable=False)
    posting_date: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    last_date: Mapped[datetime] = mapped_column(
        DateTime, default=lambda: days_from_now(APPLICATION_WINDOW_DAYS), nullable=False
    )
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    user: Mapped["User"] = relationship("User", back_populates="jobs_posted")
    industries: Mapped[list["JobIndustry"]] = relationship(
        "JobIndustry",
        cascade="all, delete-orphan",
        order_by="JobIndustry.id",
        lazy="selectin",
    )
    applications: Mapped[list["Application"]] = relationship(
        "Application", back_populates="job", cascade="all, delete-orphan"
    )

    # Multi-valued field exposed as a flat list of names; comparisons against
    # it match when any element satisfies the predicate.
    industry: AssociationProxy[list[str]] = association_proxy(
        "industries", "name", creator=lambda name: JobIndustry(name=name)
    )


class JobIndustry(Base):
    """One industry tag of a job posting."""

    __tablename__ = "job_industries"
    __table_args__ = (UniqueConstraint("job_id", "name", name="uix_job_industry"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    job_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(50), nullable=False)


class Application(Base):
    """A job seeker's resume submission for a job."""

    __tablename__ = "applications"
    __table_args__ = (UniqueConstraint("job_id", "user_id", name="uix_application_job_user"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    job_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    resume: Mapped[str] = mapped_column(String(255), nullable=False)
    applied_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)

    job: Mapped["Job"] = relationship("Job", back_populates="applications")
    user: Mapped["User"] = relationship("User", back_populates="applications")
