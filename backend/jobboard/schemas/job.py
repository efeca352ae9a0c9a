"""Job schemas."""

from datetime import datetime
from typing import Annotated, Any, Literal, Optional

from pydantic import AfterValidator, BaseModel, EmailStr, Field

from jobboard.db.models import Job
from jobboard.domain.jobs import slugify

Industry = Literal[
    "Business",
    "Information Technology",
    "Banking",
    "Education/Training",
    "Telecommunication",
    "Others",
]
JobType = Literal["Permanent", "Temporary", "Internship"]
Education = Literal["Bachelors", "Masters", "Phd"]
Experience = Literal["No Experience", "1 Year - 2 Years", "2 Years - 5 Years", "5 Years+"]


def _clean_title(value: str) -> str:
    """Strip a job title; reject one that is blank or has no slug-able characters."""
    value = value.strip()
    if not value:
        raise ValueError("Please enter job title.")
    if not slugify(value):
        raise ValueError("Job title must contain letters or digits.")
    return value


JobTitle = Annotated[str, Field(min_length=1, max_length=100), AfterValidator(_clean_title)]


class JobBase(BaseModel):
    """Fields shared by create requests and responses."""

    title: JobTitle
    description: str = Field(..., min_length=1, max_length=1000)
    email: Optional[EmailStr] = None
    address: str = Field(..., min_length=1, max_length=255)
    company: str = Field(..., min_length=1, max_length=255)
    industry: list[Industry] = Field(..., min_length=1)
    job_type: JobType
    min_education: Education
    positions: int = Field(default=1, ge=1)
    experience: Experience
    salary: int = Field(..., ge=0)


class JobCreate(JobBase):
    """Job creation request; the owner is always the caller."""

    last_date: Optional[datetime] = None


class JobUpdate(BaseModel):
    """Partial job update."""

    title: Optional[JobTitle] = None
    description: Optional[str] = Field(None, min_length=1, max_length=1000)
    email: Optional[EmailStr] = None
    address: Optional[str] = Field(None, min_length=1, max_length=255)
    company: Optional[str] = Field(None, min_length=1, max_length=255)
    industry: Optional[list[Industry]] = Field(None, min_length=1)
    job_type: Optional[JobType] = None
    min_education: Optional[Education] = None
    positions: Optional[int] = Field(None, ge=1)
    experience: Optional[Experience] = None
    salary: Optional[int] = Field(None, ge=0)
    last_date: Optional[datetime] = None


class Location(BaseModel):
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    formatted_address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zipcode: Optional[str] = None
    country: Optional[str] = None


class JobOwner(BaseModel):
    id: int
    name: str


class JobResponse(BaseModel):
    """Job response schema."""

    id: int
    title: str
    slug: str
    description: str
    email: Optional[str] = None
    address: str
    location: Location
    company: str
    industry: list[str]
    job_type: str
    min_education: str
    positions: int
    experience: str
    salary: int
    posting_date: datetime
    last_date: datetime
    user_id: int
    version: int
    user: Optional[JobOwner] = None

    @classmethod
    def from_job(cls, job: Job, *, with_owner: bool = False) -> "JobResponse":
        return cls(
            id=job.id,
            title=job.title,
            slug=job.slug,
            description=job.description,
            email=job.email,
            address=job.address,
            location=Location(
                latitude=job.latitude,
                longitude=job.longitude,
                formatted_address=job.formatted_address,
                city=job.city,
                state=job.state,
                zipcode=job.zipcode,
                country=job.country,
            ),
            company=job.company,
            industry=list(job.industry),
            job_type=job.job_type,
            min_education=job.min_education,
            positions=job.positions,
            experience=job.experience,
            salary=job.salary,
            posting_date=job.posting_date,
            last_date=job.last_date,
            user_id=job.user_id,
            version=job.version,
            user=JobOwner(id=job.user.id, name=job.user.name) if with_owner and job.user else None,
        )

    def document(self, *, exclude: Optional[set[str]] = None) -> dict[str, Any]:
        """JSON-ready dict; the owner block only appears when it was loaded."""
        skip = set(exclude or ())
        if self.user is None:
            skip.add("user")
        return self.model_dump(mode="json", exclude=skip)


class JobStats(BaseModel):
    experience: str
    total_jobs: int
    avg_salary: Optional[float] = None
    avg_positions: Optional[float] = None
    min_salary: Optional[int] = None
    max_salary: Optional[int] = None
