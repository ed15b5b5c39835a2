from datetime import datetime
from typing import Annotated, Literal

from pydantic import Field, StringConstraints

from hireme.schemas.common import CamelModel

JobType = Literal["full-time", "part-time", "contract", "internship", "temporary"]
WorkMode = Literal["remote", "on-site", "hybrid"]
Currency = Literal["USD", "EUR", "GBP", "INR", "CAD", "AUD"]
SalaryPeriod = Literal["hourly", "monthly", "yearly"]
Education = Literal["high-school", "bachelor", "master", "phd", "not-specified"]

Title = Annotated[str, StringConstraints(strip_whitespace=True, min_length=3, max_length=100)]
Description = Annotated[str, StringConstraints(strip_whitespace=True, min_length=50, max_length=5000)]
CompanyName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=100)]
Location = Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=100)]
Skill = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=50)]
Benefit = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]
Tag = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=30)]


class SalaryRange(CamelModel):
    # min <= max is a catalog rule (raised as a domain ValidationError), not a schema rule.
    min: int | None = Field(default=None, ge=0)
    max: int | None = Field(default=None, ge=0)
    currency: Currency = "USD"
    period: SalaryPeriod = "yearly"


class ExperienceRange(CamelModel):
    min: int = Field(default=0, ge=0)
    max: int | None = Field(default=None, ge=0)


class Requirements(CamelModel):
    experience: ExperienceRange = Field(default_factory=ExperienceRange)
    education: Education = "not-specified"
    skills: list[Skill] = Field(default_factory=list)


class JobCreate(CamelModel):
    title: Title
    description: Description
    company: CompanyName
    location: Location
    job_type: JobType = "full-time"
    work_mode: WorkMode = "on-site"
    salary: SalaryRange | None = None
    requirements: Requirements = Field(default_factory=Requirements)
    benefits: list[Benefit] = Field(default_factory=list)
    tags: list[Tag] = Field(default_factory=list)
    application_deadline: datetime | None = None


class JobUpdate(CamelModel):
    """Partial update: only fields present in the request body are applied (see model_fields_set)."""

    title: Title | None = None
    description: Description | None = None
    company: CompanyName | None = None
    location: Location | None = None
    job_type: JobType | None = None
    work_mode: WorkMode | None = None
    salary: SalaryRange | None = None
    requirements: Requirements | None = None
    benefits: list[Benefit] | None = None
    tags: list[Tag] | None = None
    application_deadline: datetime | None = None
    is_active: bool | None = None


class JobFilters(CamelModel):
    location: str | None = None
    work_mode: WorkMode | None = None
    job_type: JobType | None = None
    min_salary: int | None = Field(default=None, ge=0)
    max_salary: int | None = Field(default=None, ge=0)
    experience: int | None = Field(default=None, ge=0)
    tags: list[str] = Field(default_factory=list)


class EmployerSummary(CamelModel):
    id: str
    name: str
    company: str | None = None
    location: str | None = None
    website: str | None = None


class JobResponse(CamelModel):
    id: str
    title: str
    description: str
    company: str
    location: str
    job_type: str
    work_mode: str
    salary: SalaryRange | None = None
    requirements: Requirements
    benefits: list[str] = []
    tags: list[str] = []
    application_deadline: datetime | None = None
    is_active: bool
    is_featured: bool
    employer_id: str
    employer: EmployerSummary | None = None
    applications_count: int
    views_count: int
    salary_display: str
    experience_display: str
    is_expired: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class JobSummary(CamelModel):
    id: str
    title: str
    company: str
    location: str
    job_type: str | None = None
    work_mode: str | None = None
    salary_display: str | None = None


class RecentJob(CamelModel):
    id: str
    title: str
    created_at: datetime | None = None
    applications_count: int
    views_count: int


class EmployerJobStats(CamelModel):
    total_jobs: int
    active_jobs: int
    inactive_jobs: int
    total_views: int
    total_applications: int
    recent_jobs: list[RecentJob] = []


def job_to_response(job, include_employer: bool = True) -> JobResponse:
    salary = None
    if job.salary_min is not None or job.salary_max is not None:
        salary = SalaryRange(
            min=job.salary_min,
            max=job.salary_max,
            currency=job.salary_currency or "USD",
            period=job.salary_period or "yearly",
        )
    employer = None
    if include_employer and getattr(job, "employer", None) is not None:
        employer = EmployerSummary.model_validate(job.employer)
    return JobResponse(
        id=job.id,
        title=job.title,
        description=job.description,
        company=job.company,
        location=job.location,
        job_type=job.job_type,
        work_mode=job.work_mode,
        salary=salary,
        requirements=Requirements(
            experience=ExperienceRange(min=job.experience_min or 0, max=job.experience_max),
            education=job.education or "not-specified",
            skills=job.skills or [],
        ),
        benefits=job.benefits or [],
        tags=job.tags,
        application_deadline=job.application_deadline,
        is_active=bool(job.is_active),
        is_featured=bool(job.is_featured),
        employer_id=job.employer_id,
        employer=employer,
        applications_count=job.applications_count or 0,
        views_count=job.views_count or 0,
        salary_display=job.salary_display,
        experience_display=job.experience_display,
        is_expired=job.is_expired(),
        created_at=job.created_at,
        updated_at=job.updated_at,
    )
