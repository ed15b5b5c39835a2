from datetime import date, datetime
from typing import Annotated, Literal

from pydantic import Field, StringConstraints

from hireme.schemas.common import CamelModel
from hireme.schemas.job import Currency, JobSummary, SalaryPeriod

ApplicationStatus = Literal["pending", "reviewed", "shortlisted", "interview-scheduled", "rejected", "hired"]

CoverLetter = Annotated[str, StringConstraints(strip_whitespace=True, min_length=50, max_length=2000)]
Notes = Annotated[str, StringConstraints(strip_whitespace=True, max_length=1000)]


class ExpectedSalary(CamelModel):
    amount: int | None = Field(default=None, ge=0)
    currency: Currency = "USD"
    period: SalaryPeriod = "yearly"


class ApplicationCreate(CamelModel):
    job_id: str
    cover_letter: CoverLetter
    expected_salary: ExpectedSalary | None = None
    available_from: date | None = None


class ApplicationStatusUpdate(CamelModel):
    status: ApplicationStatus
    notes: Notes | None = None


class ApplicantSummary(CamelModel):
    id: str
    name: str
    email: str
    phone: str | None = None
    location: str | None = None
    skills: list[str] = []


class ApplicationResponse(CamelModel):
    id: str
    job_id: str
    applicant_id: str
    employer_id: str
    cover_letter: str
    resume: str | None = None
    expected_salary: ExpectedSalary | None = None
    expected_salary_display: str
    available_from: date | None = None
    status: str
    notes: str | None = None
    is_active: bool
    reviewed_at: datetime | None = None
    reviewed_by: str | None = None
    application_age: str
    job: JobSummary | None = None
    applicant: ApplicantSummary | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class StatusCount(CamelModel):
    status: str
    count: int


class ApplicationStats(CamelModel):
    status_counts: list[StatusCount] = []
    total_applications: int = 0


def application_to_response(app, *, include_job: bool = True, include_applicant: bool = True) -> ApplicationResponse:
    expected = None
    if app.expected_salary_amount is not None:
        expected = ExpectedSalary(
            amount=app.expected_salary_amount,
            currency=app.expected_salary_currency or "USD",
            period=app.expected_salary_period or "yearly",
        )
    job = None
    if include_job and getattr(app, "job", None) is not None:
        job = JobSummary.model_validate(app.job)
    applicant = None
    if include_applicant and getattr(app, "applicant", None) is not None:
        a = app.applicant
        applicant = ApplicantSummary(
            id=a.id,
            name=a.name,
            email=a.email,
            phone=a.phone,
            location=a.location,
            skills=a.skills or [],
        )
    return ApplicationResponse(
        id=app.id,
        job_id=app.job_id,
        applicant_id=app.applicant_id,
        employer_id=app.employer_id,
        cover_letter=app.cover_letter,
        resume=app.resume,
        expected_salary=expected,
        expected_salary_display=app.expected_salary_display,
        available_from=app.available_from,
        status=app.status,
        notes=app.notes,
        is_active=bool(app.is_active),
        reviewed_at=app.reviewed_at,
        reviewed_by=app.reviewed_by,
        application_age=app.application_age,
        job=job,
        applicant=applicant,
        created_at=app.created_at,
        updated_at=app.updated_at,
    )
