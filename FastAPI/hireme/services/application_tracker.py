"""
Application tracker: apply, review status changes, withdrawal and listings.

Creating an application is an explicit two-step operation: insert the row
(duplicates are rejected by the store's unique (job_id, applicant_id)
constraint), then bump the job's applications_count once. The bump is not
retried and its failure never undoes the application.
"""

import logging
from datetime import date, datetime, timezone

from sqlalchemy.orm import Session

from hireme.core.errors import (
    ForbiddenError,
    InvalidOperationError,
    NotFoundError,
    ValidationError,
)
from hireme.core.pagination import offset_for, parse_sort
from hireme.core.security import generate_id
from hireme.models.application import APPLICATION_STATUSES, Application
from hireme.repos import application_repo, job_repo, user_repo
from hireme.schemas.application import ExpectedSalary
from hireme.services import job_catalog

logger = logging.getLogger(__name__)

COVER_LETTER_MIN = 50
COVER_LETTER_MAX = 2000
NOTES_MAX = 1000
LIST_SORT_FIELDS = set(application_repo.SORTABLE_COLUMNS)


def _status_filter(status: str | None) -> str | None:
    if not status or status == "all":
        return None
    if status not in APPLICATION_STATUSES:
        raise ValidationError(f"Status must be one of: all, {', '.join(APPLICATION_STATUSES)}")
    return status


def _clean_cover_letter(cover_letter: str) -> str:
    text = (cover_letter or "").strip()
    if not COVER_LETTER_MIN <= len(text) <= COVER_LETTER_MAX:
        raise ValidationError(
            f"Cover letter must be between {COVER_LETTER_MIN} and {COVER_LETTER_MAX} characters",
            errors=[{"field": "coverLetter", "message": "invalid length"}],
        )
    return text


def apply(
    db: Session,
    applicant_id: str,
    job_id: str,
    cover_letter: str,
    *,
    expected_salary: ExpectedSalary | None = None,
    available_from: date | None = None,
) -> Application:
    cover_letter = _clean_cover_letter(cover_letter)

    job = job_repo.get_by_id(db, job_id)
    if not job:
        raise NotFoundError("Job not found")
    if not job.is_active:
        raise InvalidOperationError("Job is no longer available")
    if job_catalog.is_expired(job):
        raise InvalidOperationError("Application deadline has passed")
    if job.employer_id == applicant_id:
        raise ForbiddenError("You cannot apply to your own job")
    if available_from is not None and available_from < datetime.now(timezone.utc).date():
        raise ValidationError(
            "Available from date cannot be in the past",
            errors=[{"field": "availableFrom", "message": "must be today or later"}],
        )

    application = Application(
        id=generate_id(),
        job_id=job.id,
        applicant_id=applicant_id,
        employer_id=job.employer_id,
        cover_letter=cover_letter,
        available_from=available_from,
        status="pending",
        is_active=True,
    )
    if expected_salary is not None and expected_salary.amount:
        application.expected_salary_amount = expected_salary.amount
        application.expected_salary_currency = expected_salary.currency or "USD"
        application.expected_salary_period = expected_salary.period or "yearly"

    applicant = user_repo.get_by_id(db, applicant_id)
    if applicant is not None and applicant.resume:
        application.resume = applicant.resume

    application = application_repo.insert(db, application)
    logger.info("Application submitted: id=%s job=%s applicant=%s", application.id, job.id, applicant_id)

    job_catalog.increment_applications(db, job.id)
    return application


def get_application(db: Session, application_id: str, viewer_id: str) -> Application:
    """Visible to the applicant and to the employer who owns the job."""
    application = application_repo.get_by_id(db, application_id)
    if not application:
        raise NotFoundError("Application not found")
    if viewer_id not in (application.applicant_id, application.employer_id):
        raise ForbiddenError("Access denied. You can only view your own applications.")
    return application


def update_status(
    db: Session,
    application_id: str,
    employer_id: str,
    new_status: str,
    notes: str | None = None,
) -> Application:
    """Employer-driven and unordered: any status may follow any other."""
    if new_status not in APPLICATION_STATUSES:
        raise ValidationError(f"Status must be one of: {', '.join(APPLICATION_STATUSES)}")
    if notes is not None and len(notes.strip()) > NOTES_MAX:
        raise ValidationError(f"Notes cannot exceed {NOTES_MAX} characters")

    application = application_repo.get_by_id(db, application_id)
    if not application:
        raise NotFoundError("Application not found")
    if application.employer_id != employer_id:
        raise ForbiddenError("Access denied. You can only update applications for your own jobs.")

    previous = application.status
    application.status = new_status
    application.reviewed_at = datetime.now(timezone.utc)
    application.reviewed_by = employer_id
    if notes and notes.strip():
        application.notes = notes.strip()
    application = application_repo.save(db, application)
    logger.info("Application %s status: %s -> %s (by %s)", application.id, previous, new_status, employer_id)
    return application


def withdraw(db: Session, application_id: str, applicant_id: str) -> Application:
    """Soft delete by the applicant. The (job, applicant) slot stays taken."""
    application = application_repo.get_by_id(db, application_id)
    if not application:
        raise NotFoundError("Application not found")
    if application.applicant_id != applicant_id:
        raise ForbiddenError("Access denied. You can only withdraw your own applications.")
    if not application.can_be_withdrawn():
        raise InvalidOperationError("Application cannot be withdrawn at this stage")

    application.is_active = False
    application = application_repo.save(db, application)
    logger.info("Application withdrawn: id=%s applicant=%s", application.id, applicant_id)
    return application


def list_by_job(
    db: Session,
    job_id: str,
    *,
    page: int = 1,
    limit: int = 10,
    status: str | None = None,
    sort_by: str | None = None,
) -> tuple[list[Application], int]:
    field, descending = parse_sort(sort_by, LIST_SORT_FIELDS)
    q = application_repo.active_query(db, job_id=job_id, status=_status_filter(status))
    return application_repo.paginate(q, field, descending, offset_for(page, limit), limit)


def list_for_employer_job(
    db: Session,
    job_id: str,
    employer_id: str,
    *,
    page: int = 1,
    limit: int = 10,
    status: str | None = None,
    sort_by: str | None = None,
):
    """Owner-checked listing. Returns (job, applications, total)."""
    job = job_repo.get_by_id(db, job_id)
    if not job:
        raise NotFoundError("Job not found")
    if job.employer_id != employer_id:
        raise ForbiddenError("Access denied. You can only view applications for your own jobs.")
    items, total = list_by_job(db, job_id, page=page, limit=limit, status=status, sort_by=sort_by)
    return job, items, total


def list_by_applicant(
    db: Session,
    applicant_id: str,
    *,
    page: int = 1,
    limit: int = 10,
    status: str | None = None,
    sort_by: str | None = None,
) -> tuple[list[Application], int]:
    field, descending = parse_sort(sort_by, LIST_SORT_FIELDS)
    q = application_repo.active_query(db, applicant_id=applicant_id, status=_status_filter(status))
    return application_repo.paginate(q, field, descending, offset_for(page, limit), limit)


def statistics(db: Session, employer_id: str) -> dict:
    """Active applications to the employer's jobs, grouped by status."""
    counts = application_repo.status_counts_for_employer(db, employer_id)
    return {
        "status_counts": [{"status": status, "count": count} for status, count in counts],
        "total_applications": sum(count for _, count in counts),
    }
