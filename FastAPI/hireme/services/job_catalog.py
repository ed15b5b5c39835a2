"""
Job catalog: posting lifecycle, faceted full-text search and display counters.

Mutations are owner-checked (only the posting employer may change a job) and
deletion is a soft delete. Counter bumps are fire-and-forget: they run as a
single UPDATE outside the validated save path, and their failures are logged,
never raised.
"""

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from hireme.core.errors import ForbiddenError, NotFoundError, ValidationError
from hireme.core.pagination import offset_for, parse_sort
from hireme.core.security import generate_id
from hireme.database import SessionLocal
from hireme.models.job import Job, as_utc, utcnow
from hireme.models.user import ROLE_EMPLOYER
from hireme.repos import job_repo, user_repo
from hireme.schemas.job import JobCreate, JobFilters, JobUpdate, SalaryRange

logger = logging.getLogger(__name__)

SEARCH_SORT_FIELDS = set(job_repo.SORTABLE_COLUMNS) | {"relevance"}
LIST_SORT_FIELDS = set(job_repo.SORTABLE_COLUMNS)
EMPLOYER_JOB_STATUSES = ("all", "active", "inactive")


def is_expired(job: Job, now: datetime | None = None) -> bool:
    """True iff an application deadline is set and already passed."""
    return job.is_expired(now)


def normalize_tags(tags: list[str] | None) -> list[str]:
    return [t.strip().lower() for t in (tags or []) if t and t.strip()]


def _salary_fields(salary: SalaryRange | None) -> dict:
    if salary is None or (salary.min is None and salary.max is None):
        return {"salary_min": None, "salary_max": None, "salary_currency": None, "salary_period": None}
    if salary.min is not None and salary.max is not None and salary.min > salary.max:
        raise ValidationError(
            "Minimum salary cannot be greater than maximum salary",
            errors=[{"field": "salary", "message": "min must be less than or equal to max"}],
        )
    return {
        "salary_min": salary.min,
        "salary_max": salary.max,
        "salary_currency": salary.currency or "USD",
        "salary_period": salary.period or "yearly",
    }


def _check_deadline(deadline: datetime | None) -> datetime | None:
    if deadline is None:
        return None
    deadline = as_utc(deadline)
    if deadline <= utcnow():
        raise ValidationError(
            "Application deadline must be in the future",
            errors=[{"field": "applicationDeadline", "message": "must be in the future"}],
        )
    return deadline


def _requirements_fields(requirements) -> dict:
    return {
        "experience_min": requirements.experience.min or 0,
        "experience_max": requirements.experience.max,
        "education": requirements.education,
        "skills": [s.strip() for s in requirements.skills if s.strip()],
    }


def create_job(db: Session, employer_id: str, data: JobCreate) -> Job:
    employer = user_repo.get_by_id(db, employer_id)
    if not employer or employer.role != ROLE_EMPLOYER:
        raise ForbiddenError("Only employers can post jobs")

    job = Job(
        id=generate_id(),
        employer_id=employer_id,
        title=data.title.strip(),
        description=data.description.strip(),
        company=data.company.strip(),
        location=data.location.strip(),
        job_type=data.job_type,
        work_mode=data.work_mode,
        benefits=[b.strip() for b in data.benefits if b.strip()],
        application_deadline=_check_deadline(data.application_deadline),
        is_active=True,
        is_featured=False,
        applications_count=0,
        views_count=0,
        **_salary_fields(data.salary),
        **_requirements_fields(data.requirements),
    )
    job.set_tags(normalize_tags(data.tags))
    job = job_repo.add(db, job)
    logger.info("Job created: id=%s employer=%s title=%s", job.id, employer_id, job.title)
    return job


def get_owned_job(db: Session, job_id: str, employer_id: str, action: str = "update") -> Job:
    job = job_repo.get_by_id(db, job_id)
    if not job:
        raise NotFoundError("Job not found")
    if job.employer_id != employer_id:
        raise ForbiddenError(f"Access denied. You can only {action} your own jobs.")
    return job


def get_active_job(db: Session, job_id: str) -> Job:
    job = job_repo.get_by_id(db, job_id)
    if not job:
        raise NotFoundError("Job not found")
    if not job.is_active:
        raise NotFoundError("Job is no longer available")
    return job


def update_job(db: Session, job_id: str, employer_id: str, patch: JobUpdate) -> Job:
    """Apply only the fields present in `patch`; salary is re-validated whenever it is sent."""
    job = get_owned_job(db, job_id, employer_id, action="update")
    changes = patch.model_dump(exclude_unset=True)

    for field in ("title", "description", "company", "location"):
        if field in changes and changes[field] is not None:
            setattr(job, field, changes[field].strip())
    for field in ("job_type", "work_mode", "is_active"):
        if field in changes and changes[field] is not None:
            setattr(job, field, changes[field])
    if "salary" in changes:
        for column, value in _salary_fields(patch.salary).items():
            setattr(job, column, value)
    if "requirements" in changes and patch.requirements is not None:
        for column, value in _requirements_fields(patch.requirements).items():
            setattr(job, column, value)
    if "benefits" in changes:
        job.benefits = [b.strip() for b in (patch.benefits or []) if b.strip()]
    if "tags" in changes:
        job.set_tags(normalize_tags(patch.tags))
    if "application_deadline" in changes:
        job.application_deadline = _check_deadline(patch.application_deadline)

    job = job_repo.save(db, job)
    logger.info("Job updated: id=%s fields=%s", job.id, ",".join(sorted(changes)))
    return job


def delete_job(db: Session, job_id: str, employer_id: str) -> Job:
    """Soft delete. Existing applications are left untouched."""
    job = get_owned_job(db, job_id, employer_id, action="delete")
    job.is_active = False
    job = job_repo.save(db, job)
    logger.info("Job deactivated: id=%s employer=%s", job.id, employer_id)
    return job


def search(
    db: Session,
    query: str | None = None,
    filters: JobFilters | None = None,
    *,
    page: int = 1,
    limit: int = 10,
    sort_by: str | None = None,
) -> tuple[list[Job], int]:
    """Active jobs matching `query` (any term, relevance-scored) and all filters. Returns (page, total)."""
    filters = filters or JobFilters()
    field, descending = parse_sort(sort_by, SEARCH_SORT_FIELDS)
    q, relevance = job_repo.build_search_query(
        db,
        job_repo.search_terms(query),
        location=filters.location,
        work_mode=filters.work_mode,
        job_type=filters.job_type,
        min_salary=filters.min_salary,
        max_salary=filters.max_salary,
        experience=filters.experience,
        tags=filters.tags,
    )
    order_by = job_repo.order_clauses(field, descending, relevance)
    return job_repo.paginate(q, order_by, offset_for(page, limit), limit)


def list_employer_jobs(
    db: Session,
    employer_id: str,
    *,
    status: str = "all",
    page: int = 1,
    limit: int = 10,
    sort_by: str | None = None,
) -> tuple[list[Job], int]:
    if status not in EMPLOYER_JOB_STATUSES:
        raise ValidationError(f"Status must be one of: {', '.join(EMPLOYER_JOB_STATUSES)}")
    field, descending = parse_sort(sort_by, LIST_SORT_FIELDS)
    q = job_repo.employer_jobs_query(db, employer_id, status)
    return job_repo.paginate(q, job_repo.order_clauses(field, descending), offset_for(page, limit), limit)


def list_featured(db: Session, limit: int = 6) -> list[Job]:
    return job_repo.list_featured(db, limit)


def increment_applications(db: Session, job_id: str) -> bool:
    """Bump applications_count once. Failures are logged and swallowed."""
    try:
        job_repo.increment_applications(db, job_id)
        return True
    except Exception:
        db.rollback()
        logger.exception("Failed to increment applications count for job=%s", job_id)
        return False


def increment_views(db: Session, job_id: str) -> bool:
    try:
        job_repo.increment_views(db, job_id)
        return True
    except Exception:
        db.rollback()
        logger.exception("Failed to increment views for job=%s", job_id)
        return False


def record_views(job_ids: list[str]) -> None:
    """Background task: bump view counters on a fresh session after the response is sent."""
    if not job_ids:
        return
    db = SessionLocal()
    try:
        for job_id in job_ids:
            increment_views(db, job_id)
    finally:
        db.close()
