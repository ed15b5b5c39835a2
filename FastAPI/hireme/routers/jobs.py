import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from hireme.config import settings
from hireme.core.errors import ValidationError
from hireme.core.pagination import pagination_meta
from hireme.database import get_db
from hireme.dependencies import get_current_employer, get_optional_user
from hireme.models.user import User
from hireme.schemas.common import PaginationMeta, envelope
from hireme.schemas.job import (
    EmployerJobStats,
    JobCreate,
    JobFilters,
    JobUpdate,
    RecentJob,
    job_to_response,
)
from hireme.services.job_catalog import (
    create_job,
    delete_job,
    get_active_job,
    list_employer_jobs,
    list_featured,
    record_views,
    search,
    update_job,
)
from hireme.services.statistics import employer_job_stats

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/jobs", tags=["jobs"])


def _split_tags(tags: str | None) -> list[str]:
    if not tags:
        return []
    return [t.strip().lower() for t in tags.split(",") if t.strip()]


@router.get("")
def list_jobs(
    background_tasks: BackgroundTasks,
    search_query: str = Query("", alias="search"),
    location: str | None = None,
    work_mode: str | None = Query(None, alias="workMode"),
    job_type: str | None = Query(None, alias="jobType"),
    min_salary: int | None = Query(None, alias="minSalary", ge=0),
    max_salary: int | None = Query(None, alias="maxSalary", ge=0),
    experience: int | None = Query(None, ge=0),
    tags: str | None = None,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    sort_by: str = Query("-createdAt", alias="sortBy"),
    db: Session = Depends(get_db),
    user: User | None = Depends(get_optional_user),
):
    """Search active jobs. Authenticated callers bump view counters for the returned page."""
    try:
        filters = JobFilters(
            location=location or None,
            work_mode=work_mode or None,
            job_type=job_type or None,
            min_salary=min_salary,
            max_salary=max_salary,
            experience=experience,
            tags=_split_tags(tags),
        )
    except PydanticValidationError as e:
        raise ValidationError(
            "Invalid search filters",
            errors=[{"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]} for err in e.errors()],
        ) from e
    jobs, total = search(db, search_query, filters, page=page, limit=limit, sort_by=sort_by)
    logger.debug("GET /jobs search=%r total=%d page=%d", search_query, total, page)
    if user is not None and jobs:
        background_tasks.add_task(record_views, [j.id for j in jobs])
    return envelope(
        "Jobs retrieved successfully",
        {
            "jobs": [job_to_response(j) for j in jobs],
            "pagination": PaginationMeta(**pagination_meta(page, limit, total)),
        },
    )


@router.get("/featured")
def featured_jobs(
    limit: int = Query(settings.featured_jobs_limit, ge=1, le=settings.max_page_size),
    db: Session = Depends(get_db),
):
    jobs = list_featured(db, limit)
    return envelope("Featured jobs retrieved successfully", {"jobs": [job_to_response(j) for j in jobs]})


@router.get("/employer/my-jobs")
def my_jobs(
    job_status: str = Query("all", alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    sort_by: str = Query("-createdAt", alias="sortBy"),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_employer),
):
    jobs, total = list_employer_jobs(db, user.id, status=job_status, page=page, limit=limit, sort_by=sort_by)
    return envelope(
        "Employer jobs retrieved successfully",
        {
            "jobs": [job_to_response(j, include_employer=False) for j in jobs],
            "pagination": PaginationMeta(**pagination_meta(page, limit, total)),
        },
    )


@router.get("/employer/stats")
def my_job_stats(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_employer),
):
    stats = employer_job_stats(db, user.id)
    stats["recent_jobs"] = [RecentJob.model_validate(j) for j in stats["recent_jobs"]]
    return envelope("Job statistics retrieved successfully", EmployerJobStats(**stats))


@router.get("/{job_id}")
def get_job(
    job_id: str,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    user: User | None = Depends(get_optional_user),
):
    job = get_active_job(db, job_id)
    if user is None or user.id != job.employer_id:
        background_tasks.add_task(record_views, [job.id])
    return envelope("Job retrieved successfully", {"job": job_to_response(job)})


@router.post("", status_code=status.HTTP_201_CREATED)
def post_job(
    body: JobCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_employer),
):
    job = create_job(db, user.id, body)
    return envelope("Job created successfully", {"job": job_to_response(job)})


@router.put("/{job_id}")
def put_job(
    job_id: str,
    body: JobUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_employer),
):
    job = update_job(db, job_id, user.id, body)
    return envelope("Job updated successfully", {"job": job_to_response(job)})


@router.delete("/{job_id}")
def remove_job(
    job_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_employer),
):
    delete_job(db, job_id, user.id)
    return envelope("Job deleted successfully")
