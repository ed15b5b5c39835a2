import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from hireme.config import settings
from hireme.core.pagination import pagination_meta
from hireme.database import get_db
from hireme.dependencies import get_current_employer, get_current_jobseeker, get_current_user
from hireme.models.user import User
from hireme.schemas.application import (
    ApplicationCreate,
    ApplicationStats,
    ApplicationStatusUpdate,
    application_to_response,
)
from hireme.schemas.common import PaginationMeta, envelope
from hireme.schemas.job import JobSummary
from hireme.services.application_tracker import (
    apply,
    get_application,
    list_by_applicant,
    list_for_employer_job,
    statistics,
    update_status,
    withdraw,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/applications", tags=["applications"])


@router.post("", status_code=status.HTTP_201_CREATED)
def apply_to_job(
    body: ApplicationCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_jobseeker),
):
    application = apply(
        db,
        user.id,
        body.job_id,
        body.cover_letter,
        expected_salary=body.expected_salary,
        available_from=body.available_from,
    )
    return envelope(
        "Application submitted successfully",
        {"application": application_to_response(application)},
    )


@router.get("/user")
def my_applications(
    app_status: str = Query("all", alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    sort_by: str = Query("-createdAt", alias="sortBy"),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_jobseeker),
):
    items, total = list_by_applicant(db, user.id, page=page, limit=limit, status=app_status, sort_by=sort_by)
    return envelope(
        "Applications retrieved successfully",
        {
            "applications": [application_to_response(a, include_applicant=False) for a in items],
            "pagination": PaginationMeta(**pagination_meta(page, limit, total)),
        },
    )


@router.delete("/{application_id}/withdraw")
def withdraw_application(
    application_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_jobseeker),
):
    withdraw(db, application_id, user.id)
    return envelope("Application withdrawn successfully")


@router.get("/job/{job_id}")
def job_applications(
    job_id: str,
    app_status: str = Query("all", alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    sort_by: str = Query("-createdAt", alias="sortBy"),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_employer),
):
    job, items, total = list_for_employer_job(
        db, job_id, user.id, page=page, limit=limit, status=app_status, sort_by=sort_by
    )
    return envelope(
        "Job applications retrieved successfully",
        {
            "applications": [application_to_response(a, include_job=False) for a in items],
            "job": JobSummary.model_validate(job),
            "pagination": PaginationMeta(**pagination_meta(page, limit, total)),
        },
    )


@router.put("/{application_id}/status")
def change_status(
    application_id: str,
    body: ApplicationStatusUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_employer),
):
    application = update_status(db, application_id, user.id, body.status, body.notes)
    return envelope(
        "Application status updated successfully",
        {"application": application_to_response(application)},
    )


@router.get("/employer/stats")
def application_stats(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_employer),
):
    return envelope(
        "Application statistics retrieved successfully",
        ApplicationStats(**statistics(db, user.id)),
    )


@router.get("/{application_id}")
def application_detail(
    application_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    application = get_application(db, application_id, user.id)
    return envelope("Application retrieved successfully", {"application": application_to_response(application)})
