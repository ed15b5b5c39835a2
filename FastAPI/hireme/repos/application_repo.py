import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from hireme.core.errors import ConflictError
from hireme.models.application import Application

logger = logging.getLogger(__name__)

SORTABLE_COLUMNS = {
    "created_at": Application.created_at,
    "updated_at": Application.updated_at,
    "status": Application.status,
    "reviewed_at": Application.reviewed_at,
    "expected_salary_amount": Application.expected_salary_amount,
    "available_from": Application.available_from,
}


def get_by_id(db: Session, application_id: str) -> Application | None:
    return (
        db.query(Application)
        .options(joinedload(Application.job), joinedload(Application.applicant))
        .filter(Application.id == application_id)
        .first()
    )


def insert(db: Session, application: Application) -> Application:
    """
    Persist a new application. The (job_id, applicant_id) unique constraint is
    the only duplicate guard, so concurrent applies fail here atomically.
    """
    db.add(application)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.info(
            "Duplicate application rejected: job=%s applicant=%s",
            application.job_id,
            application.applicant_id,
        )
        raise ConflictError("You have already applied to this job") from e
    db.refresh(application)
    return application


def save(db: Session, application: Application) -> Application:
    db.commit()
    db.refresh(application)
    return application


def active_query(db: Session, *, job_id: str | None = None, applicant_id: str | None = None, status: str | None = None):
    q = db.query(Application).filter(Application.is_active.is_(True))
    if job_id is not None:
        q = q.filter(Application.job_id == job_id)
    if applicant_id is not None:
        q = q.filter(Application.applicant_id == applicant_id)
    if status:
        q = q.filter(Application.status == status)
    return q


def paginate(q, field: str, descending: bool, offset: int, limit: int) -> tuple[list[Application], int]:
    column = SORTABLE_COLUMNS[field]
    order = [column.desc() if descending else column.asc()]
    if field != "created_at":
        order.append(Application.created_at.desc())
    total = q.order_by(None).count()
    items = (
        q.options(joinedload(Application.job), joinedload(Application.applicant))
        .order_by(*order)
        .offset(offset)
        .limit(limit)
        .all()
    )
    return items, total


def status_counts_for_employer(db: Session, employer_id: str) -> list[tuple[str, int]]:
    rows = (
        db.query(Application.status, func.count(Application.id))
        .filter(Application.employer_id == employer_id, Application.is_active.is_(True))
        .group_by(Application.status)
        .order_by(Application.status)
        .all()
    )
    return [(status, int(count)) for status, count in rows]


def count_active(db: Session, *, employer_id: str | None = None, applicant_id: str | None = None, status: str | None = None) -> int:
    q = db.query(func.count(Application.id)).filter(Application.is_active.is_(True))
    if employer_id is not None:
        q = q.filter(Application.employer_id == employer_id)
    if applicant_id is not None:
        q = q.filter(Application.applicant_id == applicant_id)
    if status:
        q = q.filter(Application.status == status)
    return q.scalar() or 0
