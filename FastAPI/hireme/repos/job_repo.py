import logging
import re

from sqlalchemy import case, func, or_, update
from sqlalchemy.orm import Session

from hireme.models.job import Job, JobTag

logger = logging.getLogger(__name__)

SORTABLE_COLUMNS = {
    "created_at": Job.created_at,
    "updated_at": Job.updated_at,
    "title": Job.title,
    "company": Job.company,
    "salary_min": Job.salary_min,
    "salary_max": Job.salary_max,
    "applications_count": Job.applications_count,
    "views_count": Job.views_count,
    "application_deadline": Job.application_deadline,
}

# Per-term weights for relevance ranking.
TITLE_WEIGHT = 3
TAG_WEIGHT = 2
COMPANY_WEIGHT = 2
DESCRIPTION_WEIGHT = 1

_TERM_SPLIT = re.compile(r"[\s,]+")


def search_terms(query: str | None) -> list[str]:
    if not query or not query.strip():
        return []
    seen = []
    for term in _TERM_SPLIT.split(query.strip().lower()):
        if term and term not in seen:
            seen.append(term)
    return seen


def get_by_id(db: Session, job_id: str) -> Job | None:
    return db.query(Job).filter(Job.id == job_id).first()


def add(db: Session, job: Job) -> Job:
    db.add(job)
    db.commit()
    db.refresh(job)
    return job


def save(db: Session, job: Job) -> Job:
    db.commit()
    db.refresh(job)
    return job


def _term_matches(term: str):
    return (
        Job.title.icontains(term, autoescape=True),
        Job.tag_rows.any(JobTag.tag.icontains(term, autoescape=True)),
        Job.company.icontains(term, autoescape=True),
        Job.description.icontains(term, autoescape=True),
    )


def build_search_query(
    db: Session,
    terms: list[str],
    *,
    location: str | None = None,
    work_mode: str | None = None,
    job_type: str | None = None,
    min_salary: int | None = None,
    max_salary: int | None = None,
    experience: int | None = None,
    tags: list[str] | None = None,
):
    """
    Active jobs matching any search term and every given filter.
    Returns (query, relevance_expression); relevance is None without terms.
    """
    q = db.query(Job).filter(Job.is_active.is_(True))
    relevance = None

    if terms:
        matches = []
        scores = []
        weights = (TITLE_WEIGHT, TAG_WEIGHT, COMPANY_WEIGHT, DESCRIPTION_WEIGHT)
        for term in terms:
            conds = _term_matches(term)
            matches.extend(conds)
            scores.extend(case((cond, weight), else_=0) for cond, weight in zip(conds, weights))
        q = q.filter(or_(*matches))
        relevance = sum(scores[1:], scores[0])

    if location and location.strip():
        q = q.filter(Job.location.icontains(location.strip(), autoescape=True))
    if work_mode:
        q = q.filter(Job.work_mode == work_mode)
    if job_type:
        q = q.filter(Job.job_type == job_type)

    # Any-overlap salary semantics: either bound matching is enough.
    salary_conds = []
    if min_salary:
        salary_conds.append(Job.salary_max >= min_salary)
    if max_salary:
        salary_conds.append(Job.salary_min <= max_salary)
    if salary_conds:
        q = q.filter(or_(*salary_conds))

    if experience:
        q = q.filter(Job.experience_min <= experience)

    wanted = [t.strip().lower() for t in (tags or []) if t and t.strip()]
    if wanted:
        q = q.filter(Job.tag_rows.any(JobTag.tag.in_(wanted)))

    return q, relevance


def order_clauses(field: str, descending: bool, relevance=None) -> list:
    if field == "relevance":
        if relevance is None:
            return [Job.created_at.desc()]
        return [relevance.desc(), Job.created_at.desc()]
    column = SORTABLE_COLUMNS[field]
    clauses = [column.desc() if descending else column.asc()]
    if field != "created_at":
        clauses.append(Job.created_at.desc())
    return clauses


def paginate(q, order_by: list, offset: int, limit: int) -> tuple[list[Job], int]:
    # Count and page are separate reads and may drift under concurrent writes.
    total = q.order_by(None).count()
    items = q.order_by(*order_by).offset(offset).limit(limit).all()
    return items, total


def employer_jobs_query(db: Session, employer_id: str, status: str = "all"):
    q = db.query(Job).filter(Job.employer_id == employer_id)
    if status == "active":
        q = q.filter(Job.is_active.is_(True))
    elif status == "inactive":
        q = q.filter(Job.is_active.is_(False))
    return q


def list_featured(db: Session, limit: int = 6) -> list[Job]:
    return (
        db.query(Job)
        .filter(Job.is_active.is_(True), Job.is_featured.is_(True))
        .order_by(Job.created_at.desc())
        .limit(limit)
        .all()
    )


def _increment(db: Session, job_id: str, column) -> int:
    # Single UPDATE ... SET n = n + 1: no ORM validation, no read-modify-write.
    result = db.execute(
        update(Job)
        .where(Job.id == job_id)
        .values({column: column + 1})
        .execution_options(synchronize_session=False)
    )
    db.commit()
    return result.rowcount or 0


def increment_views(db: Session, job_id: str) -> int:
    return _increment(db, job_id, Job.views_count)


def increment_applications(db: Session, job_id: str) -> int:
    return _increment(db, job_id, Job.applications_count)


def count_for_employer(db: Session, employer_id: str, is_active: bool | None = None) -> int:
    q = db.query(func.count(Job.id)).filter(Job.employer_id == employer_id)
    if is_active is not None:
        q = q.filter(Job.is_active.is_(is_active))
    return q.scalar() or 0


def counter_totals_for_employer(db: Session, employer_id: str) -> tuple[int, int]:
    """(sum of views_count, sum of applications_count) over all of the employer's jobs."""
    views, applications = (
        db.query(
            func.coalesce(func.sum(Job.views_count), 0),
            func.coalesce(func.sum(Job.applications_count), 0),
        )
        .filter(Job.employer_id == employer_id)
        .one()
    )
    return int(views or 0), int(applications or 0)


def recent_for_employer(db: Session, employer_id: str, limit: int = 5) -> list[Job]:
    return (
        db.query(Job)
        .filter(Job.employer_id == employer_id, Job.is_active.is_(True))
        .order_by(Job.created_at.desc())
        .limit(limit)
        .all()
    )
