"""Read-side rollups over jobs and applications, computed per request."""

from sqlalchemy.orm import Session

from hireme.models.user import ROLE_EMPLOYER, User
from hireme.repos import application_repo, job_repo


def employer_overview(db: Session, employer_id: str) -> dict:
    return {
        "total_jobs": job_repo.count_for_employer(db, employer_id),
        "active_jobs": job_repo.count_for_employer(db, employer_id, is_active=True),
        "total_applications": application_repo.count_active(db, employer_id=employer_id),
    }


def seeker_overview(db: Session, applicant_id: str) -> dict:
    return {
        "total_applications": application_repo.count_active(db, applicant_id=applicant_id),
        "pending_applications": application_repo.count_active(db, applicant_id=applicant_id, status="pending"),
        "interview_scheduled_applications": application_repo.count_active(
            db, applicant_id=applicant_id, status="interview-scheduled"
        ),
    }


def employer_job_stats(db: Session, employer_id: str, recent_limit: int = 5) -> dict:
    """Dashboard numbers; totals come from the jobs' display counters."""
    total_views, total_applications = job_repo.counter_totals_for_employer(db, employer_id)
    total_jobs = job_repo.count_for_employer(db, employer_id)
    active_jobs = job_repo.count_for_employer(db, employer_id, is_active=True)
    return {
        "total_jobs": total_jobs,
        "active_jobs": active_jobs,
        "inactive_jobs": job_repo.count_for_employer(db, employer_id, is_active=False),
        "total_views": total_views,
        "total_applications": total_applications,
        "recent_jobs": job_repo.recent_for_employer(db, employer_id, limit=recent_limit),
    }


def user_stats(db: Session, user: User) -> dict:
    stats = {
        "joined_date": user.created_at,
        "last_login": user.last_login,
    }
    if user.role == ROLE_EMPLOYER:
        stats["employer"] = employer_overview(db, user.id)
    else:
        stats["jobseeker"] = seeker_overview(db, user.id)
    return stats
