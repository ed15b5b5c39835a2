"""
Load sample employers, job seekers, jobs and applications for local development.
Applications go through the tracker so job counters stay consistent.
Safe to re-run: users that already exist (by email) are reused and their jobs are not re-posted.

Usage: python -m hireme.scripts.seed [--password Passw0rd]
"""
import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from hireme.core.errors import ConflictError
from hireme.database import SessionLocal, ensure_tables_exist
from hireme.repos.user_repo import create as create_user, get_by_email
from hireme.schemas.job import JobCreate
from hireme.services.application_tracker import apply
from hireme.services.job_catalog import create_job

DEFAULT_PASSWORD = "Passw0rd"

EMPLOYERS = [
    {"name": "Ada Hiring", "email": "hiring@acme.example", "company": "Acme Corp", "location": "Berlin"},
    {"name": "Lin Recruiter", "email": "jobs@globex.example", "company": "Globex", "location": "Remote"},
]

SEEKERS = [
    {
        "name": "Sam Seeker",
        "email": "sam@example.com",
        "location": "Lisbon",
        "skills": ["python", "fastapi", "postgresql"],
    },
    {
        "name": "Robin Dev",
        "email": "robin@example.com",
        "location": "Berlin",
        "skills": ["react", "typescript"],
    },
]

JOBS = {
    "hiring@acme.example": [
        {
            "title": "Senior Python Engineer",
            "description": "Build and operate the backend services behind our hiring platform. "
            "You will own APIs, data models and the search pipeline.",
            "company": "Acme Corp",
            "location": "Berlin",
            "jobType": "full-time",
            "workMode": "hybrid",
            "salary": {"min": 80000, "max": 110000, "currency": "EUR", "period": "yearly"},
            "requirements": {"experience": {"min": 5, "max": 8}, "education": "bachelor", "skills": ["python", "sql"]},
            "benefits": ["Remote Fridays", "Learning budget"],
            "tags": ["Python", "Backend", "FastAPI"],
        },
        {
            "title": "Frontend Developer",
            "description": "Shape the candidate-facing web app. Work closely with design and "
            "ship accessible, fast React interfaces every week.",
            "company": "Acme Corp",
            "location": "Berlin",
            "jobType": "contract",
            "workMode": "on-site",
            "salary": {"min": 50, "max": 70, "currency": "EUR", "period": "hourly"},
            "requirements": {"experience": {"min": 2}, "skills": ["react", "typescript"]},
            "tags": ["react", "frontend"],
        },
    ],
    "jobs@globex.example": [
        {
            "title": "Data Engineer",
            "description": "Design batch and streaming pipelines that feed our analytics "
            "warehouse. Python, SQL and a taste for reliable data required.",
            "company": "Globex",
            "location": "Remote",
            "jobType": "full-time",
            "workMode": "remote",
            "salary": {"min": 90000, "max": 120000, "currency": "USD", "period": "yearly"},
            "requirements": {"experience": {"min": 3}, "education": "master", "skills": ["python", "spark"]},
            "tags": ["python", "data"],
        },
    ],
}

COVER_LETTER = (
    "I have followed your team's work for a while and my recent projects match this "
    "role closely. I would love to talk about how I can help."
)


def _ensure_user(db, password: str, role: str, **fields):
    user = get_by_email(db, fields["email"])
    if user:
        return user, False
    return create_user(db, password=password, role=role, **fields), True


def seed(db, password: str = DEFAULT_PASSWORD) -> dict:
    counts = {"users": 0, "jobs": 0, "applications": 0}
    posted = []
    for employer_data in EMPLOYERS:
        employer, created = _ensure_user(db, password, "employer", **employer_data)
        counts["users"] += int(created)
        if not created:
            continue
        for job_data in JOBS.get(employer.email, []):
            posted.append(create_job(db, employer.id, JobCreate.model_validate(job_data)))
            counts["jobs"] += 1

    seekers = []
    for seeker_data in SEEKERS:
        seeker, created = _ensure_user(db, password, "jobseeker", **seeker_data)
        counts["users"] += int(created)
        seekers.append(seeker)

    for seeker in seekers:
        for job in posted:
            try:
                apply(db, seeker.id, job.id, COVER_LETTER)
                counts["applications"] += 1
            except ConflictError:
                continue
    return counts


def main():
    parser = argparse.ArgumentParser(description="Seed the database with sample HireMe data.")
    parser.add_argument("--password", default=DEFAULT_PASSWORD, help="Password for every sample user")
    args = parser.parse_args()

    ensure_tables_exist()
    db = SessionLocal()
    try:
        counts = seed(db, password=args.password)
    finally:
        db.close()
    print(
        f"Seeded {counts['users']} user(s), {counts['jobs']} job(s), "
        f"{counts['applications']} application(s)."
    )


if __name__ == "__main__":
    main()
