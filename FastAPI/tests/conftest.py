import os
from dataclasses import dataclass, field
from datetime import datetime, timezone

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["REDIS_URL"] = ""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import hireme.main as main_mod
from hireme.core.rate_limiter import InMemoryRateLimiter
from hireme.core.security import generate_id
from hireme.database import Base, get_db
from hireme.dependencies import get_current_user, get_optional_user
from hireme.main import app
from hireme.models import Application, Job, User


@dataclass
class StubUser:
    id: str = "seeker-1"
    name: str = "Sam Seeker"
    email: str = "seeker@example.com"
    role: str = "jobseeker"
    company: str | None = None
    website: str | None = None
    phone: str | None = None
    location: str | None = None
    bio: str | None = None
    skills: list = field(default_factory=list)
    resume: str | None = None
    is_active: bool = True
    password_hash: str = "hashed-password"
    last_login: object | None = None
    created_at: object | None = None


@pytest.fixture(autouse=True)
def fresh_rate_limiter(monkeypatch):
    monkeypatch.setattr(main_mod, "rate_limiter", InMemoryRateLimiter())


@pytest.fixture
def seeker_user() -> StubUser:
    return StubUser()


@pytest.fixture
def employer_user() -> StubUser:
    return StubUser(id="employer-1", name="Erin Employer", email="employer@example.com", role="employer", company="Acme")


def _client_for(user):
    def _db_override():
        yield object()

    app.dependency_overrides[get_db] = _db_override
    if user is None:
        app.dependency_overrides[get_optional_user] = lambda: None
    else:
        app.dependency_overrides[get_current_user] = lambda: user
        app.dependency_overrides[get_optional_user] = lambda: user
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def client(seeker_user: StubUser):
    yield _client_for(seeker_user)
    app.dependency_overrides.clear()


@pytest.fixture
def employer_client(employer_user: StubUser):
    yield _client_for(employer_user)
    app.dependency_overrides.clear()


@pytest.fixture
def anon_client():
    yield _client_for(None)
    app.dependency_overrides.clear()


# --- SQLite-backed fixtures for repo/service tests ---


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=eng)
    yield eng
    Base.metadata.drop_all(bind=eng)
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


def make_user(db, *, role="jobseeker", email=None, company=None, **fields) -> User:
    user = User(
        id=generate_id(),
        name=fields.pop("name", "Test User"),
        email=email or f"{generate_id()[:8]}@example.com",
        password_hash=fields.pop("password_hash", "not-a-real-hash"),
        role=role,
        company=company if company is not None else ("Acme" if role == "employer" else None),
        skills=fields.pop("skills", []),
        is_active=fields.pop("is_active", True),
        **fields,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_job(db, employer, *, tags=(), **fields) -> Job:
    values = {
        "id": generate_id(),
        "employer_id": employer.id,
        "title": "Python Developer",
        "description": "Build APIs and data pipelines for a growing product team. " * 2,
        "company": employer.company or "Acme",
        "location": "Berlin",
        "job_type": "full-time",
        "work_mode": "on-site",
        "is_active": True,
    }
    values.update(fields)
    job = Job(**values)
    job.set_tags([t.lower() for t in tags])
    db.add(job)
    db.commit()
    db.refresh(job)
    return job


def make_application(db, job, applicant, **fields) -> Application:
    values = {
        "id": generate_id(),
        "job_id": job.id,
        "applicant_id": applicant.id,
        "employer_id": job.employer_id,
        "cover_letter": "x" * 60,
        "status": "pending",
        "is_active": True,
    }
    values.update(fields)
    application = Application(**values)
    db.add(application)
    db.commit()
    db.refresh(application)
    return application


@pytest.fixture
def employer(db) -> User:
    return make_user(db, role="employer", email="boss@acme.example", name="Erin Employer")


@pytest.fixture
def other_employer(db) -> User:
    return make_user(db, role="employer", email="boss@globex.example", company="Globex")


@pytest.fixture
def seeker(db) -> User:
    return make_user(db, email="sam@example.com", name="Sam Seeker", resume="https://files.example/sam.pdf")


@pytest.fixture
def other_seeker(db) -> User:
    return make_user(db, email="robin@example.com", name="Robin Dev")


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)
