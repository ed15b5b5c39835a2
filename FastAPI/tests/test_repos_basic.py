import pytest
from sqlalchemy.exc import IntegrityError

import hireme.repos.application_repo as arepo
import hireme.repos.job_repo as jrepo
import hireme.repos.user_repo as urepo
from conftest import make_job
from hireme.core.errors import ConflictError, ValidationError
from hireme.models.application import Application


class _Query:
    def __init__(self, data):
        self.data = data

    def filter(self, *args, **kwargs):
        return self

    def first(self):
        return self.data


class _DB:
    def __init__(self, data=None, fail_commit=False):
        self.data = data
        self.fail_commit = fail_commit
        self.added = []
        self.committed = 0
        self.rolled_back = 0

    def query(self, model):
        return _Query(self.data)

    def add(self, obj):
        self.added.append(obj)

    def commit(self):
        if self.fail_commit:
            raise IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed"))
        self.committed += 1

    def rollback(self):
        self.rolled_back += 1

    def refresh(self, obj):
        return None


def test_user_repo_create_normalizes_and_drops_employer_fields(monkeypatch):
    db = _DB(data=None)
    monkeypatch.setattr(urepo, "generate_id", lambda: "u1")
    monkeypatch.setattr(urepo, "hash_password", lambda p: "hashed")
    user = urepo.create(
        db,
        name=" Sam ",
        email="  Sam@Example.COM ",
        password="secret12",
        role="jobseeker",
        company="Ignored Inc",
        skills=["python", " "],
    )
    assert user.id == "u1"
    assert user.email == "sam@example.com"
    assert user.name == "Sam"
    assert user.company is None
    assert user.skills == ["python"]
    assert user.password_hash == "hashed"
    assert db.committed == 1


def test_user_repo_create_rejects_bad_role_and_missing_company():
    with pytest.raises(ValidationError):
        urepo.create(_DB(), name="X", email="x@example.com", password="secret12", role="admin")
    with pytest.raises(ValidationError):
        urepo.create(_DB(), name="X", email="x@example.com", password="secret12", role="employer", company="  ")


def test_user_repo_create_duplicate_email(monkeypatch):
    monkeypatch.setattr(urepo, "hash_password", lambda p: "hashed")
    existing = type("U", (), {"id": "u0"})()
    with pytest.raises(ConflictError):
        urepo.create(_DB(data=existing), name="X", email="x@example.com", password="secret12", role="jobseeker")

    racing = _DB(data=None, fail_commit=True)
    with pytest.raises(ConflictError):
        urepo.create(racing, name="X", email="x@example.com", password="secret12", role="jobseeker")
    assert racing.rolled_back == 1


def test_user_repo_profile_password_and_deactivate(db, employer, seeker, monkeypatch):
    monkeypatch.setattr(urepo, "hash_password", lambda p: f"hashed:{p}")

    updated = urepo.update_profile(db, seeker.id, name="Samantha", company="Nope", skills=["go"])
    assert updated.name == "Samantha"
    assert updated.company is None
    assert updated.skills == ["go"]
    assert updated.role == "jobseeker"

    boss = urepo.update_profile(db, employer.id, company="Acme GmbH", website="https://acme.example")
    assert boss.company == "Acme GmbH"
    with pytest.raises(ValidationError):
        urepo.update_profile(db, employer.id, company=" ")
    db.rollback()

    assert urepo.update_profile(db, "missing", name="Nobody") is None
    assert urepo.set_password(db, seeker.id, "newpass1").password_hash == "hashed:newpass1"
    assert urepo.touch_last_login(db, seeker).last_login is not None
    assert urepo.deactivate(db, seeker.id).is_active is False
    assert urepo.get_by_email(db, "SAM@example.com").id == seeker.id


def test_application_repo_insert_translates_integrity_error():
    db = _DB(fail_commit=True)
    application = Application(id="a1", job_id="j1", applicant_id="u1", employer_id="e1", cover_letter="x" * 60)
    with pytest.raises(ConflictError):
        arepo.insert(db, application)
    assert db.rolled_back == 1


def test_job_repo_search_terms():
    assert jrepo.search_terms(None) == []
    assert jrepo.search_terms("   ") == []
    assert jrepo.search_terms("Python, FastAPI python") == ["python", "fastapi"]


def test_job_repo_location_filter_escapes_wildcards(db, employer):
    make_job(db, employer, location="100% Remote")
    make_job(db, employer, location="1000 Remote")
    q, _ = jrepo.build_search_query(db, [], location="100%")
    assert [j.location for j in q.all()] == ["100% Remote"]


def test_job_repo_increment_missing_job_is_noop(db):
    assert jrepo.increment_views(db, "missing") == 0
