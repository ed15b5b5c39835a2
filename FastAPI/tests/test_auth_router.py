from datetime import datetime, timezone

import hireme.routers.auth as auth_mod
from conftest import StubUser
from hireme.core.errors import ConflictError

REGISTER_BODY = {
    "name": "Sam Seeker",
    "email": "sam@example.com",
    "password": "secret12",
    "role": "jobseeker",
}


def test_register_success_returns_token_and_profile(monkeypatch, anon_client):
    created = StubUser(id="new-1", email="sam@example.com", created_at=datetime(2026, 1, 1, tzinfo=timezone.utc))
    monkeypatch.setattr(auth_mod, "create_user", lambda db, **kwargs: created)
    monkeypatch.setattr(auth_mod, "touch_last_login", lambda db, user: user)
    monkeypatch.setattr(auth_mod, "create_access_token", lambda uid, role=None: f"token-{uid}-{role}")
    resp = anon_client.post("/auth/register", json=REGISTER_BODY)
    assert resp.status_code == 201
    body = resp.json()
    assert body["success"] is True
    assert body["data"]["accessToken"] == "token-new-1-jobseeker"
    assert body["data"]["user"]["email"] == "sam@example.com"
    assert "passwordHash" not in body["data"]["user"]


def test_register_duplicate_email_is_conflict(monkeypatch, anon_client):
    def _dup(db, **kwargs):
        raise ConflictError("User with this email already exists")

    monkeypatch.setattr(auth_mod, "create_user", _dup)
    resp = anon_client.post("/auth/register", json=REGISTER_BODY)
    assert resp.status_code == 409
    assert resp.json() == {"success": False, "message": "User with this email already exists"}


def test_register_employer_without_company_is_400(anon_client):
    resp = anon_client.post("/auth/register", json={**REGISTER_BODY, "role": "employer"})
    assert resp.status_code == 400
    assert resp.json()["success"] is False
    assert resp.json()["errors"]


def test_register_returns_500_on_unexpected_failure(monkeypatch, anon_client):
    monkeypatch.setattr(auth_mod, "create_user", lambda db, **kwargs: (_ for _ in ()).throw(RuntimeError("db")))
    resp = anon_client.post("/auth/register", json=REGISTER_BODY)
    assert resp.status_code == 500
    assert resp.json()["message"] == "Registration failed"


def test_login_invalid_credentials(monkeypatch, anon_client):
    monkeypatch.setattr(auth_mod, "get_by_email", lambda db, email: None)
    resp = anon_client.post("/auth/login", json={"email": "x@example.com", "password": "bad"})
    assert resp.status_code == 401
    assert resp.json()["success"] is False


def test_login_wrong_password(monkeypatch, anon_client):
    monkeypatch.setattr(auth_mod, "get_by_email", lambda db, email: StubUser())
    monkeypatch.setattr(auth_mod, "verify_password", lambda plain, hashed: False)
    resp = anon_client.post("/auth/login", json={"email": "seeker@example.com", "password": "bad"})
    assert resp.status_code == 401


def test_login_deactivated_user(monkeypatch, anon_client):
    monkeypatch.setattr(auth_mod, "get_by_email", lambda db, email: StubUser(is_active=False))
    resp = anon_client.post("/auth/login", json={"email": "seeker@example.com", "password": "secret12"})
    assert resp.status_code == 401
    assert "deactivated" in resp.json()["message"]


def test_login_success(monkeypatch, anon_client):
    user = StubUser(role="employer", company="Acme")
    monkeypatch.setattr(auth_mod, "get_by_email", lambda db, email: user)
    monkeypatch.setattr(auth_mod, "verify_password", lambda plain, hashed: hashed == "hashed-password")
    monkeypatch.setattr(auth_mod, "touch_last_login", lambda db, u: u)
    monkeypatch.setattr(auth_mod, "create_access_token", lambda uid, role=None: "normal-token")
    resp = anon_client.post("/auth/login", json={"email": "seeker@example.com", "password": "secret12"})
    assert resp.status_code == 200
    assert resp.json()["data"]["accessToken"] == "normal-token"
    assert resp.json()["data"]["user"]["company"] == "Acme"


def test_get_me(client):
    resp = client.get("/auth/me")
    assert resp.status_code == 200
    assert resp.json()["data"]["user"]["role"] == "jobseeker"


def test_me_requires_token(anon_client):
    resp = anon_client.get("/auth/me")
    assert resp.status_code == 401
    assert resp.json() == {"success": False, "message": "Access denied. No token provided."}


def test_update_profile_passes_only_sent_fields(monkeypatch, client):
    seen = {}

    def _update(db, user_id, **changes):
        seen.update(changes)
        return StubUser(name="Samantha")

    monkeypatch.setattr(auth_mod, "update_user_profile", _update)
    resp = client.put("/auth/profile", json={"name": "Samantha"})
    assert resp.status_code == 200
    assert seen == {"name": "Samantha"}
    assert resp.json()["data"]["user"]["name"] == "Samantha"


def test_update_profile_returns_500_on_failure(monkeypatch, client):
    monkeypatch.setattr(auth_mod, "update_user_profile", lambda db, uid, **kw: (_ for _ in ()).throw(RuntimeError("db")))
    resp = client.put("/auth/profile", json={"name": "Samantha"})
    assert resp.status_code == 500


def test_change_password_wrong_current(monkeypatch, client):
    monkeypatch.setattr(auth_mod, "verify_password", lambda plain, hashed: False)
    resp = client.put("/auth/change-password", json={"currentPassword": "old12345", "newPassword": "new12345"})
    assert resp.status_code == 400
    assert resp.json()["message"] == "Current password is incorrect"


def test_change_password_success(monkeypatch, client):
    calls = []
    monkeypatch.setattr(auth_mod, "verify_password", lambda plain, hashed: True)
    monkeypatch.setattr(auth_mod, "set_password", lambda db, uid, pw: calls.append((uid, pw)))
    resp = client.put("/auth/change-password", json={"currentPassword": "old12345", "newPassword": "new12345"})
    assert resp.status_code == 200
    assert calls == [("seeker-1", "new12345")]


def test_deactivate_account(monkeypatch, client):
    calls = []
    monkeypatch.setattr(auth_mod, "deactivate", lambda db, uid: calls.append(uid))
    resp = client.put("/auth/deactivate")
    assert resp.status_code == 200
    assert calls == ["seeker-1"]


def test_user_stats(monkeypatch, client):
    monkeypatch.setattr(auth_mod, "get_by_id", lambda db, uid: None)
    monkeypatch.setattr(
        auth_mod,
        "user_stats",
        lambda db, user: {
            "joined_date": None,
            "last_login": None,
            "jobseeker": {
                "total_applications": 3,
                "pending_applications": 1,
                "interview_scheduled_applications": 1,
            },
        },
    )
    resp = client.get("/auth/stats")
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["jobseeker"]["totalApplications"] == 3
    assert data["profile"]["id"] == "seeker-1"
