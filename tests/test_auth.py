# tests/test_auth.py
from __future__ import annotations

from tests.conftest import PASSWORD


def test_register_returns_user_id(client):
    resp = client.post(
        "/api/auth/register",
        json={"email": "New@Example.com", "password": PASSWORD, "name": "  New  "},
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["message"] == "User created successfully"
    assert body["userId"]


def test_register_duplicate_email_is_conflict(client, auth):
    resp = client.post(
        "/api/auth/register",
        json={"email": "BEAVER@example.com", "password": PASSWORD, "name": "Again"},
    )
    assert resp.status_code == 409
    assert resp.json()["detail"] == "User already exists"


def test_register_rejects_short_password_and_bad_email(client):
    resp = client.post(
        "/api/auth/register", json={"email": "a@example.com", "password": "short", "name": "A"}
    )
    assert resp.status_code == 422
    resp = client.post(
        "/api/auth/register", json={"email": "not-an-email", "password": PASSWORD, "name": "A"}
    )
    assert resp.status_code == 422


def test_login_wrong_password(client, auth):
    resp = client.post(
        "/api/auth/login", json={"email": "beaver@example.com", "password": "wrong-password"}
    )
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid email or password"


def test_login_returns_user_brief(client, auth):
    resp = client.post("/api/auth/login", json={"email": "beaver@example.com", "password": PASSWORD})
    body = resp.json()
    assert body["token"]
    assert body["expiresAt"]
    assert body["user"]["email"] == "beaver@example.com"
    assert body["user"]["name"] == "Beaver"


def test_protected_route_requires_token(client):
    assert client.get("/api/tasks").status_code == 401
    resp = client.get("/api/tasks", headers={"Authorization": "Bearer nope"})
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Unauthorized"


def test_logout_invalidates_token(client, auth):
    assert client.post("/api/auth/logout", headers=auth).status_code == 204
    assert client.get("/api/user/profile", headers=auth).status_code == 401


def test_profile_has_default_settings(client, auth):
    resp = client.get("/api/user/profile", headers=auth)
    assert resp.status_code == 200
    user = resp.json()["user"]
    assert user["email"] == "beaver@example.com"
    assert user["settings"] == {
        "theme": "system",
        "emailNotifications": True,
        "pushNotifications": True,
    }


def test_update_profile_and_settings(client, auth):
    resp = client.put(
        "/api/user/profile",
        headers=auth,
        json={
            "name": "Busy Beaver",
            "email": "busy@example.com",
            "image": "",
            "settings": {"theme": "dark", "emailNotifications": False, "pushNotifications": True},
        },
    )
    assert resp.status_code == 200, resp.text
    user = resp.json()["user"]
    assert user["name"] == "Busy Beaver"
    assert user["email"] == "busy@example.com"
    assert user["image"] is None
    assert user["settings"]["theme"] == "dark"
    assert user["settings"]["emailNotifications"] is False

    # Настройки сохраняются между запросами
    again = client.get("/api/user/profile", headers=auth).json()["user"]
    assert again["settings"]["theme"] == "dark"


def test_update_profile_validation(client, auth, other_auth):
    resp = client.put(
        "/api/user/profile", headers=auth, json={"name": "B", "email": "beaver@example.com"}
    )
    assert resp.status_code == 422

    resp = client.put(
        "/api/user/profile",
        headers=auth,
        json={"name": "Beaver", "email": "beaver@example.com", "image": "ftp://x"},
    )
    assert resp.status_code == 422

    resp = client.put(
        "/api/user/profile", headers=auth, json={"name": "Beaver", "email": "otter@example.com"}
    )
    assert resp.status_code == 409


def test_change_password(client, auth):
    resp = client.put(
        "/api/user/password",
        headers=auth,
        json={"currentPassword": "wrong-password", "newPassword": "another-pass"},
    )
    assert resp.status_code == 400

    resp = client.put(
        "/api/user/password",
        headers=auth,
        json={"currentPassword": PASSWORD, "newPassword": "another-pass"},
    )
    assert resp.status_code == 200

    # Текущая сессия остается рабочей
    assert client.get("/api/user/profile", headers=auth).status_code == 200

    old = client.post("/api/auth/login", json={"email": "beaver@example.com", "password": PASSWORD})
    assert old.status_code == 401
    new = client.post(
        "/api/auth/login", json={"email": "beaver@example.com", "password": "another-pass"}
    )
    assert new.status_code == 200


def test_service_routes(client):
    assert client.get("/ping").json()["message"] == "pong"
    health = client.get("/health")
    assert health.status_code == 200
    assert health.json()["status"] == "healthy"
    info = client.get("/api/info").json()
    assert info["pomodoro_defaults"]["FOCUS"] == 25

    missing = client.get("/api/nothing-here")
    assert missing.status_code == 404
    assert missing.json()["detail"] == "API endpoint not found"
