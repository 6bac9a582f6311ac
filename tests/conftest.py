"""Pytest fixtures for Beaver Task"""
from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from beaver_task.app import create_app
from beaver_task.config import BeaverSettings

PASSWORD = "s3cret-pass"


@pytest.fixture()
def settings(tmp_path: Path) -> BeaverSettings:
    return BeaverSettings(
        ENVIRONMENT="testing",
        DEBUG=True,
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        LOGS_DIR=tmp_path / "logs",
        LOG_TO_FILE=False,
        LOG_LEVEL="WARNING",
        PASSWORD_HASH_ITERATIONS=1000,
        TIMER_TICK_SECONDS=0.01,
    )


@pytest.fixture()
def client(settings: BeaverSettings):
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client


def register_and_login(client: TestClient, email: str, name: str = "Beaver") -> dict:
    """Зарегистрировать пользователя и вернуть заголовки авторизации"""
    resp = client.post(
        "/api/auth/register",
        json={"email": email, "password": PASSWORD, "name": name},
    )
    assert resp.status_code == 201, resp.text
    resp = client.post("/api/auth/login", json={"email": email, "password": PASSWORD})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['token']}"}


@pytest.fixture()
def auth(client: TestClient) -> dict:
    return register_and_login(client, "beaver@example.com")


@pytest.fixture()
def other_auth(client: TestClient) -> dict:
    return register_and_login(client, "otter@example.com", name="Otter")
