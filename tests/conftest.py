from __future__ import annotations

import os
import tempfile
from typing import Any, Callable

import pytest
from fastapi.testclient import TestClient


def pytest_configure() -> None:
    # Ensure the SQLAlchemy engine is created against sqlite for tests.
    os.environ["DB_URL"] = "sqlite:///./test.db"
    os.environ["ORM_DB_URL"] = "sqlite:///./test.db"
    os.environ["ORM_USE_MYSQL"] = "false"
    os.environ["ADMIN_EMAILS"] = '["admin@example.com"]'

    # Ensure local .env cannot change auth or limiter behaviour in tests.
    os.environ["ENVIRONMENT"] = "test"
    os.environ["JWT_SECRET"] = "test-secret-key-for-devhub"
    os.environ["BCRYPT_ROUNDS"] = "4"
    os.environ["RATE_LIMIT_ENABLED"] = "false"
    os.environ["REQUIRE_EMAIL_VERIFICATION"] = "true"
    os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="devhub-uploads-")


@pytest.fixture()
def client() -> Any:
    from devhub.database import Base, engine
    from devhub.main import create_app

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    app = create_app()
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def register_user(client: TestClient) -> Callable[..., dict[str, Any]]:
    """Register an account and return its id, token and bearer headers."""

    counter = {"n": 0}

    def _register(email: str | None = None, password: str = "secret123", **extra: Any) -> dict[str, Any]:
        counter["n"] += 1
        email = email or f"dev{counter['n']}@example.com"
        payload = {
            "email": email,
            "password": password,
            "firstName": extra.pop("first_name", "Dev"),
            "lastName": extra.pop("last_name", f"Tester{counter['n']}"),
            **extra,
        }
        response = client.post("/api/auth/register", json=payload)
        assert response.status_code == 201, response.text
        data = response.json()["data"]
        return {
            "id": data["user"]["id"],
            "email": email,
            "password": password,
            "user": data["user"],
            "token": data["token"],
            "refresh_token": data["refreshToken"],
            "headers": {"Authorization": f"Bearer {data['token']}"},
        }

    return _register


@pytest.fixture()
def user(register_user: Callable[..., dict[str, Any]]) -> dict[str, Any]:
    return register_user()


@pytest.fixture()
def admin(register_user: Callable[..., dict[str, Any]]) -> dict[str, Any]:
    return register_user(email="admin@example.com", first_name="Ada", last_name="Admin")


@pytest.fixture()
def project(client: TestClient, user: dict[str, Any]) -> dict[str, Any]:
    response = client.post(
        "/api/projects",
        json={
            "title": "Portfolio",
            "description": "Personal portfolio site",
            "technologies": ["React", "FastAPI"],
            "status": "in-progress",
        },
        headers=user["headers"],
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]["project"]
