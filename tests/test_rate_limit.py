import pytest

from devhub.config import settings
from devhub.utils.rate_limit import limiter, reset_limits


@pytest.fixture()
def limits_on():
    limiter.enabled = True
    reset_limits()
    yield
    reset_limits()
    limiter.enabled = False


def test_auth_endpoints_are_rate_limited(client, limits_on) -> None:
    for _ in range(30):
        response = client.post("/api/auth/check-email", json={"email": "someone@example.com"})
        assert response.status_code == 200

    blocked = client.post("/api/auth/check-email", json={"email": "someone@example.com"})
    assert blocked.status_code == 429
    body = blocked.json()
    assert body["success"] is False
    assert body["message"] == "Too many authentication attempts, please try again later."
    assert body["retryAfter"] > 0
    assert blocked.headers["Retry-After"] == str(body["retryAfter"])


def test_general_limit_covers_api_routes_only(client, limits_on, monkeypatch) -> None:
    monkeypatch.setattr(settings, "rate_limit_general", "3/minute")

    statuses = [client.get("/api/news").status_code for _ in range(3)]
    assert statuses == [200, 200, 200]

    blocked = client.get("/api/skills")
    assert blocked.status_code == 429
    body = blocked.json()
    assert body["message"] == "Too many requests from this IP, please try again later."
    assert 0 < body["retryAfter"] <= 60
    assert blocked.headers["Retry-After"] == str(body["retryAfter"])

    assert client.get("/api/test").status_code == 429
    for _ in range(5):
        assert client.get("/health/").status_code == 200
        assert client.get("/").status_code == 200
