from datetime import timedelta

from devhub.database import SessionLocal
from devhub.models.user import User
from devhub.utils.jwt_handler import create_access_token

from tests.helpers import mark_verified, set_suspended


REGISTER_PAYLOAD = {
    "email": "Tester@Example.com",
    "password": "SecretPass123",
    "firstName": "Test",
    "lastName": "User",
}


def test_register_sets_cookie_and_hides_password(client) -> None:
    response = client.post("/api/auth/register", json=REGISTER_PAYLOAD)
    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "User registered successfully"

    user = body["data"]["user"]
    assert user["email"] == "tester@example.com"
    assert user["username"] == "tester"
    assert user["role"] == "user"
    assert user["fullName"] == "Test User"
    assert "password" not in user
    assert body["data"]["token"]
    assert body["data"]["refreshToken"]
    assert response.cookies.get("token")
    assert response.cookies.get("refreshToken")


def test_duplicate_registration_is_rejected(client) -> None:
    assert client.post("/api/auth/register", json=REGISTER_PAYLOAD).status_code == 201

    again = client.post("/api/auth/register", json={**REGISTER_PAYLOAD, "email": "tester@example.com"})
    assert again.status_code == 400
    assert again.json() == {"success": False, "message": "User already exists with this email"}

    with SessionLocal() as db:
        assert db.query(User).filter(User.email == "tester@example.com").count() == 1


def test_register_derives_unique_usernames(client) -> None:
    first = client.post("/api/auth/register", json={**REGISTER_PAYLOAD, "email": "sam@one.com"})
    second = client.post("/api/auth/register", json={**REGISTER_PAYLOAD, "email": "sam@two.com"})
    assert first.json()["data"]["user"]["username"] == "sam"
    assert second.json()["data"]["user"]["username"] == "sam2"

    taken = client.post("/api/auth/register", json={**REGISTER_PAYLOAD, "email": "other@two.com", "username": "Sam"})
    assert taken.status_code == 400
    assert taken.json()["message"] == "Username is already taken"


def test_register_validation_errors(client) -> None:
    response = client.post(
        "/api/auth/register",
        json={"email": "not-an-email", "password": "123", "firstName": "A", "lastName": "B"},
    )
    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Validation error"
    fields = {e["field"]: e["message"] for e in body["errors"]}
    assert fields["email"] == "Please provide a valid email address"
    assert "password" in fields


def test_admin_email_gets_admin_role(client) -> None:
    response = client.post("/api/auth/register", json={**REGISTER_PAYLOAD, "email": "admin@example.com"})
    assert response.status_code == 201
    assert response.json()["data"]["user"]["role"] == "admin"


def test_register_ignores_role_fields(client) -> None:
    response = client.post("/api/auth/register", json={**REGISTER_PAYLOAD, "role": "admin", "isVerified": True})
    assert response.status_code == 201
    user = response.json()["data"]["user"]
    assert user["role"] == "user"
    assert user["isVerified"] is False


def test_login_requires_verification(client) -> None:
    client.post("/api/auth/register", json=REGISTER_PAYLOAD)
    login = {"email": REGISTER_PAYLOAD["email"], "password": REGISTER_PAYLOAD["password"]}

    response = client.post("/api/auth/login", json=login)
    assert response.status_code == 401
    assert response.json()["message"] == "Account not verified. Please verify your email."

    mark_verified("tester@example.com")
    response = client.post("/api/auth/login", json=login)
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Login successful"
    assert body["data"]["token"]
    assert body["data"]["refreshToken"]
    assert body["data"]["user"]["lastLogin"] is not None


def test_login_with_wrong_password(client) -> None:
    client.post("/api/auth/register", json=REGISTER_PAYLOAD)
    mark_verified("tester@example.com")

    response = client.post("/api/auth/login", json={"email": REGISTER_PAYLOAD["email"], "password": "wrong-password"})
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid credentials"

    unknown = client.post("/api/auth/login", json={"email": "nobody@example.com", "password": "whatever"})
    assert unknown.status_code == 401
    assert unknown.json()["message"] == "Invalid credentials"


def test_refresh_token_reissues_pair(client) -> None:
    registered = client.post("/api/auth/register", json=REGISTER_PAYLOAD).json()["data"]
    client.cookies.clear()

    response = client.post("/api/auth/refresh-token", json={"refreshToken": registered["refreshToken"]})
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Tokens refreshed successfully"
    assert body["data"]["token"]
    assert body["data"]["refreshToken"]

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {body['data']['token']}"})
    assert me.status_code == 200
    assert me.json()["data"]["user"]["email"] == "tester@example.com"


def test_refresh_token_from_cookie(client) -> None:
    client.post("/api/auth/register", json=REGISTER_PAYLOAD)
    response = client.post("/api/auth/refresh-token")
    assert response.status_code == 200


def test_refresh_token_errors(client) -> None:
    registered = client.post("/api/auth/register", json=REGISTER_PAYLOAD).json()["data"]
    client.cookies.clear()

    missing = client.post("/api/auth/refresh-token", json={})
    assert missing.status_code == 401
    assert missing.json()["message"] == "Refresh token required"

    # An access token is not accepted where a refresh token is required.
    wrong_kind = client.post("/api/auth/refresh-token", json={"refreshToken": registered["token"]})
    assert wrong_kind.status_code == 401
    assert wrong_kind.json()["message"] == "Invalid refresh token"


def test_refresh_token_cannot_authorize_requests(client) -> None:
    registered = client.post("/api/auth/register", json=REGISTER_PAYLOAD).json()["data"]
    client.cookies.clear()

    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {registered['refreshToken']}"})
    assert response.status_code == 401
    assert response.json()["message"] == "Not authorized, token failed"


def test_protected_route_token_errors(client) -> None:
    registered = client.post("/api/auth/register", json=REGISTER_PAYLOAD).json()["data"]
    client.cookies.clear()

    no_token = client.get("/api/auth/me")
    assert no_token.status_code == 401
    assert no_token.json() == {"success": False, "message": "Not authorized, no token"}

    garbage = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert garbage.status_code == 401
    assert garbage.json()["message"] == "Not authorized, token failed"

    expired = create_access_token(registered["user"]["id"], "tester@example.com", expires_delta=timedelta(seconds=-10))
    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {expired}"})
    assert response.status_code == 401
    assert response.json()["message"] == "Token expired"

    orphan = create_access_token(9999, "ghost@example.com")
    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {orphan}"})
    assert response.status_code == 401
    assert response.json()["message"] == "Not authorized, user not found"


def test_suspended_user_is_rejected(client) -> None:
    registered = client.post("/api/auth/register", json=REGISTER_PAYLOAD).json()["data"]
    mark_verified("tester@example.com")
    set_suspended("tester@example.com")
    headers = {"Authorization": f"Bearer {registered['token']}"}

    me = client.get("/api/auth/me", headers=headers)
    assert me.status_code == 403
    assert me.json()["message"] == "Account is suspended"

    projects = client.get("/api/projects", headers=headers)
    assert projects.status_code == 403

    login = client.post("/api/auth/login", json={"email": REGISTER_PAYLOAD["email"], "password": REGISTER_PAYLOAD["password"]})
    assert login.status_code == 403


def test_check_email(client) -> None:
    client.post("/api/auth/register", json=REGISTER_PAYLOAD)

    found = client.post("/api/auth/check-email", json={"email": " TESTER@example.com "})
    assert found.status_code == 200
    assert found.json()["data"] == {"exists": True, "email": "tester@example.com"}

    absent = client.post("/api/auth/check-email", json={"email": "new@example.com"})
    assert absent.json()["data"]["exists"] is False

    missing = client.post("/api/auth/check-email", json={})
    assert missing.status_code == 400
    assert missing.json()["message"] == "Email is required"

    invalid = client.post("/api/auth/check-email", json={"email": "nope"})
    assert invalid.status_code == 400
    assert invalid.json()["message"] == "Please provide a valid email address"


def test_logout_clears_cookies(client) -> None:
    client.post("/api/auth/register", json=REGISTER_PAYLOAD)
    assert client.get("/api/auth/me").status_code == 200

    response = client.post("/api/auth/logout")
    assert response.status_code == 200
    assert response.json()["message"] == "Logged out successfully"
    assert "token=" in response.headers.get("set-cookie", "")

    client.cookies.clear()
    assert client.get("/api/auth/me").status_code == 401
