import pytest

from devhub.database import SessionLocal
from devhub.models.project import Project
from devhub.models.skills import Skill
from devhub.models.user import User


LOCATION = {"latitude": 52.52, "longitude": 13.405, "city": "Berlin", "country": "Germany"}


def _seed_portfolio(client, headers) -> None:
    client.post("/api/projects", json={"title": "Done", "description": "d", "status": "completed"}, headers=headers)
    client.post("/api/projects", json={"title": "Wip", "description": "w", "status": "in-progress"}, headers=headers)
    client.post("/api/skills", json={"name": "Go", "category": "backend", "proficiencyLevel": 5}, headers=headers)
    client.post("/api/skills", json={"name": "CSS", "category": "frontend", "proficiencyLevel": 3}, headers=headers)


@pytest.mark.parametrize("base", ["/api/user", "/api/dashboard"])
def test_profile_is_served_under_both_prefixes(client, user, base) -> None:
    _seed_portfolio(client, user["headers"])

    response = client.get(base, headers=user["headers"])
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["user"]["email"] == user["email"]
    assert data["stats"]["projects"]["totalProjects"] == 2
    assert data["stats"]["projects"]["completedProjects"] == 1
    assert data["stats"]["skills"]["totalSkills"] == 2
    assert data["stats"]["skills"]["expertSkills"] == 1
    assert len(data["recentActivity"]["projects"]) == 2
    assert data["recentActivity"]["skills"][0]["name"] == "Go"


def test_update_profile_and_location(client, register_user) -> None:
    me = register_user()
    register_user(email="taken@example.com")

    taken = client.put("/api/user", json={"username": "Taken"}, headers=me["headers"])
    assert taken.status_code == 400
    assert taken.json()["message"] == "Username is already taken"

    response = client.put(
        "/api/user",
        json={"username": "NewName", "bio": "Hello", "location": LOCATION},
        headers=me["headers"],
    )
    assert response.status_code == 200
    assert response.json()["message"] == "Profile updated successfully"
    user = response.json()["data"]["user"]
    assert user["username"] == "newname"
    assert user["bio"] == "Hello"
    assert user["location"] == LOCATION

    cleared = client.put("/api/user", json={"location": {"city": "Nowhere"}}, headers=me["headers"])
    assert cleared.json()["data"]["user"]["location"] is None

    bad = client.put("/api/user", json={"location": {"latitude": 120, "longitude": 0}}, headers=me["headers"])
    assert bad.status_code == 400


def test_change_password(client, user) -> None:
    mismatch = client.put(
        "/api/user/password",
        json={"currentPassword": user["password"], "newPassword": "newpass1", "confirmPassword": "other"},
        headers=user["headers"],
    )
    assert mismatch.status_code == 400
    assert mismatch.json()["message"] == "Password confirmation does not match"

    wrong = client.put(
        "/api/user/password",
        json={"currentPassword": "nope", "newPassword": "newpass1", "confirmPassword": "newpass1"},
        headers=user["headers"],
    )
    assert wrong.status_code == 400
    assert wrong.json()["message"] == "Current password is incorrect"

    ok = client.put(
        "/api/user/password",
        json={"currentPassword": user["password"], "newPassword": "newpass1", "confirmPassword": "newpass1"},
        headers=user["headers"],
    )
    assert ok.status_code == 200
    assert ok.json()["message"] == "Password changed successfully"

    from tests.helpers import mark_verified

    mark_verified(user["email"])
    login = client.post("/api/auth/login", json={"email": user["email"], "password": "newpass1"})
    assert login.status_code == 200


def test_delete_account_cascades(client, user, project) -> None:
    client.post("/api/skills", json={"name": "Go", "category": "backend", "proficiencyLevel": 5}, headers=user["headers"])

    missing = client.request("DELETE", "/api/user", json={}, headers=user["headers"])
    assert missing.status_code == 400
    assert missing.json()["message"] == "Password required to delete account"

    wrong = client.request("DELETE", "/api/user", json={"password": "nope"}, headers=user["headers"])
    assert wrong.status_code == 400
    assert wrong.json()["message"] == "Invalid password"

    response = client.request("DELETE", "/api/user", json={"password": user["password"]}, headers=user["headers"])
    assert response.status_code == 200
    assert response.json()["message"] == "Account deleted successfully"

    with SessionLocal() as db:
        assert db.get(User, user["id"]) is None
        assert db.query(Project).filter(Project.user_id == user["id"]).count() == 0
        assert db.query(Skill).filter(Skill.user_id == user["id"]).count() == 0

    after = client.get("/api/user", headers=user["headers"])
    assert after.status_code == 401
    assert after.json()["message"] == "Not authorized, user not found"


def test_dashboard(client, user) -> None:
    _seed_portfolio(client, user["headers"])

    data = client.get("/api/dashboard/dashboard", headers=user["headers"]).json()["data"]
    assert data["user"] is None
    assert data["overview"] == {"totalProjects": 2, "totalSkills": 2, "totalViews": 0, "totalLikes": 0}
    assert {s["status"]: s["count"] for s in data["projectStats"]} == {"completed": 1, "in-progress": 1}
    assert {s["category"]: s["count"] for s in data["skillStats"]} == {"backend": 1, "frontend": 1}
    assert [s["name"] for s in data["topSkills"]] == ["Go", "CSS"]
    assert data["activityData"][0]["projectsCreated"] == 2


def test_views_of_other_users(client, register_user) -> None:
    owner = register_user(email="owner@example.com")
    _seed_portfolio(client, owner["headers"])
    viewer = register_user()

    dashboard = client.get("/api/user/OWNER/dashboard", headers=viewer["headers"]).json()["data"]
    assert dashboard["user"]["username"] == "owner"
    assert dashboard["overview"]["totalProjects"] == 2

    profile = client.get("/api/user/owner/profile", headers=viewer["headers"]).json()["data"]
    assert "email" not in profile["user"]
    assert profile["recentActivity"]["skills"] == []

    skills = client.get("/api/user/owner/skills", headers=viewer["headers"]).json()["data"]
    assert [s["name"] for s in skills["skills"]] == ["Go", "CSS"]
    assert skills["stats"]["total"] == 2

    projects = client.get("/api/user/owner/projects", headers=viewer["headers"]).json()["data"]
    assert {p["title"] for p in projects["projects"]} == {"Done", "Wip"}
    assert projects["stats"]["completed"] == 1

    missing = client.get("/api/user/ghost/profile", headers=viewer["headers"])
    assert missing.status_code == 404
    assert missing.json()["message"] == "User with username 'ghost' not found"


def test_directory_endpoints(client, register_user) -> None:
    located = register_user(email="berlin@example.com", first_name="Bea")
    register_user(email="nowhere@example.com")
    client.put("/api/user", json={"bio": "x" * 150, "location": LOCATION}, headers=located["headers"])

    map_users = client.get("/api/user/map-users", headers=located["headers"]).json()["data"]["users"]
    assert [u["username"] for u in map_users] == ["berlin"]
    assert "email" not in map_users[0]
    assert map_users[0]["memberSince"]

    everyone = client.get("/api/user/all-users", headers=located["headers"]).json()
    assert everyone["message"] == "All users retrieved successfully"
    assert everyone["data"]["total"] == 2

    search = client.get("/api/user/search-users", params={"query": "GERM"}, headers=located["headers"]).json()["data"]
    assert search["count"] == 1
    assert search["query"] == "GERM"
    assert search["users"][0]["bio"] == "x" * 100 + "..."

    none = client.get("/api/user/search-users", params={"query": "nowhere"}, headers=located["headers"]).json()["data"]
    assert none["users"] == []

    for literal in ("%", "_", "r_i"):
        escaped = client.get("/api/user/search-users", params={"query": literal}, headers=located["headers"]).json()["data"]
        assert escaped["count"] == 0, literal
