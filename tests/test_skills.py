from datetime import timedelta

from devhub.database import SessionLocal
from devhub.models.skills import Skill
from devhub.utils.dates import utc_now


def _create(client, headers, **overrides):
    payload = {"name": "Python", "category": "backend", "proficiencyLevel": 4, **overrides}
    response = client.post("/api/skills", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]["skill"]


def test_create_skill_defaults(client, user) -> None:
    skill = _create(client, user["headers"], yearsOfExperience=2)
    assert skill["name"] == "Python"
    assert skill["proficiencyLabel"] == "Advanced"
    assert skill["experienceLevel"] == "2 years"
    assert skill["freshness"] == "Recently used"
    assert skill["endorsements"] == 0
    assert skill["isActive"] is True
    assert skill["lastUsed"] is not None


def test_duplicate_skill_name_per_user(client, register_user) -> None:
    first = register_user()
    second = register_user()
    _create(client, first["headers"])

    duplicate = client.post(
        "/api/skills",
        json={"name": "Python", "category": "tools", "proficiencyLevel": 2},
        headers=first["headers"],
    )
    assert duplicate.status_code == 400
    assert duplicate.json() == {"success": False, "message": "You already have a skill with this name"}

    # Another user may own a skill with the same name.
    _create(client, second["headers"])

    with SessionLocal() as db:
        assert db.query(Skill).filter(Skill.name == "Python").count() == 2


def test_rename_to_existing_name_is_rejected(client, user) -> None:
    _create(client, user["headers"])
    other = _create(client, user["headers"], name="Go")

    response = client.put(f"/api/skills/{other['id']}", json={"name": "Python"}, headers=user["headers"])
    assert response.status_code == 400
    assert response.json()["message"] == "You already have a skill with this name"

    response = client.put(
        f"/api/skills/{other['id']}",
        json={"proficiencyLevel": 5, "isActive": False, "category": None},
        headers=user["headers"],
    )
    assert response.status_code == 200
    skill = response.json()["data"]["skill"]
    assert skill["proficiencyLevel"] == 5
    assert skill["isActive"] is False
    assert skill["category"] == "backend"


def test_skill_validation(client, user) -> None:
    response = client.post(
        "/api/skills",
        json={"name": "Rust", "category": "systems", "proficiencyLevel": 6},
        headers=user["headers"],
    )
    assert response.status_code == 400
    fields = {e["field"] for e in response.json()["errors"]}
    assert fields == {"category", "proficiencyLevel"}


def test_list_skills_stats_and_filters(client, user) -> None:
    _create(client, user["headers"], name="React", category="frontend", proficiencyLevel=5)
    _create(client, user["headers"], name="Vue", category="frontend", proficiencyLevel=3)
    _create(client, user["headers"], name="Python", category="backend", proficiencyLevel=4)

    data = client.get("/api/skills", headers=user["headers"]).json()["data"]
    assert [s["name"] for s in data["skills"]] == ["React", "Python", "Vue"]
    assert data["stats"]["total"] == 3
    assert data["stats"]["averageProficiency"] == 4
    assert data["stats"]["expertSkills"] == 1
    assert data["stats"]["advancedSkills"] == 1
    assert data["stats"]["intermediateSkills"] == 1
    assert data["categoryStats"][0] == {
        "category": "frontend",
        "count": 2,
        "averageProficiency": 4,
        "totalEndorsements": 0,
    }

    frontend = client.get("/api/skills", params={"category": "frontend", "sort": "name"}, headers=user["headers"]).json()["data"]
    assert [s["name"] for s in frontend["skills"]] == ["React", "Vue"]

    strong = client.get("/api/skills", params={"minProficiency": 4}, headers=user["headers"]).json()["data"]
    assert {s["name"] for s in strong["skills"]} == {"React", "Python"}


def test_category_route(client, user) -> None:
    _create(client, user["headers"], name="React", category="frontend", proficiencyLevel=3)
    _create(client, user["headers"], name="Svelte", category="frontend", proficiencyLevel=5)

    data = client.get("/api/skills/category/frontend", headers=user["headers"]).json()["data"]
    assert data["count"] == 2
    assert [s["name"] for s in data["skills"]] == ["Svelte", "React"]

    invalid = client.get("/api/skills/category/quantum", headers=user["headers"])
    assert invalid.status_code == 400
    assert invalid.json()["message"] == "Invalid category"


def test_available_skills_excludes_owned(client, user) -> None:
    _create(client, user["headers"], name="React", category="frontend")

    response = client.get("/api/skills/available", headers=user["headers"])
    assert response.status_code == 200
    names = {s["name"] for s in response.json()["data"]["skills"]}
    assert "React" not in names
    assert "Vue.js" in names


def test_endorse_and_analytics(client, user) -> None:
    react = _create(client, user["headers"], name="React", category="frontend", proficiencyLevel=5)
    _create(client, user["headers"], name="Go", category="backend", proficiencyLevel=2)

    for expected in (1, 2):
        response = client.post(f"/api/skills/{react['id']}/endorse", headers=user["headers"])
        assert response.json()["data"] == {"endorsements": expected}

    with SessionLocal() as db:
        go = db.query(Skill).filter(Skill.name == "Go").one()
        go.last_used = utc_now() - timedelta(days=400)
        db.commit()

    analytics = client.get("/api/skills/analytics", headers=user["headers"]).json()["data"]["analytics"]
    assert analytics["topEndorsedSkills"][0]["name"] == "React"
    assert len(analytics["topEndorsedSkills"]) == 1
    assert {b["freshness"]: b["count"] for b in analytics["skillFreshness"]} == {"Recent": 1, "Stale": 1}
    assert [b["proficiencyLevel"] for b in analytics["proficiencyBreakdown"]] == [5, 2]


def test_skill_not_found_and_delete(client, register_user) -> None:
    owner = register_user()
    other = register_user()
    skill = _create(client, owner["headers"])

    missing = client.get(f"/api/skills/{skill['id']}", headers=other["headers"])
    assert missing.status_code == 404
    assert missing.json()["message"] == "Skill not found"

    deleted = client.delete(f"/api/skills/{skill['id']}", headers=owner["headers"])
    assert deleted.status_code == 200
    assert client.get(f"/api/skills/{skill['id']}", headers=owner["headers"]).status_code == 404


def test_envelope_omits_unset_message(client, user) -> None:
    body = client.get("/api/skills", headers=user["headers"]).json()
    assert body["success"] is True
    assert "message" not in body
    assert body["data"]["skills"] == []
