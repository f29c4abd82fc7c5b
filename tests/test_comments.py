from devhub.database import SessionLocal
from devhub.models.comment import Comment


def _comment(client, project_id, headers, **payload):
    payload.setdefault("content", "Looks great")
    return client.post(f"/api/comments/project/{project_id}", json=payload, headers=headers)


def test_create_comment_and_reply(client, user, project) -> None:
    created = _comment(client, project["id"], user["headers"], rating=5)
    assert created.status_code == 201
    body = created.json()
    assert body["message"] == "Comment created successfully"
    assert body["data"]["rating"] == 5
    assert body["data"]["isReply"] is False
    assert body["data"]["user"]["username"] == user["user"]["username"]

    reply = _comment(client, project["id"], user["headers"], content="Thanks!", parentCommentId=body["data"]["id"])
    assert reply.status_code == 201
    assert reply.json()["message"] == "Reply created successfully"
    assert reply.json()["data"]["parentCommentId"] == body["data"]["id"]


def test_cannot_reply_to_a_reply(client, user, project) -> None:
    parent = _comment(client, project["id"], user["headers"]).json()["data"]
    reply = _comment(client, project["id"], user["headers"], parentCommentId=parent["id"]).json()["data"]

    nested = _comment(client, project["id"], user["headers"], parentCommentId=reply["id"])
    assert nested.status_code == 400
    assert nested.json()["message"] == "Cannot reply to a reply. Please reply to the original comment."


def test_unknown_project_or_parent(client, user, project) -> None:
    missing_project = _comment(client, 9999, user["headers"])
    assert missing_project.status_code == 404
    assert missing_project.json()["message"] == "Project not found"

    missing_parent = _comment(client, project["id"], user["headers"], parentCommentId=9999)
    assert missing_parent.status_code == 404
    assert missing_parent.json()["message"] == "Parent comment not found"


def test_comment_requires_authentication(client, user, project) -> None:
    client.cookies.clear()
    response = client.post(f"/api/comments/project/{project['id']}", json={"content": "Hi"})
    assert response.status_code == 401
    assert response.json()["message"] == "Not authorized, no token"


def test_project_comments_are_public_and_threaded(client, register_user, user, project) -> None:
    other = register_user()
    first = _comment(client, project["id"], other["headers"], content="First", rating=4).json()["data"]
    second = _comment(client, project["id"], other["headers"], content="Second", rating=2).json()["data"]
    _comment(client, project["id"], user["headers"], content="Reply A", parentCommentId=first["id"])
    _comment(client, project["id"], user["headers"], content="Reply B", parentCommentId=first["id"])

    client.cookies.clear()
    response = client.get(f"/api/comments/project/{project['id']}")
    assert response.status_code == 200
    data = response.json()["data"]

    assert [c["id"] for c in data["comments"]] == [second["id"], first["id"]]
    threaded = data["comments"][1]
    assert threaded["replyCount"] == 2
    assert [r["content"] for r in threaded["replies"]] == ["Reply A", "Reply B"]
    assert data["pagination"] == {"page": 1, "limit": 10, "total": 2, "pages": 1, "hasNext": False, "hasPrev": False}
    assert data["stats"] == {"totalComments": 2, "averageRating": 3.0, "totalRatings": 2}

    paged = client.get(f"/api/comments/project/{project['id']}", params={"limit": 1, "page": 2}).json()["data"]
    assert [c["id"] for c in paged["comments"]] == [first["id"]]
    assert paged["pagination"]["hasPrev"] is True


def test_update_permissions(client, register_user, admin, project, user) -> None:
    comment = _comment(client, project["id"], user["headers"]).json()["data"]
    stranger = register_user()

    forbidden = client.put(f"/api/comments/{comment['id']}", json={"content": "Hijack"}, headers=stranger["headers"])
    assert forbidden.status_code == 403
    assert forbidden.json()["message"] == "Not authorized to update this comment"

    blank = client.put(f"/api/comments/{comment['id']}", json={"content": "   "}, headers=user["headers"])
    assert blank.status_code == 400
    assert blank.json()["message"] == "Comment content cannot be empty"

    # Authors cannot change visibility.
    own = client.put(f"/api/comments/{comment['id']}", json={"content": "Edited", "isPublic": False}, headers=user["headers"])
    assert own.status_code == 200
    assert own.json()["data"]["content"] == "Edited"
    assert own.json()["data"]["isPublic"] is True

    moderated = client.put(f"/api/comments/{comment['id']}", json={"isPublic": False}, headers=admin["headers"])
    assert moderated.status_code == 200
    assert moderated.json()["data"]["isPublic"] is False

    hidden = client.get(f"/api/comments/project/{project['id']}").json()["data"]
    assert hidden["comments"] == []


def test_delete_removes_direct_replies_only(client, register_user, user, project) -> None:
    other = register_user()
    parent = _comment(client, project["id"], user["headers"]).json()["data"]
    sibling = _comment(client, project["id"], other["headers"], content="Unrelated").json()["data"]
    _comment(client, project["id"], other["headers"], content="r1", parentCommentId=parent["id"])
    _comment(client, project["id"], other["headers"], content="r2", parentCommentId=parent["id"])

    forbidden = client.delete(f"/api/comments/{parent['id']}", headers=other["headers"])
    assert forbidden.status_code == 403
    assert forbidden.json()["message"] == "Not authorized to delete this comment"

    response = client.delete(f"/api/comments/{parent['id']}", headers=user["headers"])
    assert response.status_code == 200
    assert response.json()["message"] == "Comment deleted successfully along with 2 replies"
    assert response.json()["data"] == {"deletedCount": 3}

    with SessionLocal() as db:
        remaining = db.query(Comment).all()
        assert [c.id for c in remaining] == [sibling["id"]]

    missing = client.delete(f"/api/comments/{parent['id']}", headers=user["headers"])
    assert missing.status_code == 404
    assert missing.json()["message"] == "Comment not found"


def test_recent_comments(client, user, project) -> None:
    for i in range(6):
        _comment(client, project["id"], user["headers"], content=f"Comment {i}")

    response = client.get("/api/comments/recent", headers=user["headers"])
    assert response.status_code == 200
    comments = response.json()["data"]["comments"]
    assert len(comments) == 5
    assert comments[0]["content"] == "Comment 5"
    assert comments[0]["project"] == {"id": project["id"], "title": project["title"]}
