ARTICLE = {
    "title": "Hello, DevHub World!",
    "preview": "Short preview",
    "content": "# Body",
    "author": "Team",
}


def _create(client, headers, **overrides):
    response = client.post("/api/news", json={**ARTICLE, **overrides}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]["article"]


def test_admin_creates_article_with_slug(client, admin) -> None:
    article = _create(client, admin["headers"], published=True)
    assert article["slug"] == "hello-devhub-world"
    assert article["published"] is True
    assert article["publishedAt"] is not None

    duplicate = client.post("/api/news", json=ARTICLE, headers=admin["headers"])
    assert duplicate.status_code == 409
    assert duplicate.json()["message"] == "Article with this slug already exists"


def test_news_writes_require_admin(client, user) -> None:
    response = client.post("/api/news", json=ARTICLE, headers=user["headers"])
    assert response.status_code == 403
    assert response.json()["message"] == "Access denied. Required role: admin"

    client.cookies.clear()
    anonymous = client.post("/api/news", json=ARTICLE)
    assert anonymous.status_code == 401
    assert anonymous.json()["message"] == "Not authorized, no token"


def test_public_listing_only_shows_published(client, admin) -> None:
    _create(client, admin["headers"], title="First", published=True)
    _create(client, admin["headers"], title="Second", published=True)
    _create(client, admin["headers"], title="Draft")

    client.cookies.clear()
    data = client.get("/api/news").json()["data"]
    assert [a["slug"] for a in data["articles"]] == ["second", "first"]
    assert "content" not in data["articles"][0]
    assert data["pagination"] == {
        "currentPage": 1,
        "totalPages": 1,
        "totalCount": 2,
        "hasNextPage": False,
        "hasPrevPage": False,
    }

    latest = client.get("/api/news/latest", params={"limit": 1}).json()["data"]
    assert [a["slug"] for a in latest["articles"]] == ["second"]

    other = client.get("/api/news/second/other").json()["data"]
    assert [a["slug"] for a in other["articles"]] == ["first"]

    draft = client.get("/api/news/draft")
    assert draft.status_code == 404
    assert draft.json()["message"] == "Article not found"


def test_reading_article_counts_views(client, admin) -> None:
    _create(client, admin["headers"], published=True)

    first = client.get("/api/news/hello-devhub-world").json()["data"]["article"]
    second = client.get("/api/news/hello-devhub-world").json()["data"]["article"]
    assert first["views"] == 1
    assert second["views"] == 2
    assert second["content"] == "# Body"


def test_publishing_sets_published_at_once(client, admin) -> None:
    draft = _create(client, admin["headers"])
    assert draft["publishedAt"] is None

    published = client.put(f"/api/news/{draft['id']}", json={"published": True}, headers=admin["headers"]).json()["data"]["article"]
    assert published["publishedAt"] is not None

    edited = client.put(f"/api/news/{draft['id']}", json={"title": "Renamed"}, headers=admin["headers"]).json()["data"]["article"]
    assert edited["title"] == "Renamed"
    assert edited["slug"] == "hello-devhub-world"
    assert edited["publishedAt"] == published["publishedAt"]


def test_delete_article(client, admin) -> None:
    article = _create(client, admin["headers"])
    response = client.delete(f"/api/news/{article['id']}", headers=admin["headers"])
    assert response.status_code == 200
    assert response.json()["message"] == "Article deleted successfully"

    missing = client.delete(f"/api/news/{article['id']}", headers=admin["headers"])
    assert missing.status_code == 404


def test_slug_is_transliterated_and_required(client, admin) -> None:
    article = _create(client, admin["headers"], title="Café Crème: Ünïcode news!")
    assert article["slug"] == "cafe-creme-unicode-news"

    custom = _create(client, admin["headers"], title="Anything", slug="  My Custom   Slug ")
    assert custom["slug"] == "my-custom-slug"

    symbols = client.post("/api/news", json={**ARTICLE, "title": "!!! ???"}, headers=admin["headers"])
    assert symbols.status_code == 400
    assert symbols.json()["message"] == "Title must contain letters or numbers"
