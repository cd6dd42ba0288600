from datetime import timedelta
from unittest.mock import MagicMock

from sqlalchemy.exc import OperationalError

from blog.core.security import create_access_token
from blog.main import app
from blog.routers.articles import get_article_service


def article_payload(**overrides):
    payload = {
        "title": "Building a blog with FastAPI",
        "subtitle": "Notes from the weekend",
        "content": " ".join(["word"] * 400),
        "category": "Technology",
        "tags": [" python ", "fastapi"],
    }
    payload.update(overrides)
    return payload


def create(client, admin_headers, **overrides):
    response = client.post("/api/articles", json=article_payload(**overrides), headers=admin_headers)
    assert response.status_code == 201, response.text
    return response.json()


def test_create_article(client, admin_headers):
    data = create(client, admin_headers)

    assert len(data["id"]) == 32
    assert "_id" not in data
    assert data["reading_time"] == 2
    assert data["tags"] == ["python", "fastapi"]
    assert data["author"] == "Richard Li"
    assert data["published"] is False
    assert data["published_date"] is None
    assert data["views"] == 0


def test_create_requires_admin_token(client):
    response = client.post("/api/articles", json=article_payload())
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


def test_create_validation_errors_are_400(client, admin_headers):
    payload = article_payload()
    del payload["content"]
    assert client.post("/api/articles", json=payload, headers=admin_headers).status_code == 400

    response = client.post("/api/articles", json=article_payload(title="x" * 201), headers=admin_headers)
    assert response.status_code == 400

    response = client.post("/api/articles", json=article_payload(category="Cooking"), headers=admin_headers)
    assert response.status_code == 400


def test_get_article_counts_views(client, admin_headers):
    published = create(client, admin_headers, published=True)
    draft = create(client, admin_headers)

    assert client.get(f"/api/articles/{published['id']}").json()["views"] == 1
    assert client.get(f"/api/articles/{published['id']}").json()["views"] == 2
    assert client.get(f"/api/articles/{draft['id']}").json()["views"] == 0


def test_get_missing_and_malformed_ids_are_404(client):
    response = client.get("/api/articles/" + "a" * 32)
    assert response.status_code == 404
    assert response.json() == {"detail": "Article not found"}

    assert client.get("/api/articles/not-a-real-id").status_code == 404


def test_update_article(client, admin_headers):
    article = create(client, admin_headers)

    response = client.put(
        f"/api/articles/{article['id']}",
        json={"content": " ".join(["word"] * 201), "published": True},
        headers=admin_headers,
    )
    assert response.status_code == 200
    data = response.json()
    assert data["reading_time"] == 2
    assert data["published"] is True
    assert data["published_date"] is not None
    assert data["title"] == article["title"]


def test_update_keeps_first_published_date(client, admin_headers):
    article = create(client, admin_headers, published=True)
    url = f"/api/articles/{article['id']}"

    client.put(url, json={"published": False}, headers=admin_headers)
    data = client.put(url, json={"published": True}, headers=admin_headers).json()

    assert data["published_date"] == article["published_date"]


def test_update_errors(client, admin_headers):
    article = create(client, admin_headers)
    url = f"/api/articles/{article['id']}"

    assert client.put(url, json={"title": "x" * 201}, headers=admin_headers).status_code == 400
    assert client.put(url, json={"title": None}, headers=admin_headers).status_code == 400
    assert client.put(url, json={"title": "New"}).status_code == 401
    assert client.put("/api/articles/" + "b" * 32, json={"title": "New"}, headers=admin_headers).status_code == 404


def test_delete_article_twice(client, admin_headers):
    article = create(client, admin_headers)
    url = f"/api/articles/{article['id']}"

    assert client.delete(url).status_code == 401

    response = client.delete(url, headers=admin_headers)
    assert response.status_code == 200
    assert response.json() == {"message": "Article deleted successfully"}

    assert client.delete(url, headers=admin_headers).status_code == 404
    assert client.delete(url, headers=admin_headers).status_code == 404
    assert client.delete("/api/articles/garbage", headers=admin_headers).status_code == 404


def test_list_articles(client, admin_headers):
    for i in range(12):
        create(client, admin_headers, title=f"Post {i}", published=True)
    create(client, admin_headers, title="React draft", tags=["react"])

    response = client.get("/api/articles", params={"published": "true", "page": 2, "limit": 5})
    assert response.status_code == 200
    data = response.json()
    assert set(data) == {"articles", "totalPages", "currentPage", "total"}
    assert data["total"] == 12
    assert data["totalPages"] == 3
    assert data["currentPage"] == 2
    assert len(data["articles"]) == 5

    data = client.get("/api/articles", params={"search": "REACT"}).json()
    assert [a["title"] for a in data["articles"]] == ["React draft"]

    all_data = client.get("/api/articles", params={"category": "All"}).json()
    unfiltered = client.get("/api/articles").json()
    assert all_data["total"] == unfiltered["total"] == 13


def test_list_rejects_bad_paging(client):
    assert client.get("/api/articles", params={"page": 0}).status_code == 400
    assert client.get("/api/articles", params={"limit": "ten"}).status_code == 400


def test_list_accepts_any_positive_paging(client, admin_headers):
    for i in range(3):
        create(client, admin_headers, title=f"Post {i}")

    response = client.get("/api/articles", params={"page": 100000000000000000, "limit": 100})
    assert response.status_code == 200
    data = response.json()
    assert data["articles"] == []
    assert data["total"] == 3
    assert data["currentPage"] == 100000000000000000

    response = client.get("/api/articles", params={"limit": 200})
    assert response.status_code == 200
    assert len(response.json()["articles"]) == 3


def test_published_and_category_routes(client, admin_headers):
    travel = create(client, admin_headers, category="Travel", published=True)
    create(client, admin_headers, category="Travel")
    design = create(client, admin_headers, category="Design", published=True)

    published = client.get("/api/articles/published").json()
    assert {a["id"] for a in published} == {travel["id"], design["id"]}

    by_category = client.get("/api/articles/category/Travel").json()
    assert [a["id"] for a in by_category] == [travel["id"]]

    assert client.get("/api/articles/category/Cooking").status_code == 400


def test_stats(client, admin_headers):
    create(client, admin_headers, category="Travel", published=True)
    create(client, admin_headers, category="Travel")
    create(client, admin_headers, category="Design")

    data = client.get("/api/articles/stats").json()
    assert data["total"] == 3
    assert data["published"] == 1
    assert data["drafts"] == 2
    assert sorted(data["categoryStats"], key=lambda c: c["_id"]) == [
        {"_id": "Design", "count": 1},
        {"_id": "Travel", "count": 2},
    ]


def test_expired_and_foreign_tokens_are_rejected(client, settings):
    expired = create_access_token(settings, {"role": "admin"}, expires_delta=timedelta(minutes=-5))
    wrong_role = create_access_token(settings, {"role": "reader"})

    for token in (expired, wrong_role, "not.a.jwt", expired[:-4] + "abcd"):
        response = client.post(
            "/api/articles", json=article_payload(), headers={"Authorization": f"Bearer {token}"}
        )
        assert response.status_code == 401
        assert response.json() == {"detail": "Could not validate credentials"}


def test_database_errors_become_500(client):
    broken = MagicMock()
    broken.get_stats.side_effect = OperationalError("SELECT", {}, Exception("database is locked"))
    app.dependency_overrides[get_article_service] = lambda: broken

    response = client.get("/api/articles/stats")

    assert response.status_code == 500
    assert response.json()["detail"] == "Something went wrong!"


def test_health_check(client):
    data = client.get("/api/health").json()
    assert data["status"] == "OK"
    assert data["database"] == "Connected"
