"""Article Routes — HTTP status mapping and JSON shapes.

Invariants:
    - POST /articles and POST /articles/{id}/rewrites return 201 with the decorated article
    - Error kinds map to 400 / 404 / 409 / 412 / 503 with the structured error body
    - File content arrives base64-encoded in JSON
"""

import base64

import pytest


def _file(name: str, data: bytes = b"\x89PNG fake") -> dict:
    return {"name": name, "content": base64.b64encode(data).decode()}


async def _create(client, author="alice", title="Hello", files=()):
    res = await client.post("/api/v1/articles", json={
        "author_id": author, "title": title, "content": "Body",
        "files": list(files),
    })
    assert res.status_code == 201, res.text
    return res.json()


async def test_create_returns_201_with_files_and_author(client, fake_objects):
    body = await _create(client, files=[_file("photo.png", b"raw-bytes")])

    assert body["title"] == "Hello"
    assert body["version"] == 1
    assert body["like_count"] == 0
    assert body["original_article_id"] is None
    assert body["author"]["username"] == "alice"
    assert len(body["files"]) == 1
    assert body["files"][0]["storage_key"].endswith(".png")
    assert fake_objects.blobs[body["files"][0]["storage_key"]] == b"raw-bytes"


async def test_create_with_empty_title_is_400(client):
    res = await client.post("/api/v1/articles", json={
        "author_id": "alice", "title": "", "content": "Body",
    })
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_ARGUMENT"


async def test_create_with_missing_field_is_validation_error(client):
    res = await client.post("/api/v1/articles", json={"author_id": "alice"})
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"
    fields = {d["field"] for d in res.json()["error"]["details"]}
    assert fields == {"title", "content"}


async def test_create_with_bad_base64_is_validation_error(client):
    res = await client.post("/api/v1/articles", json={
        "author_id": "alice", "title": "T", "content": "C",
        "files": [{"name": "a.png", "content": "not base64!!"}],
    })
    assert res.status_code == 400


async def test_object_store_outage_is_503(client, fake_objects):
    fake_objects.fail_put_names = {"a.png"}
    res = await client.post("/api/v1/articles", json={
        "author_id": "alice", "title": "T", "content": "C",
        "files": [_file("a.png")],
    })
    assert res.status_code == 503
    assert res.json()["error"]["code"] == "UNAVAILABLE"


async def test_get_update_and_not_found(client):
    created = await _create(client)

    res = await client.get(f"/api/v1/articles/{created['id']}")
    assert res.status_code == 200
    assert res.json()["id"] == created["id"]

    res = await client.put(
        f"/api/v1/articles/{created['id']}", json={"title": "New", "content": "Body 2"},
    )
    assert res.status_code == 200
    assert res.json()["title"] == "New"
    assert res.json()["version"] == 2

    res = await client.get("/api/v1/articles/01UNKNOWN")
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "NOT_FOUND"


async def test_rewrite_returns_201_fork(client):
    original = await _create(client)
    res = await client.post(
        f"/api/v1/articles/{original['id']}/rewrites",
        json={"author_id": "bob", "title": "Fork", "content": "Other"},
    )
    assert res.status_code == 201
    assert res.json()["original_article_id"] == original["id"]
    assert res.json()["author_id"] == "bob"


async def test_rewrite_of_missing_article_is_404(client):
    res = await client.post(
        "/api/v1/articles/01UNKNOWN/rewrites",
        json={"author_id": "bob", "title": "Fork", "content": "Other"},
    )
    assert res.status_code == 404


async def test_like_conflicts_and_unlike_precondition(client):
    created = await _create(client)
    likes = f"/api/v1/articles/{created['id']}/likes"

    res = await client.post(likes, json={"author_id": "bob"})
    assert res.status_code == 200
    assert res.json() == {"success": True}

    res = await client.post(likes, json={"author_id": "bob"})
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "ALREADY_EXISTS"

    res = await client.delete(f"{likes}/bob")
    assert res.status_code == 200

    res = await client.delete(f"{likes}/bob")
    assert res.status_code == 412
    assert res.json()["error"]["code"] == "FAILED_PRECONDITION"


async def test_delete_then_get_is_404(client, cleanup_queue):
    created = await _create(client, files=[_file("a.png")])

    res = await client.delete(f"/api/v1/articles/{created['id']}")
    assert res.status_code == 200
    assert res.json() == {"success": True}
    await cleanup_queue.join()

    res = await client.get(f"/api/v1/articles/{created['id']}")
    assert res.status_code == 404


async def test_list_pages_newest_first(client):
    for title in ("one", "two", "three"):
        await _create(client, title=title)

    res = await client.get("/api/v1/articles", params={"page": 1, "page_size": 2})

    assert res.status_code == 200
    body = res.json()
    assert body["total_count"] == 3
    assert [a["title"] for a in body["articles"]] == ["three", "two"]
    assert (body["page"], body["page_size"]) == (1, 2)


@pytest.mark.parametrize("params", [
    {"page": 0}, {"page_size": 0}, {"page": -3},
    {"page": 10**19}, {"page_size": 2**63},
])
async def test_list_with_invalid_pagination_is_400(client, params):
    res = await client.get("/api/v1/articles", params=params)
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_ARGUMENT"


async def test_list_by_author(client):
    await _create(client, author="alice", title="mine")
    await _create(client, author="bob", title="theirs")

    res = await client.get("/api/v1/authors/alice/articles")

    assert res.status_code == 200
    assert [a["title"] for a in res.json()["articles"]] == ["mine"]
    assert res.json()["total_count"] == 1


async def test_identity_outage_fails_read_with_503(client, fake_identities):
    created = await _create(client)
    fake_identities.unavailable = True
    res = await client.get(f"/api/v1/articles/{created['id']}")
    assert res.status_code == 503


async def test_health_and_readiness(client):
    res = await client.get("/api/v1/health/")
    assert res.status_code == 200
    assert res.json()["service"] == "article-service"

    res = await client.get("/api/v1/health/ready")
    assert res.status_code == 200
    assert res.json()["status"] == "ready"


async def test_list_by_author_with_huge_page_is_400(client):
    await _create(client, author="alice")
    res = await client.get(
        "/api/v1/authors/alice/articles", params={"page": 10**19, "page_size": 10},
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_ARGUMENT"
