"""
Blog API — Posts Endpoint Tests
=================================

What:  HTTP-level tests for /api/v1/posts and /health.
How:   HTTPX AsyncClient over ASGITransport; the app's session dependency
       is overridden to use the per-test in-memory database.

What we test:
    ✅ Listing with author / tag / sortBy / sortOrder query parameters
    ✅ author + tag together → 400
    ✅ Create / get / patch / delete round trips and status codes
    ✅ Error body format and X-Request-ID / X-Total-Count headers
    ✅ Store failures and unexpected errors → generic 500
    ✅ Posts without tags, tag label length limits
"""

import uuid
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlalchemy.exc import OperationalError

API = "/api/v1/posts"


def titles(body):
    return [post["title"] for post in body]


class TestListPostsEndpoint:

    @pytest.mark.asyncio
    async def test_list_default_order(self, test_client, sample_posts):
        response = await test_client.get(API)
        assert response.status_code == 200
        assert response.headers["X-Total-Count"] == "4"
        assert titles(response.json()) == [
            "Guide to TypeScript",
            "Full-Stack React Projects",
            "Learn React Hooks",
            "Learning Redux",
        ]

    @pytest.mark.asyncio
    async def test_list_sorted_ascending(self, test_client, sample_posts):
        response = await test_client.get(
            API, params={"sortBy": "createdAt", "sortOrder": "ascending"}
        )
        assert response.status_code == 200
        assert titles(response.json())[0] == "Learning Redux"

    @pytest.mark.asyncio
    async def test_list_by_author(self, test_client, sample_posts):
        response = await test_client.get(API, params={"author": "Daniel Bugl"})
        assert response.status_code == 200
        body = response.json()
        assert len(body) == 2
        assert {post["author"] for post in body} == {"Daniel Bugl"}

    @pytest.mark.asyncio
    async def test_list_by_tag(self, test_client, sample_posts):
        response = await test_client.get(API, params={"tag": "react"})
        assert response.status_code == 200
        assert sorted(titles(response.json())) == [
            "Full-Stack React Projects",
            "Learn React Hooks",
        ]

    @pytest.mark.asyncio
    async def test_author_and_tag_together_rejected(self, test_client, sample_posts):
        response = await test_client.get(
            API, params={"author": "Daniel Bugl", "tag": "react"}
        )
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        assert "not both" in body["message"]

    @pytest.mark.asyncio
    async def test_unknown_sort_field_rejected(self, test_client, sample_posts):
        response = await test_client.get(API, params={"sortBy": "likes"})
        assert response.status_code == 400
        assert response.json()["details"]["field"] == "sort_by"

    @pytest.mark.asyncio
    async def test_empty_collection(self, test_client):
        response = await test_client.get(API)
        assert response.status_code == 200
        assert response.json() == []
        assert response.headers["X-Total-Count"] == "0"

    @pytest.mark.asyncio
    async def test_store_failure_returns_500(self, test_client):
        failure = OperationalError("SELECT", {}, Exception("connection lost"))
        with patch(
            "blogapi.routes.posts.post_service.list_all_posts",
            new=AsyncMock(side_effect=failure),
        ):
            response = await test_client.get(API)
        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "database_error"
        assert "connection lost" not in body["message"]


class TestPostCrudEndpoints:

    @pytest.mark.asyncio
    async def test_create_and_fetch(self, test_client):
        response = await test_client.post(
            API,
            json={
                "title": "Hello FastAPI",
                "author": "Ada",
                "contents": "Body text",
                "tags": ["python", "api"],
            },
        )
        assert response.status_code == 201
        created = response.json()
        assert created["title"] == "Hello FastAPI"
        assert created["tags"] == ["python", "api"]
        assert "created_at" in created and "updated_at" in created

        fetched = await test_client.get(f"{API}/{created['id']}")
        assert fetched.status_code == 200
        assert fetched.json()["id"] == created["id"]
        assert fetched.json()["tags"] == ["python", "api"]

    @pytest.mark.asyncio
    async def test_create_missing_title(self, test_client):
        response = await test_client.post(API, json={"author": "Ada"})
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_create_blank_title(self, test_client):
        response = await test_client.post(API, json={"title": "   "})
        assert response.status_code == 400
        assert response.json()["details"]["field"] == "title"

    @pytest.mark.asyncio
    async def test_create_title_only(self, test_client):
        response = await test_client.post(API, json={"title": "No tags"})
        assert response.status_code == 201
        created = response.json()
        assert created["tags"] == []
        assert created["author"] is None

        fetched = await test_client.get(f"{API}/{created['id']}")
        assert fetched.status_code == 200
        assert fetched.json()["tags"] == []

    @pytest.mark.asyncio
    async def test_create_with_empty_tag_list(self, test_client):
        response = await test_client.post(API, json={"title": "Empty", "tags": []})
        assert response.status_code == 201
        assert response.json()["tags"] == []

    @pytest.mark.asyncio
    async def test_create_accepts_longest_tag(self, test_client):
        tag = "t" * 100
        response = await test_client.post(API, json={"title": "Long tag", "tags": [tag]})
        assert response.status_code == 201
        assert response.json()["tags"] == [tag]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("tag", ["", "t" * 101])
    async def test_create_rejects_bad_tag(self, test_client, tag):
        response = await test_client.post(API, json={"title": "Bad tag", "tags": [tag]})
        assert response.status_code == 422

        listing = await test_client.get(API)
        assert listing.json() == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("tag", ["", "t" * 101])
    async def test_patch_rejects_bad_tag(self, test_client, sample_posts, tag):
        target = sample_posts[0]
        response = await test_client.patch(f"{API}/{target.id}", json={"tags": [tag]})
        assert response.status_code == 422

        fetched = await test_client.get(f"{API}/{target.id}")
        assert fetched.json()["tags"] == ["redux"]

    @pytest.mark.asyncio
    async def test_patch_untagged_post(self, test_client):
        created = (await test_client.post(API, json={"title": "Draft"})).json()

        renamed = await test_client.patch(f"{API}/{created['id']}", json={"title": "Final"})
        assert renamed.status_code == 200
        assert renamed.json()["title"] == "Final"
        assert renamed.json()["tags"] == []

        tagged = await test_client.patch(f"{API}/{created['id']}", json={"tags": ["news"]})
        assert tagged.status_code == 200
        assert tagged.json()["tags"] == ["news"]

    @pytest.mark.asyncio
    async def test_patch_untagged_sample_post(self, test_client, sample_posts):
        target = sample_posts[3]
        response = await test_client.patch(f"{API}/{target.id}", json={"author": "Anon"})
        assert response.status_code == 200
        assert response.json()["author"] == "Anon"
        assert response.json()["tags"] == []

    @pytest.mark.asyncio
    async def test_get_uses_path_id(self, test_client, sample_posts):
        target = sample_posts[2]
        response = await test_client.get(f"{API}/{target.id}")
        assert response.status_code == 200
        assert response.json()["title"] == "Full-Stack React Projects"

    @pytest.mark.asyncio
    async def test_get_missing_post(self, test_client):
        response = await test_client.get(f"{API}/{uuid.uuid4()}")
        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_get_malformed_id(self, test_client):
        response = await test_client.get(f"{API}/not-a-uuid")
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_patch_merges_fields(self, test_client, sample_posts):
        target = sample_posts[0]
        response = await test_client.patch(
            f"{API}/{target.id}", json={"contents": "Updated contents"}
        )
        assert response.status_code == 200
        body = response.json()
        assert body["contents"] == "Updated contents"
        assert body["title"] == "Learning Redux"
        assert body["tags"] == ["redux"]

    @pytest.mark.asyncio
    async def test_patch_missing_post(self, test_client):
        response = await test_client.patch(f"{API}/{uuid.uuid4()}", json={"title": "x"})
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_post(self, test_client, sample_posts):
        target = sample_posts[0]
        response = await test_client.delete(f"{API}/{target.id}")
        assert response.status_code == 204
        assert response.content == b""

        again = await test_client.get(f"{API}/{target.id}")
        assert again.status_code == 404

        listing = await test_client.get(API)
        assert len(listing.json()) == 3

    @pytest.mark.asyncio
    async def test_delete_missing_post(self, test_client):
        response = await test_client.delete(f"{API}/{uuid.uuid4()}")
        assert response.status_code == 404


class TestRequestId:

    @pytest.mark.asyncio
    async def test_generated_request_id(self, test_client):
        response = await test_client.get(API)
        assert response.headers.get("X-Request-ID")

    @pytest.mark.asyncio
    async def test_client_request_id_echoed(self, test_client):
        response = await test_client.get(
            f"{API}/{uuid.uuid4()}", headers={"X-Request-ID": "trace-123"}
        )
        assert response.headers["X-Request-ID"] == "trace-123"
        assert response.json()["request_id"] == "trace-123"


class TestUnexpectedErrors:

    @pytest.mark.asyncio
    async def test_unexpected_error_returns_generic_500(self, unraising_client):
        with patch(
            "blogapi.routes.posts.post_service.list_all_posts",
            new=AsyncMock(side_effect=RuntimeError("boom")),
        ):
            response = await unraising_client.get(API, headers={"X-Request-ID": "trace-500"})
        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "internal_server_error"
        assert "boom" not in body["message"]
        assert body["request_id"] == "trace-500"
        assert response.headers["X-Request-ID"] == "trace-500"

    @pytest.mark.asyncio
    async def test_unexpected_error_carries_generated_request_id(self, unraising_client):
        with patch(
            "blogapi.routes.posts.post_service.list_all_posts",
            new=AsyncMock(side_effect=RuntimeError("boom")),
        ):
            response = await unraising_client.get(API)
        assert response.status_code == 500
        assert response.headers.get("X-Request-ID")
        assert response.headers["X-Request-ID"] == response.json()["request_id"]


class TestHealthEndpoint:

    @pytest.mark.asyncio
    async def test_health_connected(self, test_client, engine):
        with patch("blogapi.database.engine", engine):
            response = await test_client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"

    @pytest.mark.asyncio
    async def test_health_disconnected(self, test_client):
        broken = MagicMock()
        broken.connect.side_effect = OperationalError("SELECT 1", {}, Exception("refused"))
        with patch("blogapi.database.engine", broken):
            response = await test_client.get("/health")
        assert response.status_code == 503
        assert response.json()["database"] == "disconnected"
