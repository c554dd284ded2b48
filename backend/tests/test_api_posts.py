"""End-to-end tests for post endpoints."""

from httpx import AsyncClient


async def create_post(client: AsyncClient, headers: dict, title: str = "Hello", content: str = "World"):
    response = await client.post(
        "/api/posts", json={"title": title, "content": content}, headers=headers
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


class TestCreatePost:
    """Tests for POST /api/posts."""

    async def test_create(self, client: AsyncClient, auth_headers) -> None:
        headers = await auth_headers("alice")

        post = await create_post(client, headers, "  My title  ", "Body")

        assert post["title"] == "My title"
        assert post["author"]["username"] == "alice"
        assert post["upvotes"] == 0
        assert post["downvotes"] == 0

    async def test_requires_auth(self, client: AsyncClient) -> None:
        response = await client.post("/api/posts", json={"title": "t", "content": "c"})
        assert response.status_code == 401

    async def test_blank_title_rejected(self, client: AsyncClient, auth_headers) -> None:
        headers = await auth_headers("alice")
        response = await client.post(
            "/api/posts", json={"title": "   ", "content": "c"}, headers=headers
        )
        assert response.status_code == 400

    async def test_title_too_long(self, client: AsyncClient, auth_headers) -> None:
        headers = await auth_headers("alice")
        response = await client.post(
            "/api/posts", json={"title": "x" * 101, "content": "c"}, headers=headers
        )
        assert response.status_code == 400


class TestReadPosts:
    """Tests for GET /api/posts and GET /api/posts/{id}."""

    async def test_get_single(self, client: AsyncClient, auth_headers) -> None:
        headers = await auth_headers("alice")
        post = await create_post(client, headers)

        response = await client.get(f"/api/posts/{post['id']}")

        assert response.status_code == 200
        assert response.json()["data"]["id"] == post["id"]

    async def test_get_missing(self, client: AsyncClient) -> None:
        response = await client.get("/api/posts/999")

        assert response.status_code == 404
        assert response.json()["message"] == "Post not found"

    async def test_list_with_pagination(self, client: AsyncClient, auth_headers) -> None:
        headers = await auth_headers("alice")
        for i in range(3):
            await create_post(client, headers, title=f"post {i}")

        response = await client.get("/api/posts", params={"page": 2, "limit": 2})

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 3
        assert body["pages"] == 2
        assert body["page"] == 2
        assert body["count"] == 1
        assert body["data"][0]["title"] == "post 0"

    async def test_list_filter_search_and_sort(self, client: AsyncClient, auth_headers) -> None:
        alice = await auth_headers("alice")
        bob = await auth_headers("bob")
        await create_post(client, alice, "Banana bread", "Recipe")
        await create_post(client, alice, "apple pie", "Another recipe")
        bob_post = await create_post(client, bob, "Apple news", "Stock")

        response = await client.get(
            "/api/posts",
            params={"author": bob_post["author"]["id"], "search": "APPLE"},
        )
        assert [p["title"] for p in response.json()["data"]] == ["Apple news"]

        response = await client.get(
            "/api/posts", params={"sortBy": "title", "order": "asc", "search": "recipe"}
        )
        assert [p["title"] for p in response.json()["data"]] == [
            "Banana bread",
            "apple pie",
        ]

    async def test_list_bad_sort_field(self, client: AsyncClient) -> None:
        response = await client.get("/api/posts", params={"sortBy": "nope"})
        assert response.status_code == 400

    async def test_list_limit_bounds(self, client: AsyncClient) -> None:
        response = await client.get("/api/posts", params={"limit": 0})
        assert response.status_code == 400


class TestMutatePosts:
    """Tests for PUT and DELETE /api/posts/{id}."""

    async def test_only_owner_may_update(self, client: AsyncClient, auth_headers) -> None:
        alice = await auth_headers("alice")
        bob = await auth_headers("bob")
        post = await create_post(client, alice)
        change = {"title": "Edited", "content": "Edited body"}

        as_bob = await client.put(f"/api/posts/{post['id']}", json=change, headers=bob)
        assert as_bob.status_code == 401
        assert as_bob.json()["message"] == "Not authorized to update this post"

        as_alice = await client.put(f"/api/posts/{post['id']}", json=change, headers=alice)
        assert as_alice.status_code == 200
        assert as_alice.json()["data"]["title"] == "Edited"

    async def test_update_missing(self, client: AsyncClient, auth_headers) -> None:
        alice = await auth_headers("alice")
        response = await client.put(
            "/api/posts/999", json={"title": "t", "content": "c"}, headers=alice
        )
        assert response.status_code == 404

    async def test_delete_cascades_comments(self, client: AsyncClient, auth_headers) -> None:
        alice = await auth_headers("alice")
        bob = await auth_headers("bob")
        post = await create_post(client, alice)
        comment = await client.post(
            f"/api/posts/{post['id']}/comments", json={"content": "hi"}, headers=bob
        )
        comment_id = comment.json()["data"]["id"]

        denied = await client.delete(f"/api/posts/{post['id']}", headers=bob)
        assert denied.status_code == 401

        response = await client.delete(f"/api/posts/{post['id']}", headers=alice)
        assert response.status_code == 200
        assert response.json() == {"success": True, "data": {}}

        assert (await client.get(f"/api/posts/{post['id']}")).status_code == 404
        assert (await client.get(f"/api/comments/{comment_id}")).status_code == 404


class TestOutOfRangeNumbers:
    """IDs and page numbers beyond the integer columns."""

    async def test_huge_post_id_is_not_found(self, client: AsyncClient) -> None:
        for post_id in ("3000000000", "99999999999999999999"):
            response = await client.get(f"/api/posts/{post_id}")

            assert response.status_code == 404
            assert response.json()["message"] == "Post not found"

    async def test_huge_post_id_on_update_and_delete(self, client: AsyncClient, auth_headers) -> None:
        alice = await auth_headers("alice")
        url = "/api/posts/99999999999999999999"

        updated = await client.put(url, json={"title": "t", "content": "c"}, headers=alice)
        deleted = await client.delete(url, headers=alice)

        assert updated.status_code == 404
        assert deleted.status_code == 404

    async def test_huge_page_rejected(self, client: AsyncClient) -> None:
        response = await client.get("/api/posts", params={"page": 10**18})

        assert response.status_code == 400
        assert response.json()["code"] == "validation_error"

    async def test_huge_author_rejected(self, client: AsyncClient) -> None:
        response = await client.get("/api/posts", params={"author": 10**18})

        assert response.status_code == 400
