"""End-to-end tests for voting."""

from httpx import AsyncClient


async def make_post(client: AsyncClient, headers: dict) -> int:
    response = await client.post(
        "/api/posts", json={"title": "P", "content": "Body"}, headers=headers
    )
    return response.json()["data"]["id"]


class TestVoteEndpoint:
    """Tests for POST /api/{posts|comments}/{id}/vote."""

    async def test_cast_change_remove(self, client: AsyncClient, auth_headers) -> None:
        alice = await auth_headers("alice")
        post_id = await make_post(client, alice)
        url = f"/api/posts/{post_id}/vote"

        cast = await client.post(url, json={"value": 1}, headers=alice)
        assert cast.status_code == 201
        assert cast.json()["message"] == "Vote cast"
        assert cast.json()["data"]["value"] == 1
        assert cast.json()["data"]["target_type"] == "Post"

        changed = await client.post(url, json={"value": -1}, headers=alice)
        assert changed.status_code == 200
        assert changed.json()["message"] == "Vote changed"
        assert changed.json()["data"]["value"] == -1

        post = (await client.get(f"/api/posts/{post_id}")).json()["data"]
        assert (post["upvotes"], post["downvotes"]) == (0, 1)

        removed = await client.post(url, json={"value": -1}, headers=alice)
        assert removed.status_code == 200
        assert removed.json()["message"] == "Vote removed"
        assert "data" not in removed.json()

        post = (await client.get(f"/api/posts/{post_id}")).json()["data"]
        assert (post["upvotes"], post["downvotes"]) == (0, 0)

    async def test_vote_on_comment(self, client: AsyncClient, auth_headers) -> None:
        alice = await auth_headers("alice")
        bob = await auth_headers("bob")
        post_id = await make_post(client, alice)
        comment = await client.post(
            f"/api/posts/{post_id}/comments", json={"content": "c"}, headers=alice
        )
        comment_id = comment.json()["data"]["id"]

        await client.post(f"/api/comments/{comment_id}/vote", json={"value": 1}, headers=alice)
        response = await client.post(
            f"/api/comments/{comment_id}/vote", json={"value": 1}, headers=bob
        )

        assert response.status_code == 201
        assert (response.json()["upvotes"], response.json()["downvotes"]) == (2, 0)
        stored = (await client.get(f"/api/comments/{comment_id}")).json()["data"]
        assert stored["upvotes"] == 2

    async def test_missing_target(self, client: AsyncClient, auth_headers) -> None:
        alice = await auth_headers("alice")

        response = await client.post("/api/comments/999/vote", json={"value": 1}, headers=alice)

        assert response.status_code == 404
        assert response.json()["message"] == "Comment not found"

    async def test_invalid_value(self, client: AsyncClient, auth_headers) -> None:
        alice = await auth_headers("alice")
        post_id = await make_post(client, alice)

        response = await client.post(
            f"/api/posts/{post_id}/vote", json={"value": 0}, headers=alice
        )

        assert response.status_code == 400

    async def test_invalid_target_collection(self, client: AsyncClient, auth_headers) -> None:
        alice = await auth_headers("alice")

        response = await client.post("/api/users/1/vote", json={"value": 1}, headers=alice)

        assert response.status_code == 400

    async def test_requires_auth(self, client: AsyncClient, auth_headers) -> None:
        alice = await auth_headers("alice")
        post_id = await make_post(client, alice)

        response = await client.post(f"/api/posts/{post_id}/vote", json={"value": 1})

        assert response.status_code == 401

    async def test_boolean_value_rejected(self, client: AsyncClient, auth_headers) -> None:
        alice = await auth_headers("alice")
        post_id = await make_post(client, alice)

        response = await client.post(
            f"/api/posts/{post_id}/vote", json={"value": True}, headers=alice
        )

        assert response.status_code == 400
        post = (await client.get(f"/api/posts/{post_id}")).json()["data"]
        assert post["upvotes"] == 0

    async def test_huge_target_id_is_not_found(self, client: AsyncClient, auth_headers) -> None:
        alice = await auth_headers("alice")

        response = await client.post(
            "/api/posts/99999999999999999999/vote", json={"value": 1}, headers=alice
        )

        assert response.status_code == 404
        assert response.json()["message"] == "Post not found"
