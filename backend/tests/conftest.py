"""Shared fixtures: a throwaway SQLite database and an API client."""

import os
import tempfile

# Settings are read at import time, so point them at SQLite first
_DB_DIR = tempfile.mkdtemp(prefix="forum-api-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_DIR}/test.db"
os.environ["JWT_SECRET_KEY"] = "test-secret"

from collections.abc import AsyncIterator, Awaitable, Callable  # noqa: E402

import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from forum_api.core.database import (  # noqa: E402
    async_session_maker,
    close_db,
    drop_db,
    init_db,
)
from forum_api.core.security import hash_password  # noqa: E402
from forum_api.main import app  # noqa: E402
from forum_api.models.forum import Comment, Post  # noqa: E402
from forum_api.models.user import User  # noqa: E402


@pytest_asyncio.fixture
async def database() -> AsyncIterator[None]:
    """Fresh schema for every test."""
    await init_db()
    yield
    await drop_db()
    await close_db()


@pytest_asyncio.fixture
async def db_session(database: None) -> AsyncIterator[AsyncSession]:
    """Session for service-level tests."""
    async with async_session_maker() as session:
        yield session


@pytest_asyncio.fixture
async def client(database: None) -> AsyncIterator[AsyncClient]:
    """HTTP client bound to the application."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def auth_headers(
    client: AsyncClient,
) -> Callable[..., Awaitable[dict[str, str]]]:
    """Register a user through the API and return its Authorization header."""

    async def _register(username: str, password: str = "password123") -> dict[str, str]:
        response = await client.post(
            "/api/auth/register",
            json={
                "username": username,
                "email": f"{username}@example.com",
                "password": password,
            },
        )
        assert response.status_code == 201, response.text
        return {"Authorization": f"Bearer {response.json()['token']}"}

    return _register


@pytest_asyncio.fixture
async def make_user(db_session: AsyncSession) -> Callable[[str], Awaitable[User]]:
    """Insert a user directly."""

    async def _make(username: str) -> User:
        user = User(
            username=username,
            email=f"{username}@example.com",
            hashed_password=hash_password("password123"),
        )
        db_session.add(user)
        await db_session.commit()
        return user

    return _make


@pytest_asyncio.fixture
async def make_post(db_session: AsyncSession) -> Callable[..., Awaitable[Post]]:
    """Insert a post directly."""

    async def _make(author: User, title: str = "Hello", content: str = "World") -> Post:
        post = Post(author_id=author.id, title=title, content=content)
        db_session.add(post)
        await db_session.commit()
        return post

    return _make


@pytest_asyncio.fixture
async def make_comment(db_session: AsyncSession) -> Callable[..., Awaitable[Comment]]:
    """Insert a comment (or a reply when parent is given) directly."""

    async def _make(
        author: User,
        post: Post,
        content: str = "A comment",
        parent: Comment | None = None,
    ) -> Comment:
        comment = Comment(
            author_id=author.id,
            post_id=post.id,
            parent_id=parent.id if parent else None,
            content=content,
        )
        db_session.add(comment)
        await db_session.commit()
        return comment

    return _make
