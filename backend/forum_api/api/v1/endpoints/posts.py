"""
Post API Endpoints.

Post CRUD and the comment threads under each post.
"""

from typing import Annotated, Any, Literal

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, StringConstraints
from sqlalchemy.ext.asyncio import AsyncSession

from forum_api.api.v1.deps import get_current_user
from forum_api.core.config import settings
from forum_api.core.database import MAX_ID, get_db
from forum_api.models.user import User
from forum_api.modules.forum import ForumService, Page
from forum_api.modules.forum.serializers import comment_to_dict, post_to_dict

router = APIRouter()

Title = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)
]
Content = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


# ==================== Schemas ====================


class PostRequest(BaseModel):
    """Create or replace a post."""

    title: Title
    content: Content


class CommentRequest(BaseModel):
    """Create or edit a comment."""

    content: Content


def _page_envelope(page: Page, items: list[dict[str, Any]]) -> dict[str, Any]:
    return {
        "success": True,
        "count": len(items),
        "total": page.total,
        "page": page.page,
        "pages": page.pages,
        "data": items,
    }


# ==================== Posts ====================


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_post(
    request: PostRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Create new post."""
    post = await ForumService(db).create_post(
        author_id=user.id,
        title=request.title,
        content=request.content,
    )
    return {"success": True, "data": post_to_dict(post)}


@router.get("")
async def get_posts(
    page: int = Query(1, ge=1, le=MAX_ID),
    limit: int = Query(
        settings.forum_posts_per_page, ge=1, le=settings.forum_max_page_size
    ),
    sort_by: str = Query("createdAt", alias="sortBy", description="Sort field"),
    order: Literal["asc", "desc"] = Query("desc"),
    author: int | None = Query(None, ge=1, le=MAX_ID, description="Author user ID"),
    search: str | None = Query(None, description="Search title and content"),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Get posts with filtering, sorting and pagination."""
    result = await ForumService(db).get_posts(
        page=page,
        limit=limit,
        sort_by=sort_by,
        order=order,
        author_id=author,
        search=search,
    )
    return _page_envelope(result, [post_to_dict(p) for p in result.items])


@router.get("/{post_id}")
async def get_post(
    post_id: int,
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Get post details."""
    post = await ForumService(db).require_post(post_id)
    return {"success": True, "data": post_to_dict(post)}


@router.put("/{post_id}")
async def update_post(
    post_id: int,
    request: PostRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Update post (author only)."""
    post = await ForumService(db).update_post(
        post_id,
        user_id=user.id,
        title=request.title,
        content=request.content,
    )
    return {"success": True, "data": post_to_dict(post)}


@router.delete("/{post_id}")
async def delete_post(
    post_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Delete post with its comments and votes (author only)."""
    await ForumService(db).delete_post(post_id, user_id=user.id)
    return {"success": True, "data": {}}


# ==================== Comments ====================


@router.post("/{post_id}/comments", status_code=status.HTTP_201_CREATED)
async def add_comment(
    post_id: int,
    request: CommentRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Add a comment to a post."""
    comment = await ForumService(db).add_comment(
        post_id,
        author_id=user.id,
        content=request.content,
    )
    return {"success": True, "data": comment_to_dict(comment)}


@router.get("/{post_id}/comments")
async def get_comments(
    post_id: int,
    page: int = Query(1, ge=1, le=MAX_ID),
    limit: int = Query(
        settings.forum_comments_per_page, ge=1, le=settings.forum_max_page_size
    ),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Get top-level comments of a post with nested replies."""
    result = await ForumService(db).get_comment_tree(post_id, page=page, limit=limit)
    return _page_envelope(result, result.items)
