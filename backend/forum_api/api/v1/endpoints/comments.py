"""
Comment API Endpoints.

Replies, edits and deletion of individual comments.
"""

from typing import Any

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from forum_api.api.v1.deps import get_current_user
from forum_api.api.v1.endpoints.posts import CommentRequest
from forum_api.core.database import get_db
from forum_api.models.user import User
from forum_api.modules.forum import ForumService
from forum_api.modules.forum.serializers import comment_to_dict

router = APIRouter()


@router.get("/{comment_id}")
async def get_comment(
    comment_id: int,
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Get a single comment without replies."""
    comment = await ForumService(db).require_comment(comment_id)
    return {"success": True, "data": comment_to_dict(comment)}


@router.post("/{comment_id}/replies", status_code=status.HTTP_201_CREATED)
async def reply_to_comment(
    comment_id: int,
    request: CommentRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Reply to an existing comment."""
    reply = await ForumService(db).reply_to_comment(
        comment_id,
        author_id=user.id,
        content=request.content,
    )
    return {"success": True, "data": comment_to_dict(reply)}


@router.put("/{comment_id}")
async def update_comment(
    comment_id: int,
    request: CommentRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Update comment content (author only)."""
    comment = await ForumService(db).update_comment(
        comment_id,
        user_id=user.id,
        content=request.content,
    )
    return {"success": True, "data": comment_to_dict(comment)}


@router.delete("/{comment_id}")
async def delete_comment(
    comment_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Delete comment with all replies below it (author only)."""
    await ForumService(db).delete_comment(comment_id, user_id=user.id)
    return {"success": True, "data": {}}
