"""
Dict renderings of forum records for API responses.
"""

from typing import Any

from forum_api.models.forum import Comment, Post, Vote
from forum_api.models.user import User


def user_to_dict(user: User) -> dict[str, Any]:
    return {
        "id": user.id,
        "username": user.username,
    }


def user_profile_to_dict(user: User) -> dict[str, Any]:
    return {
        "id": user.id,
        "username": user.username,
        "email": user.email,
        "created_at": user.created_at.isoformat(),
    }


def post_to_dict(post: Post) -> dict[str, Any]:
    """Render a post; the author relationship must already be loaded."""
    return {
        "id": post.id,
        "title": post.title,
        "content": post.content,
        "author": user_to_dict(post.author) if post.author else None,
        "upvotes": post.upvotes,
        "downvotes": post.downvotes,
        "created_at": post.created_at.isoformat(),
        "updated_at": post.updated_at.isoformat(),
    }


def comment_to_dict(comment: Comment) -> dict[str, Any]:
    """Render a comment without its replies."""
    return {
        "id": comment.id,
        "content": comment.content,
        "author": user_to_dict(comment.author) if comment.author else None,
        "post_id": comment.post_id,
        "parent_id": comment.parent_id,
        "upvotes": comment.upvotes,
        "downvotes": comment.downvotes,
        "created_at": comment.created_at.isoformat(),
        "updated_at": comment.updated_at.isoformat(),
    }


def vote_to_dict(vote: Vote) -> dict[str, Any]:
    return {
        "id": vote.id,
        "user_id": vote.user_id,
        "target_type": vote.target_type.value,
        "target_id": vote.target_id,
        "value": vote.value,
        "created_at": vote.created_at.isoformat(),
    }
