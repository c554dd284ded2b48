"""
Forum Service - Post and comment management.
"""

import math
from dataclasses import dataclass
from typing import Any

from loguru import logger
from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from forum_api.core.config import settings
from forum_api.core.database import is_valid_id, utcnow
from forum_api.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from forum_api.models.forum import Comment, Post, Vote, VoteTarget
from forum_api.modules.forum.tree import build_comment_tree

# Accepted sortBy values, camelCase and snake_case
POST_SORT_FIELDS = {
    "createdAt": Post.created_at,
    "created_at": Post.created_at,
    "updatedAt": Post.updated_at,
    "updated_at": Post.updated_at,
    "title": Post.title,
    "upvotes": Post.upvotes,
    "downvotes": Post.downvotes,
}


@dataclass
class Page:
    """One page of results plus totals."""

    items: list[Any]
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class ForumService:
    """
    Service for managing posts and threaded comments.

    Usage:
        forum = ForumService(db_session)
        page = await forum.get_posts(search="rov", page=1, limit=10)
    """

    def __init__(self, db: AsyncSession) -> None:
        """Initialize forum service with database session."""
        self.db = db

    # ==================== Posts ====================

    async def get_post(self, post_id: int) -> Post | None:
        """Get post by ID with author info."""
        if not is_valid_id(post_id):
            return None

        query = (
            select(Post)
            .options(selectinload(Post.author))
            .where(Post.id == post_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def require_post(self, post_id: int) -> Post:
        """Get post by ID or raise NotFoundError."""
        post = await self.get_post(post_id)
        if not post:
            raise NotFoundError("Post not found", code="post_not_found")
        return post

    async def get_posts(
        self,
        page: int = 1,
        limit: int | None = None,
        sort_by: str = "createdAt",
        order: str = "desc",
        author_id: int | None = None,
        search: str | None = None,
    ) -> Page:
        """
        Get posts with filtering, sorting and pagination.

        Args:
            page: 1-based page number
            limit: Page size (default from settings)
            sort_by: Field to sort by, see POST_SORT_FIELDS
            order: "asc" or "desc"
            author_id: Only posts by this user
            search: Case-insensitive substring of title or content

        Returns:
            Page of posts
        """
        limit = limit or settings.forum_posts_per_page

        sort_column = POST_SORT_FIELDS.get(sort_by)
        if sort_column is None:
            raise ValidationError(
                f"Cannot sort by '{sort_by}'", code="invalid_sort_field"
            )

        conditions = []
        if author_id is not None:
            conditions.append(Post.author_id == author_id)
        if search:
            pattern = _like_pattern(search)
            conditions.append(
                or_(
                    Post.title.ilike(pattern, escape="\\"),
                    Post.content.ilike(pattern, escape="\\"),
                )
            )

        count_query = select(func.count(Post.id)).where(*conditions)
        total = (await self.db.execute(count_query)).scalar_one()

        ordering = sort_column.asc() if order == "asc" else sort_column.desc()
        query = (
            select(Post)
            .options(selectinload(Post.author))
            .where(*conditions)
            .order_by(ordering, Post.id.desc())
            .limit(limit)
            .offset((page - 1) * limit)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(query)

        return Page(
            items=list(result.scalars().all()),
            total=total,
            page=page,
            limit=limit,
        )

    async def create_post(self, author_id: int, title: str, content: str) -> Post:
        """Create new post."""
        post = Post(author_id=author_id, title=title, content=content)

        self.db.add(post)
        await self.db.commit()

        logger.info(f"User {author_id} created post {post.id}")
        return await self.require_post(post.id)

    async def update_post(
        self,
        post_id: int,
        user_id: int,
        title: str,
        content: str,
    ) -> Post:
        """
        Update post title and content.

        Raises:
            NotFoundError: Post does not exist
            AuthorizationError: User is not the author
        """
        post = await self.require_post(post_id)
        if post.author_id != user_id:
            raise AuthorizationError("Not authorized to update this post")

        post.title = title
        post.content = content
        post.updated_at = utcnow()

        await self.db.commit()
        return post

    async def delete_post(self, post_id: int, user_id: int) -> None:
        """
        Delete post with all its comments and every vote on either.

        Raises:
            NotFoundError: Post does not exist
            AuthorizationError: User is not the author
        """
        post = await self.require_post(post_id)
        if post.author_id != user_id:
            raise AuthorizationError("Not authorized to delete this post")

        comment_ids = list(
            (
                await self.db.execute(
                    select(Comment.id).where(Comment.post_id == post_id)
                )
            ).scalars()
        )

        await self._delete_votes(VoteTarget.COMMENT, comment_ids)
        await self._delete_votes(VoteTarget.POST, [post_id])
        # Replies reference their parents, so they go first
        await self.db.execute(
            delete(Comment).where(
                Comment.post_id == post_id, Comment.parent_id.is_not(None)
            )
        )
        await self.db.execute(delete(Comment).where(Comment.post_id == post_id))
        await self.db.delete(post)
        await self.db.commit()

        logger.info(
            f"User {user_id} deleted post {post_id} with {len(comment_ids)} comments"
        )

    # ==================== Comments ====================

    async def get_comment(self, comment_id: int) -> Comment | None:
        """Get comment by ID with author info."""
        if not is_valid_id(comment_id):
            return None

        query = (
            select(Comment)
            .options(selectinload(Comment.author))
            .where(Comment.id == comment_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def require_comment(self, comment_id: int) -> Comment:
        """Get comment by ID or raise NotFoundError."""
        comment = await self.get_comment(comment_id)
        if not comment:
            raise NotFoundError("Comment not found", code="comment_not_found")
        return comment

    async def add_comment(self, post_id: int, author_id: int, content: str) -> Comment:
        """Add a top-level comment to a post."""
        await self.require_post(post_id)

        comment = Comment(post_id=post_id, author_id=author_id, content=content)
        self.db.add(comment)
        await self.db.commit()

        return await self.require_comment(comment.id)

    async def reply_to_comment(
        self,
        comment_id: int,
        author_id: int,
        content: str,
    ) -> Comment:
        """Reply to a comment; the reply belongs to the parent's post."""
        parent = await self.get_comment(comment_id)
        if not parent:
            raise NotFoundError("Parent comment not found", code="comment_not_found")

        reply = Comment(
            post_id=parent.post_id,
            author_id=author_id,
            parent_id=parent.id,
            content=content,
        )
        self.db.add(reply)
        await self.db.commit()

        return await self.require_comment(reply.id)

    async def get_comment_tree(
        self,
        post_id: int,
        page: int = 1,
        limit: int | None = None,
    ) -> Page:
        """
        Get a page of top-level comments with their nested replies.

        Top-level comments are newest-first; replies are oldest-first.
        Replies are fetched one tree level per query, down to
        ``forum_max_reply_depth`` levels when that is set.
        """
        limit = limit or settings.forum_comments_per_page
        await self.require_post(post_id)

        top_level = (Comment.post_id == post_id, Comment.parent_id.is_(None))

        total = (
            await self.db.execute(select(func.count(Comment.id)).where(*top_level))
        ).scalar_one()

        query = (
            select(Comment)
            .options(selectinload(Comment.author))
            .where(*top_level)
            .order_by(Comment.created_at.desc(), Comment.id.desc())
            .limit(limit)
            .offset((page - 1) * limit)
            .execution_options(populate_existing=True)
        )
        roots = list((await self.db.execute(query)).scalars().all())

        descendants = await self._fetch_descendants(
            [c.id for c in roots],
            max_depth=settings.forum_max_reply_depth,
        )

        return Page(
            items=build_comment_tree(roots, descendants),
            total=total,
            page=page,
            limit=limit,
        )

    async def update_comment(self, comment_id: int, user_id: int, content: str) -> Comment:
        """
        Update comment content.

        Raises:
            NotFoundError: Comment does not exist
            AuthorizationError: User is not the author
        """
        comment = await self.require_comment(comment_id)
        if comment.author_id != user_id:
            raise AuthorizationError("Not authorized to update this comment")

        comment.content = content
        comment.updated_at = utcnow()

        await self.db.commit()
        return comment

    async def delete_comment(self, comment_id: int, user_id: int) -> int:
        """
        Delete a comment, its whole reply subtree and votes on all of them.

        Returns:
            Number of comments deleted
        """
        comment = await self.require_comment(comment_id)
        if comment.author_id != user_id:
            raise AuthorizationError("Not authorized to delete this comment")

        levels = [[comment_id]]
        frontier = [comment_id]
        while frontier:
            frontier = await self._child_ids(frontier)
            if frontier:
                levels.append(frontier)

        doomed = [cid for level in levels for cid in level]
        await self._delete_votes(VoteTarget.COMMENT, doomed)

        # Deepest level first so no row outlives its parent
        for level in reversed(levels):
            await self.db.execute(delete(Comment).where(Comment.id.in_(level)))
        await self.db.commit()

        logger.info(
            f"User {user_id} deleted comment {comment_id} "
            f"with {len(doomed) - 1} replies"
        )
        return len(doomed)

    # ==================== Helpers ====================

    async def _child_ids(self, parent_ids: list[int]) -> list[int]:
        query = select(Comment.id).where(Comment.parent_id.in_(parent_ids))
        return list((await self.db.execute(query)).scalars())

    async def _fetch_descendants(
        self,
        root_ids: list[int],
        max_depth: int | None = None,
    ) -> list[Comment]:
        """Breadth-first fetch of every reply below root_ids."""
        found: list[Comment] = []
        frontier = root_ids
        depth = 0

        while frontier and (max_depth is None or depth < max_depth):
            query = (
                select(Comment)
                .options(selectinload(Comment.author))
                .where(Comment.parent_id.in_(frontier))
                .order_by(Comment.created_at, Comment.id)
                .execution_options(populate_existing=True)
            )
            level = list((await self.db.execute(query)).scalars().all())
            found.extend(level)
            frontier = [c.id for c in level]
            depth += 1

        return found

    async def _delete_votes(self, target_type: VoteTarget, target_ids: list[int]) -> None:
        if not target_ids:
            return
        await self.db.execute(
            delete(Vote).where(
                Vote.target_type == target_type,
                Vote.target_id.in_(target_ids),
            )
        )
