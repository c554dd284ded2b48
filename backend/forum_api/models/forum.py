"""
Forum models for community discussions.

Includes:
- Posts
- Comments (threaded through parent_id)
- Votes on posts and comments
"""

from datetime import datetime
from enum import Enum as PyEnum
from typing import TYPE_CHECKING

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    SmallInteger,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from forum_api.core.database import Base, utcnow

if TYPE_CHECKING:
    from forum_api.models.user import User


class VoteTarget(str, PyEnum):
    """Kind of record a vote can be cast on."""

    POST = "Post"
    COMMENT = "Comment"

    @property
    def model(self) -> type["Post"] | type["Comment"]:
        """ORM model holding the denormalized counters for this kind."""
        if self is VoteTarget.POST:
            return Post
        return Comment


class Post(Base):
    """Forum post."""

    __tablename__ = "posts"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    author_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)

    title: Mapped[str] = mapped_column(String(100))
    content: Mapped[str] = mapped_column(Text)

    # Stats (denormalized from votes)
    upvotes: Mapped[int] = mapped_column(Integer, default=0)
    downvotes: Mapped[int] = mapped_column(Integer, default=0)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    # Relationships
    author: Mapped["User"] = relationship(back_populates="posts")

    def __repr__(self) -> str:
        return f"<Post {self.title[:30]}>"


class Comment(Base):
    """Comment on a post, or a reply to another comment."""

    __tablename__ = "comments"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(ForeignKey("posts.id"), index=True)
    author_id: Mapped[int] = mapped_column(ForeignKey("users.id"))
    parent_id: Mapped[int | None] = mapped_column(
        ForeignKey("comments.id"), index=True
    )

    content: Mapped[str] = mapped_column(Text)

    # Stats (denormalized from votes)
    upvotes: Mapped[int] = mapped_column(Integer, default=0)
    downvotes: Mapped[int] = mapped_column(Integer, default=0)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    # Relationships
    author: Mapped["User"] = relationship(back_populates="comments")

    def __repr__(self) -> str:
        return f"<Comment {self.id} on post {self.post_id}>"


class Vote(Base):
    """Up (+1) or down (-1) vote by a user on a post or comment."""

    __tablename__ = "votes"
    __table_args__ = (
        UniqueConstraint(
            "user_id", "target_type", "target_id", name="uq_votes_user_target"
        ),
        CheckConstraint("value IN (1, -1)", name="ck_votes_value"),
        Index("ix_votes_target", "target_type", "target_id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"))

    # Polymorphic target, no foreign key
    target_type: Mapped[VoteTarget] = mapped_column(
        Enum(
            VoteTarget,
            name="vote_target",
            values_callable=lambda kinds: [k.value for k in kinds],
        )
    )
    target_id: Mapped[int] = mapped_column(Integer)

    value: Mapped[int] = mapped_column(SmallInteger)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    def __repr__(self) -> str:
        return f"<Vote {self.value:+d} by {self.user_id} on {self.target_type.value} {self.target_id}>"
