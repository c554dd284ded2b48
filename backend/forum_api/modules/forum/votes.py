"""
Vote Service - Up/down votes on posts and comments.

Each user holds at most one vote per target. Casting the same value
twice removes the vote, casting the opposite value flips it. After
every change the target's upvotes/downvotes are recounted from the
votes table in the same transaction.
"""

from dataclasses import dataclass
from enum import Enum as PyEnum

from loguru import logger
from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from forum_api.core.database import is_valid_id
from forum_api.core.exceptions import ConflictError, NotFoundError, ValidationError
from forum_api.models.forum import Vote, VoteTarget

UPVOTE = 1
DOWNVOTE = -1


class VoteResult(str, PyEnum):
    """What a cast did to the user's vote."""

    CAST = "cast"
    CHANGED = "changed"
    REMOVED = "removed"


@dataclass
class VoteOutcome:
    """Result of a cast plus the target's fresh counters."""

    result: VoteResult
    vote: Vote | None
    upvotes: int
    downvotes: int


class VoteService:
    """
    Vote ledger with denormalized counters.

    Usage:
        votes = VoteService(db_session)
        outcome = await votes.cast_vote(user_id, VoteTarget.POST, post_id, 1)
    """

    def __init__(self, db: AsyncSession) -> None:
        """Initialize vote service with database session."""
        self.db = db

    async def get_user_vote(
        self,
        user_id: int,
        target_type: VoteTarget,
        target_id: int,
    ) -> Vote | None:
        """Get the user's current vote on a target."""
        query = select(Vote).where(
            Vote.user_id == user_id,
            Vote.target_type == target_type,
            Vote.target_id == target_id,
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def cast_vote(
        self,
        user_id: int,
        target_type: VoteTarget,
        target_id: int,
        value: int,
    ) -> VoteOutcome:
        """
        Cast, flip or withdraw a vote.

        Args:
            user_id: Voter
            target_type: Post or comment
            target_id: Target ID
            value: 1 for upvote, -1 for downvote

        Returns:
            Outcome with the resulting vote (None when removed)

        Raises:
            ValidationError: Value is not 1 or -1
            NotFoundError: Target does not exist
            ConflictError: A concurrent first vote by the same user won
        """
        if value not in (UPVOTE, DOWNVOTE):
            raise ValidationError(
                "Vote value must be 1 (upvote) or -1 (downvote)",
                code="invalid_vote_value",
            )

        target = None
        if is_valid_id(target_id):
            target = await self.db.get(target_type.model, target_id)
        if target is None:
            raise NotFoundError(
                f"{target_type.value} not found",
                code=f"{target_type.value.lower()}_not_found",
            )

        existing = await self.get_user_vote(user_id, target_type, target_id)

        try:
            if existing is None:
                vote = Vote(
                    user_id=user_id,
                    target_type=target_type,
                    target_id=target_id,
                    value=value,
                )
                self.db.add(vote)
                result = VoteResult.CAST
            elif existing.value == value:
                await self.db.delete(existing)
                vote = None
                result = VoteResult.REMOVED
            else:
                existing.value = value
                vote = existing
                result = VoteResult.CHANGED

            await self.db.flush()
            upvotes, downvotes = await self.recount(target_type, target_id)
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            logger.warning(
                f"Duplicate vote by user {user_id} on "
                f"{target_type.value} {target_id}"
            )
            raise ConflictError(
                "You have already voted on this item.", code="duplicate_vote"
            ) from None

        logger.info(
            f"Vote {result.value} by user {user_id} on {target_type.value} "
            f"{target_id}: +{upvotes}/-{downvotes}"
        )
        return VoteOutcome(
            result=result,
            vote=vote,
            upvotes=upvotes,
            downvotes=downvotes,
        )

    async def recount(self, target_type: VoteTarget, target_id: int) -> tuple[int, int]:
        """
        Recount a target's votes and store them on the target.

        Returns:
            (upvotes, downvotes)
        """
        query = (
            select(Vote.value, func.count(Vote.id))
            .where(Vote.target_type == target_type, Vote.target_id == target_id)
            .group_by(Vote.value)
        )
        counts = dict((await self.db.execute(query)).all())
        upvotes = counts.get(UPVOTE, 0)
        downvotes = counts.get(DOWNVOTE, 0)

        model = target_type.model
        await self.db.execute(
            update(model)
            .where(model.id == target_id)
            .values(upvotes=upvotes, downvotes=downvotes)
        )
        return upvotes, downvotes
