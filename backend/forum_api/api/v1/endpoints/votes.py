"""
Vote API Endpoints.

One route serves both posts and comments:
POST /{posts|comments}/{target_id}/vote
"""

from enum import Enum as PyEnum
from typing import Annotated, Any, Literal

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from forum_api.api.v1.deps import get_current_user
from forum_api.core.database import get_db
from forum_api.models.forum import VoteTarget
from forum_api.models.user import User
from forum_api.modules.forum import VoteResult, VoteService
from forum_api.modules.forum.serializers import vote_to_dict

router = APIRouter()


class VoteCollection(str, PyEnum):
    """URL segment naming the voted-on collection."""

    POSTS = "posts"
    COMMENTS = "comments"

    @property
    def target(self) -> VoteTarget:
        if self is VoteCollection.POSTS:
            return VoteTarget.POST
        return VoteTarget.COMMENT


class VoteRequest(BaseModel):
    """1 for upvote, -1 for downvote."""

    # Strict so JSON true is not read as 1
    value: Annotated[Literal[1, -1], Field(strict=True)]


MESSAGES = {
    VoteResult.CAST: "Vote cast",
    VoteResult.CHANGED: "Vote changed",
    VoteResult.REMOVED: "Vote removed",
}


@router.post("/{collection}/{target_id}/vote")
async def vote(
    collection: VoteCollection,
    target_id: int,
    request: VoteRequest,
    response: Response,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """
    Vote on a post or comment.

    Repeating the same vote removes it; the opposite value changes it.
    Returns 201 for a new vote, 200 otherwise.
    """
    outcome = await VoteService(db).cast_vote(
        user_id=user.id,
        target_type=collection.target,
        target_id=target_id,
        value=request.value,
    )

    if outcome.result is VoteResult.CAST:
        response.status_code = status.HTTP_201_CREATED

    body: dict[str, Any] = {
        "success": True,
        "message": MESSAGES[outcome.result],
        "result": outcome.result.value,
        "upvotes": outcome.upvotes,
        "downvotes": outcome.downvotes,
    }
    if outcome.vote is not None:
        body["data"] = vote_to_dict(outcome.vote)
    return body
