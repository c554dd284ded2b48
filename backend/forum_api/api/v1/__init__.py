"""
API Version 1 Router.

Combines all API endpoints under the configured API prefix.
"""

from fastapi import APIRouter

from forum_api.api.v1.endpoints import auth, comments, posts, votes

router = APIRouter()

# Include endpoint routers
router.include_router(auth.router, prefix="/auth", tags=["Auth"])
router.include_router(posts.router, prefix="/posts", tags=["Posts"])
router.include_router(comments.router, prefix="/comments", tags=["Comments"])
router.include_router(votes.router, tags=["Votes"])
