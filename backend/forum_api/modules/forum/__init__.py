"""
Forum Module - Community discussions.

Features:
- Posts with search, sorting and pagination
- Threaded comments
- Up/down votes with denormalized counters
"""

from forum_api.modules.forum.service import ForumService, Page
from forum_api.modules.forum.votes import VoteOutcome, VoteResult, VoteService

__all__ = [
    "ForumService",
    "Page",
    "VoteOutcome",
    "VoteResult",
    "VoteService",
]
