"""
Shared endpoint dependencies.
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from forum_api.core.database import get_db
from forum_api.core.exceptions import NotAuthenticatedError
from forum_api.models.user import User
from forum_api.modules.auth import AuthService


def get_token_from_header(request: Request) -> str | None:
    """Extract Bearer token from Authorization header."""
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        return None

    parts = auth_header.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None

    return parts[1]


async def get_current_user(
    token: str | None = Depends(get_token_from_header),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Resolve the request's bearer token to a user, or fail with 401."""
    if not token:
        raise NotAuthenticatedError("Not authorized, no token", code="missing_token")

    return await AuthService(db).authenticate(token)
