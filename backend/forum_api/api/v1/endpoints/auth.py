"""
Auth API Endpoints.

Registration, login and the current user's profile.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, EmailStr, StringConstraints
from sqlalchemy.ext.asyncio import AsyncSession

from forum_api.api.v1.deps import get_current_user
from forum_api.core.database import get_db
from forum_api.models.user import User
from forum_api.modules.auth import AuthService
from forum_api.modules.forum.serializers import user_profile_to_dict

router = APIRouter()


# ==================== Schemas ====================


class RegisterRequest(BaseModel):
    """Create an account."""

    username: Annotated[
        str, StringConstraints(strip_whitespace=True, min_length=1, max_length=50)
    ]
    email: EmailStr
    password: Annotated[str, StringConstraints(min_length=1, max_length=128)]


class LoginRequest(BaseModel):
    """Exchange credentials for a token."""

    email: EmailStr
    password: Annotated[str, StringConstraints(min_length=1)]


# ==================== Endpoints ====================


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    request: RegisterRequest,
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Register a new user and return an access token."""
    token = await AuthService(db).register(
        username=request.username,
        email=request.email,
        password=request.password,
    )
    return {"success": True, "token": token}


@router.post("/login")
async def login(
    request: LoginRequest,
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Log in with email and password."""
    token = await AuthService(db).login(request.email, request.password)
    return {"success": True, "token": token}


@router.get("/me")
async def me(user: User = Depends(get_current_user)) -> dict[str, Any]:
    """Get the authenticated user's profile."""
    return {"success": True, "data": user_profile_to_dict(user)}
