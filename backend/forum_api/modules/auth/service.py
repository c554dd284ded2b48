"""
Auth Service - Registration, login and token subjects.
"""

from jose import JWTError
from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from forum_api.core.database import is_valid_id
from forum_api.core.exceptions import (
    InvalidCredentialsError,
    NotAuthenticatedError,
    UserExistsError,
)
from forum_api.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from forum_api.models.user import User


class AuthService:
    """
    Service for user accounts and bearer tokens.

    Usage:
        auth = AuthService(db_session)
        token = await auth.login("a@x.com", "secret")
    """

    def __init__(self, db: AsyncSession) -> None:
        """Initialize auth service with database session."""
        self.db = db

    async def get_user(self, user_id: int) -> User | None:
        """Get user by ID."""
        if not is_valid_id(user_id):
            return None
        return await self.db.get(User, user_id)

    async def get_user_by_email(self, email: str) -> User | None:
        """Get user by email (case-insensitive)."""
        query = select(User).where(User.email == email.lower())
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def register(self, username: str, email: str, password: str) -> str:
        """
        Create a user account.

        Args:
            username: Display name
            email: Login email, must be unused
            password: Plain text password

        Returns:
            Access token for the new user

        Raises:
            UserExistsError: If the email is already registered
        """
        if await self.get_user_by_email(email):
            raise UserExistsError()

        user = User(
            username=username,
            email=email.lower(),
            hashed_password=hash_password(password),
        )
        self.db.add(user)

        try:
            await self.db.commit()
        except IntegrityError:
            # Lost a race against a concurrent registration
            await self.db.rollback()
            raise UserExistsError() from None

        logger.info(f"Registered user {user.id} ({user.username})")
        return create_access_token(user.id)

    async def login(self, email: str, password: str) -> str:
        """
        Exchange credentials for an access token.

        Unknown email and wrong password fail identically.
        """
        user = await self.get_user_by_email(email)
        if not user or not verify_password(password, user.hashed_password):
            raise InvalidCredentialsError()

        return create_access_token(user.id)

    async def authenticate(self, token: str) -> User:
        """Resolve a bearer token to its user."""
        try:
            payload = decode_access_token(token)
            user_id = int(payload["sub"])
        except (JWTError, ValueError) as e:
            logger.debug(f"Rejected bearer token: {e}")
            raise NotAuthenticatedError() from None

        user = await self.get_user(user_id)
        if not user:
            raise NotAuthenticatedError()
        return user
