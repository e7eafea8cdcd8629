"""Auth service — registration and credential login.

Service layer separates business logic from HTTP routing. Routes call
services, services call the database; both raise linkvault.errors types
that the exception handlers turn into JSON responses.
"""

import uuid

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from linkvault.auth.jwt import create_access_token
from linkvault.auth.password import burn_password_check, hash_password, verify_password
from linkvault.db.models import User
from linkvault.errors import AuthError, ConflictError, ValidationError

logger = structlog.get_logger()

DUPLICATE_EMAIL = "A user with this email already exists."
INVALID_CREDENTIALS = "Invalid credentials."


class AuthService:
    """User registration, login and lookup."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_email(self, email: str) -> User | None:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalars().first()

    async def get_user(self, user_id: uuid.UUID) -> User | None:
        return await self.db.get(User, user_id)

    async def register(self, email: str, password: str) -> User:
        """Create an account. Raises ConflictError if the email is taken."""
        email = (email or "").strip()
        if not email or not password:
            raise ValidationError("Email and password are required.")

        if await self.get_by_email(email):
            raise ConflictError(DUPLICATE_EMAIL)

        user = User(email=email, password_hash=hash_password(password))
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration for the same email.
            await self.db.rollback()
            raise ConflictError(DUPLICATE_EMAIL)

        logger.info("auth.registered", user_id=str(user.id))
        return user

    async def login(self, email: str, password: str) -> str:
        """Check credentials and return a fresh access token.

        Unknown email and wrong password fail identically.
        """
        email = (email or "").strip()
        if not email or not password:
            raise ValidationError("Email and password are required.")

        user = await self.get_by_email(email)
        if user is None:
            burn_password_check(password)
            logger.info("auth.login_failed")
            raise AuthError(INVALID_CREDENTIALS)

        if not verify_password(password, user.password_hash):
            logger.info("auth.login_failed")
            raise AuthError(INVALID_CREDENTIALS)

        logger.info("auth.login", user_id=str(user.id))
        return create_access_token(user.id)
