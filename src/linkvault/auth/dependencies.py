"""Request gate — FastAPI auth dependency.

get_current_user runs before every protected route:

1. require ``Authorization: Bearer <token>``
2. verify signature and expiry (one message for expired and invalid)
3. load the user the token was issued for
4. expose it on ``request.state.user`` and return it

Nothing is cached between requests and nothing is written.
"""

from typing import Optional

import structlog
from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from linkvault.auth.jwt import TokenError, verify_token
from linkvault.db.engine import get_db
from linkvault.db.models import User
from linkvault.errors import AuthError

logger = structlog.get_logger()


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def get_current_user(
    request: Request,
    authorization: Optional[str] = Header(None),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Resolve the authenticated user or raise a 401."""
    token = _bearer_token(authorization)
    if token is None:
        raise AuthError("Not authorized, no token.")

    try:
        user_id = verify_token(token)
    except TokenError as e:
        logger.info("auth.token_rejected", reason=str(e))
        raise AuthError("Not authorized, token failed.")

    user = await db.get(User, user_id)
    if user is None:
        logger.info("auth.token_user_missing", user_id=str(user_id))
        raise AuthError("Not authorized, user not found.")

    request.state.user = user
    structlog.contextvars.bind_contextvars(user_id=str(user.id))
    return user
