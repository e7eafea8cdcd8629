"""JWT access token creation and verification.

Tokens carry the user id under ``userId`` plus ``iat``/``exp``. They are
signed with the shared secret from LINKVAULT_JWT_SECRET and expire after
``access_token_expire_minutes`` (60 by default).
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from linkvault.config import settings


class TokenError(Exception):
    """Raised when a token cannot be verified."""


def create_access_token(
    user_id: uuid.UUID | str,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Create a signed access token for ``user_id``."""
    now = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)
    payload = {
        "userId": str(user_id),
        "iat": now,
        "exp": now + expires_delta,
    }
    return jwt.encode(
        payload,
        settings.jwt_secret.get_secret_value(),
        algorithm=settings.jwt_algorithm,
    )


def verify_token(token: str) -> uuid.UUID:
    """Verify a token and return the user id it was issued for.

    Fails closed: bad signature, expiry, missing claims and a malformed
    user id all raise TokenError.
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret.get_secret_value(),
            algorithms=[settings.jwt_algorithm],
            options={"require": ["exp", "iat"]},
        )
    except jwt.ExpiredSignatureError:
        raise TokenError("Token has expired")
    except jwt.InvalidTokenError as e:
        raise TokenError(f"Invalid token: {e}")

    try:
        return uuid.UUID(str(payload["userId"]))
    except (KeyError, ValueError):
        raise TokenError("Invalid token: missing or malformed userId")
