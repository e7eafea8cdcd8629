"""Password hashing utilities.

bcrypt salts automatically; the work factor comes from
LINKVAULT_BCRYPT_ROUNDS (10 by default). Passwords are truncated to
72 bytes, bcrypt's input limit.
"""

from functools import lru_cache

import bcrypt

from linkvault.config import settings


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:72]


def hash_password(password: str) -> str:
    """Hash a password with bcrypt at the configured cost."""
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(_encode(password), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a password against a stored bcrypt hash."""
    try:
        return bcrypt.checkpw(_encode(password), password_hash.encode("utf-8"))
    except (ValueError, TypeError):
        return False


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return hash_password("linkvault-dummy-password")


def burn_password_check(password: str) -> None:
    """Spend the same bcrypt work as a real check when no user matched.

    Keeps login timing from revealing whether an email is registered.
    """
    verify_password(password, _dummy_hash())
