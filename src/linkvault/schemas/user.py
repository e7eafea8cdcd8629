"""Pydantic schemas for registration, login and the profile."""

import uuid
from datetime import datetime

from pydantic import Field

from linkvault.schemas.base import WireModel


class Credentials(WireModel):
    """Body of POST /api/users and POST /api/auth/login."""
    email: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1)


class UserRead(WireModel):
    id: uuid.UUID
    email: str
    created_at: datetime


class UserEnvelope(WireModel):
    message: str
    user: UserRead


class TokenResponse(WireModel):
    message: str
    token: str
