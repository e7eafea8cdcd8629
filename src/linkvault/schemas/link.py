"""Pydantic schemas for links."""

import uuid
from datetime import datetime

from pydantic import Field

from linkvault.schemas.base import WireModel


class LinkCreate(WireModel):
    title: str = Field(..., min_length=1, max_length=255)
    url: str = Field(..., min_length=1)


class LinkRead(WireModel):
    id: uuid.UUID
    title: str
    url: str
    owner_id: uuid.UUID
    created_at: datetime


class MessageResponse(WireModel):
    message: str
