"""Schemas for subscribers."""

from datetime import datetime
from typing import Any

from pydantic import EmailStr, Field

from waitlist.schemas.common import CamelModel


class SubscriberCreate(CamelModel):
    form_id: int
    email: EmailStr
    name: str | None = Field(None, max_length=255)
    referrer: str | None = Field(None, max_length=2048)
    ip_address: str | None = Field(None, max_length=64)
    metadata: dict[str, Any] | None = None


class SubscriberPublicRead(CamelModel):
    """Returned to the (anonymous) submitter."""
    id: int
    form_id: int
    email: str
    name: str | None = None
    referrer: str | None = None
    created_at: datetime


class SubscriberRead(SubscriberPublicRead):
    """Owner view, includes capture details."""
    ip_address: str | None = None
    metadata: dict[str, Any] | None = None
