"""Schemas for waitlist forms."""

from datetime import datetime
from typing import Any

from pydantic import Field

from waitlist.schemas.common import CamelModel


class FormCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=150)
    description: str | None = None
    collect_name: bool = True
    collect_email: bool = True
    social_sharing: bool = False
    confirmation_email: bool = True
    custom_css: str | None = None
    redirect_url: str | None = Field(None, max_length=2048)
    settings: dict[str, Any] | None = None


class FormUpdate(CamelModel):
    """Partial update: only fields present in the request body are applied."""
    name: str | None = Field(None, min_length=1, max_length=150)
    description: str | None = None
    collect_name: bool | None = None
    collect_email: bool | None = None
    social_sharing: bool | None = None
    confirmation_email: bool | None = None
    custom_css: str | None = None
    redirect_url: str | None = Field(None, max_length=2048)
    settings: dict[str, Any] | None = None


class FormRead(CamelModel):
    """Full form, owner view."""
    id: int
    owner_id: int
    name: str
    description: str | None
    collect_name: bool
    collect_email: bool
    social_sharing: bool
    confirmation_email: bool
    custom_css: str | None
    redirect_url: str | None
    settings: dict[str, Any] | None
    created_at: datetime
    updated_at: datetime


class FormPublicDescriptor(CamelModel):
    """Redacted projection served to the widget (no owner id, no settings)."""
    id: int
    name: str
    description: str | None = None
    collect_name: bool
    collect_email: bool
    social_sharing: bool
    confirmation_email: bool
    custom_css: str | None = None
    redirect_url: str | None = None
