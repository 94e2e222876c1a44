"""Schemas for the activity timeline."""

from datetime import datetime
from typing import Any

from waitlist.schemas.common import CamelModel


class ActivityRead(CamelModel):
    id: int
    account_id: int
    form_id: int | None = None
    subscriber_id: int | None = None
    type: str
    data: dict[str, Any] | None = None
    created_at: datetime
    # Display text computed on read
    title: str
    description: str
