"""Schemas for dashboard widgets."""

from waitlist.schemas.common import CamelModel


class DashboardStats(CamelModel):
    total_subscribers: int
    this_month: int
    # Placeholder: impressions are not tracked, so no rate can be computed
    conversion_rate: float | None = None
    active_forms: int
