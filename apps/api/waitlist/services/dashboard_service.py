"""Dashboard service - headline metrics for an account."""

from datetime import datetime, timezone

from sqlalchemy.orm import Session

from waitlist.services import form_service, subscriber_service


def start_of_month(now: datetime) -> datetime:
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def get_stats(db: Session, account_id: int, now: datetime | None = None) -> dict:
    """
    Compute dashboard stats.

    ``conversion_rate`` is always None: impressions are not tracked, so there
    is nothing to divide by. Clients should render it as unavailable.
    """
    now = now or datetime.now(timezone.utc)
    return {
        "total_subscribers": subscriber_service.count_subscribers(db, account_id=account_id),
        "this_month": subscriber_service.count_subscribers_since(
            db, account_id, start_of_month(now)
        ),
        "conversion_rate": None,
        "active_forms": form_service.count_active_forms(db, account_id),
    }
