"""Tests for dashboard stats."""
from datetime import datetime, timezone

import pytest
from httpx import AsyncClient

from conftest import make_form, make_subscriber
from waitlist.services import dashboard_service


def test_start_of_month():
    now = datetime(2026, 3, 17, 15, 30, 12, 999, tzinfo=timezone.utc)
    assert dashboard_service.start_of_month(now) == datetime(2026, 3, 1, tzinfo=timezone.utc)


def test_stats_count_this_month_separately(db, test_account):
    form = make_form(db, test_account)
    make_subscriber(db, form, "old@example.com", created_at=datetime(2026, 2, 27, tzinfo=timezone.utc))
    make_subscriber(db, form, "new@example.com", created_at=datetime(2026, 3, 2, tzinfo=timezone.utc))

    stats = dashboard_service.get_stats(
        db, test_account.id, now=datetime(2026, 3, 17, tzinfo=timezone.utc)
    )
    assert stats == {
        "total_subscribers": 2,
        "this_month": 1,
        "conversion_rate": None,
        "active_forms": 1,
    }


@pytest.mark.asyncio
async def test_stats_for_account_without_forms(authed_client: AsyncClient):
    response = await authed_client.get("/api/dashboard/stats")
    assert response.status_code == 200
    assert response.json() == {
        "totalSubscribers": 0,
        "thisMonth": 0,
        "conversionRate": None,
        "activeForms": 0,
    }


@pytest.mark.asyncio
async def test_stats_exclude_other_accounts(authed_client: AsyncClient, test_account, other_account, db):
    mine = make_form(db, test_account)
    theirs = make_form(db, other_account)
    make_subscriber(db, mine, "a@example.com")
    make_subscriber(db, theirs, "b@example.com")
    make_subscriber(db, theirs, "c@example.com")

    response = await authed_client.get("/api/dashboard/stats")
    data = response.json()
    assert data["totalSubscribers"] == 1
    assert data["thisMonth"] == 1
    assert data["activeForms"] == 1
