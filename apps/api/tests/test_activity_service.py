"""Tests for the activity recorder and timeline endpoint."""
import logging

import pytest
from httpx import AsyncClient
from sqlalchemy import Text
from sqlalchemy.exc import OperationalError

from conftest import make_form
from waitlist.db.enums import ActivityType
from waitlist.db.models import Activity
from waitlist.services import activity_service


def test_log_activity_accepts_unknown_types(db, test_account):
    activity = activity_service.log_activity(db, test_account.id, "webhook_received", {"source": "x"})
    assert activity.id is not None
    assert activity.type == "webhook_received"


def test_log_activity_type_has_no_length_cap(db, test_account):
    assert isinstance(Activity.__table__.c.type.type, Text)

    long_type = "integration_" + "x" * 60
    activity = activity_service.log_activity(db, test_account.id, long_type)
    assert activity is not None
    assert db.query(Activity).filter(Activity.type == long_type).count() == 1


def test_log_activity_stores_enum_value(db, test_account):
    activity = activity_service.log_activity(db, test_account.id, ActivityType.SDK_INTEGRATED, {"website": "acme.dev"})
    assert activity.type == "sdk_integrated"


def test_record_swallows_storage_errors(db, test_account, monkeypatch, caplog):
    def broken(*args, **kwargs):
        raise OperationalError("INSERT INTO activities", {}, Exception("locked"))

    monkeypatch.setattr(activity_service, "log_activity", broken)

    with caplog.at_level(logging.ERROR, logger="waitlist.services.activity_service"):
        result = activity_service.record(db, test_account.id, ActivityType.MESSAGE, {"subscriber": "Ada"})

    assert result is None
    assert "Failed to record activity" in caplog.text


def test_list_activities_is_newest_first_and_scoped(db, test_account, other_account):
    for i in range(3):
        activity_service.log_activity(db, test_account.id, ActivityType.MESSAGE, {"n": i})
    activity_service.log_activity(db, other_account.id, ActivityType.MESSAGE, {"n": 99})

    activities = activity_service.list_activities(db, test_account.id, limit=2)
    assert [a.data["n"] for a in activities] == [2, 1]


@pytest.mark.asyncio
async def test_timeline_endpoint_adds_display_text(authed_client: AsyncClient, test_account, db):
    form = make_form(db, test_account, "Launch")
    activity_service.log_form_created(db, form)
    activity_service.log_activity(db, test_account.id, "brand_new_type", {})

    response = await authed_client.get("/api/activities")
    assert response.status_code == 200
    data = response.json()
    assert data[0]["type"] == "brand_new_type"
    assert data[0]["title"] == "Activity"
    assert data[0]["description"] == "New activity on your account"
    assert data[1]["title"] == "New form created"
    assert data[1]["description"] == "You created a new form: Launch"
    assert data[1]["formId"] == form.id


@pytest.mark.asyncio
async def test_timeline_limit_is_validated(authed_client: AsyncClient):
    response = await authed_client.get("/api/activities", params={"limit": 0})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_form_creation_survives_activity_failure(authed_client: AsyncClient, db, monkeypatch):
    def broken(*args, **kwargs):
        raise OperationalError("INSERT INTO activities", {}, Exception("locked"))

    monkeypatch.setattr(activity_service, "log_activity", broken)

    response = await authed_client.post("/api/forms", json={"name": "Resilient"})
    assert response.status_code == 201
    assert db.query(Activity).count() == 0
