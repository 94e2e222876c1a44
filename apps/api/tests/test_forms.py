"""Tests for owner-side form management."""
from datetime import datetime, timezone

import pytest
from httpx import AsyncClient

from conftest import make_form, make_subscriber
from waitlist.db.models import Activity, Form, Subscriber


@pytest.mark.asyncio
async def test_create_form_applies_defaults(authed_client: AsyncClient, test_account, db):
    response = await authed_client.post("/api/forms", json={"name": "Launch"})
    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "Launch"
    assert data["ownerId"] == test_account.id
    assert data["collectName"] is True
    assert data["collectEmail"] is True
    assert data["socialSharing"] is False
    assert data["confirmationEmail"] is True

    activity = db.query(Activity).filter(Activity.form_id == data["id"]).one()
    assert activity.type == "form_created"
    assert activity.data == {"formName": "Launch"}


@pytest.mark.asyncio
async def test_create_form_ignores_owner_in_body(authed_client: AsyncClient, test_account, other_account):
    response = await authed_client.post(
        "/api/forms",
        json={"name": "Sneaky", "ownerId": other_account.id},
    )
    assert response.status_code == 201
    assert response.json()["ownerId"] == test_account.id


@pytest.mark.asyncio
async def test_create_form_requires_name(authed_client: AsyncClient):
    response = await authed_client.post("/api/forms", json={"name": ""})
    assert response.status_code == 400
    assert response.json()["detail"] == "Validation error"


@pytest.mark.asyncio
async def test_create_form_requires_csrf_header(authed_client: AsyncClient):
    response = await authed_client.post(
        "/api/forms",
        json={"name": "Launch"},
        headers={"X-Requested-With": ""},
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_create_form_requires_session(client: AsyncClient):
    response = await client.post("/api/forms", json={"name": "Launch"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_list_forms_only_returns_own_newest_first(
    authed_client: AsyncClient, test_account, other_account, db
):
    first = make_form(db, test_account, "First")
    second = make_form(db, test_account, "Second")
    make_form(db, other_account, "Not mine")

    response = await authed_client.get("/api/forms")
    assert response.status_code == 200
    assert [f["id"] for f in response.json()] == [second.id, first.id]


@pytest.mark.asyncio
async def test_toggles_round_trip_to_public_descriptor(authed_client: AsyncClient, client: AsyncClient):
    created = await authed_client.post(
        "/api/forms",
        json={
            "name": "Beta",
            "description": "Early access",
            "collectName": False,
            "socialSharing": True,
            "confirmationEmail": False,
            "settings": {"theme": "dark"},
        },
    )
    form_id = created.json()["id"]

    response = await client.get(f"/api/sdk/form/{form_id}")
    assert response.status_code == 200
    descriptor = response.json()
    assert descriptor["name"] == "Beta"
    assert descriptor["description"] == "Early access"
    assert descriptor["collectName"] is False
    assert descriptor["collectEmail"] is True
    assert descriptor["socialSharing"] is True
    assert descriptor["confirmationEmail"] is False
    assert "ownerId" not in descriptor
    assert "settings" not in descriptor


@pytest.mark.asyncio
async def test_update_is_partial_and_advances_updated_at(
    authed_client: AsyncClient, test_account, db
):
    form = make_form(db, test_account, "Launch", description="Keep me", collect_name=False)
    form.updated_at = datetime(2020, 1, 1, tzinfo=timezone.utc)
    db.commit()

    response = await authed_client.put(f"/api/forms/{form.id}", json={"name": "Relaunch"})
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Relaunch"
    assert data["description"] == "Keep me"
    assert data["collectName"] is False
    assert not data["updatedAt"].startswith("2020")

    activity = (
        db.query(Activity)
        .filter(Activity.form_id == form.id, Activity.type == "form_updated")
        .one()
    )
    assert activity.data == {"formName": "Relaunch"}


@pytest.mark.asyncio
async def test_empty_update_still_touches_updated_at(authed_client: AsyncClient, test_account, db):
    form = make_form(db, test_account)
    form.updated_at = datetime(2020, 1, 1, tzinfo=timezone.utc)
    db.commit()

    response = await authed_client.put(f"/api/forms/{form.id}", json={})
    assert response.status_code == 200
    assert not response.json()["updatedAt"].startswith("2020")


@pytest.mark.asyncio
async def test_update_can_clear_optional_fields(authed_client: AsyncClient, test_account, db):
    form = make_form(db, test_account, description="Old", redirect_url="https://example.com/thanks")

    response = await authed_client.put(
        f"/api/forms/{form.id}",
        json={"description": None, "redirectUrl": None, "name": None},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["description"] is None
    assert data["redirectUrl"] is None
    # name cannot be null; an explicit null leaves it untouched
    assert data["name"] == "Launch"


@pytest.mark.asyncio
async def test_delete_form_cleans_up_references(authed_client: AsyncClient, test_account, db):
    form = make_form(db, test_account, "Doomed")
    form_id = form.id
    make_subscriber(db, form, "a@example.com")
    db.add(Activity(account_id=test_account.id, form_id=form_id, type="form_created", data={"formName": "Doomed"}))
    db.commit()

    response = await authed_client.delete(f"/api/forms/{form_id}")
    assert response.status_code == 204

    db.expire_all()
    assert db.get(Form, form_id) is None
    assert db.query(Subscriber).filter(Subscriber.form_id == form_id).count() == 0

    activities = db.query(Activity).filter(Activity.account_id == test_account.id).all()
    assert all(a.form_id is None and a.subscriber_id is None for a in activities)
    deleted = [a for a in activities if a.type == "form_deleted"]
    assert len(deleted) == 1
    assert deleted[0].data == {"formName": "Doomed"}

    missing = await authed_client.get(f"/api/forms/{form_id}")
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_preview_renders_widget_markup(authed_client: AsyncClient, test_account, db):
    form = make_form(db, test_account, "Beta <launch>", collect_name=False)

    response = await authed_client.get(f"/api/forms/{form.id}/preview")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    body = response.text
    assert "Beta &lt;launch&gt;" in body
    assert 'name="email"' in body
    assert 'name="name"' not in body
    assert 'id="waitlist-sdk-styles"' in body
