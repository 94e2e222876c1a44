"""Tests for the public widget endpoints (descriptor fetch and signup)."""
import pytest
from httpx import AsyncClient
from sqlalchemy.exc import OperationalError

from conftest import make_form
from waitlist.db.models import Activity, Subscriber
from waitlist.services import form_service


@pytest.mark.asyncio
async def test_descriptor_for_missing_form_is_404(client: AsyncClient):
    response = await client.get("/api/sdk/form/424242")
    assert response.status_code == 404
    assert response.json() == {"detail": "Form not found"}


@pytest.mark.asyncio
async def test_storage_failure_is_503_without_internal_detail(client: AsyncClient, monkeypatch):
    def broken_get_form(db, form_id):
        raise OperationalError("SELECT * FROM forms", {}, Exception("secret-internal connection refused"))

    monkeypatch.setattr(form_service, "get_form", broken_get_form)

    response = await client.get("/api/sdk/form/1")
    assert response.status_code == 503
    assert response.json() == {"detail": "Storage unavailable"}
    assert "secret-internal" not in response.text


@pytest.mark.asyncio
async def test_submit_creates_subscriber_and_activity(client: AsyncClient, test_account, db):
    form = make_form(db, test_account, "Launch")

    response = await client.post(
        "/api/subscribers",
        json={
            "formId": form.id,
            "email": "ada@example.com",
            "name": "Ada",
            "referrer": "https://customer.example/landing",
        },
    )
    assert response.status_code == 201
    data = response.json()
    assert data["formId"] == form.id
    assert data["email"] == "ada@example.com"
    assert data["name"] == "Ada"
    assert data["referrer"] == "https://customer.example/landing"
    assert "ipAddress" not in data

    subscriber = db.get(Subscriber, data["id"])
    assert subscriber.ip_address is not None

    activity = db.query(Activity).filter(Activity.type == "new_subscriber").one()
    assert activity.account_id == test_account.id
    assert activity.form_id == form.id
    assert activity.subscriber_id == subscriber.id
    assert activity.data == {"email": "ada@example.com", "name": "Ada", "formName": "Launch"}


@pytest.mark.asyncio
async def test_submit_without_name_stores_null(client: AsyncClient, test_account, db):
    form = make_form(db, test_account, collect_name=False)

    response = await client.post(
        "/api/subscribers",
        json={"formId": form.id, "email": "grace@example.com"},
    )
    assert response.status_code == 201
    assert response.json()["name"] is None


@pytest.mark.asyncio
async def test_submit_to_missing_form_writes_nothing(client: AsyncClient, db):
    response = await client.post(
        "/api/subscribers",
        json={"formId": 9999, "email": "ada@example.com"},
    )
    assert response.status_code == 404
    assert db.query(Subscriber).count() == 0
    assert db.query(Activity).count() == 0


@pytest.mark.asyncio
async def test_submit_rejects_invalid_email(client: AsyncClient, test_account, db):
    form = make_form(db, test_account)

    response = await client.post(
        "/api/subscribers",
        json={"formId": form.id, "email": "not-an-email"},
    )
    assert response.status_code == 400
    body = response.json()
    assert body["detail"] == "Validation error"
    assert any(error["loc"][-1] == "email" for error in body["errors"])
    assert db.query(Subscriber).count() == 0


@pytest.mark.asyncio
async def test_duplicate_signups_are_accepted(client: AsyncClient, test_account, db):
    form = make_form(db, test_account)
    payload = {"formId": form.id, "email": "twice@example.com"}

    first = await client.post("/api/subscribers", json=payload)
    second = await client.post("/api/subscribers", json=payload)
    assert first.status_code == 201
    assert second.status_code == 201
    assert first.json()["id"] != second.json()["id"]


@pytest.mark.asyncio
async def test_explicit_ip_address_is_kept(client: AsyncClient, test_account, db):
    form = make_form(db, test_account)

    response = await client.post(
        "/api/subscribers",
        json={"formId": form.id, "email": "ip@example.com", "ipAddress": "203.0.113.7"},
    )
    assert response.status_code == 201
    assert db.get(Subscriber, response.json()["id"]).ip_address == "203.0.113.7"


@pytest.mark.asyncio
async def test_submit_succeeds_when_activity_write_fails(
    client: AsyncClient, test_account, db, monkeypatch
):
    from sqlalchemy.exc import OperationalError

    from waitlist.services import activity_service

    def broken_log_activity(*args, **kwargs):
        raise OperationalError("INSERT INTO activities", {}, Exception("disk full"))

    monkeypatch.setattr(activity_service, "log_activity", broken_log_activity)
    form = make_form(db, test_account)

    response = await client.post(
        "/api/subscribers",
        json={"formId": form.id, "email": "resilient@example.com"},
    )
    assert response.status_code == 201
    assert db.query(Subscriber).count() == 1
    assert db.query(Activity).count() == 0
