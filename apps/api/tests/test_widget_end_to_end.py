"""Widget runtime driven against the real API over ASGITransport."""
import pytest
from httpx import ASGITransport, AsyncClient

from conftest import make_form
from waitlist.db.models import Activity, Subscriber
from waitlist.main import app
from waitlist.widget import WidgetState, init
from waitlist.widget.dom import Document

PAGE_URL = "https://launch.example/"


def api_client() -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


@pytest.mark.asyncio
async def test_visitor_joins_waitlist(override_db, test_account):
    db = override_db
    form = make_form(db, test_account, "Launch", description="Be first", collect_name=True)
    document = Document.from_html('<div id="waitlist-container"></div>', url=PAGE_URL)

    async with api_client() as client:
        widget = init(document, form_id=form.id, selector="#waitlist-container", client=client)
        await widget.wait_idle()
        assert widget.state is WidgetState.READY

        widget.element.query_selector('input[name="email"]').value = "ada@example.com"
        widget.element.query_selector('input[name="name"]').value = "Ada"
        widget.element.query_selector("button.waitlist-submit-button").click()
        await widget.wait_idle()

    assert widget.state is WidgetState.SUCCEEDED
    assert "Thank you for joining our waitlist!" in widget.element.text_content

    subscriber = db.query(Subscriber).one()
    assert subscriber.form_id == form.id
    assert subscriber.email == "ada@example.com"
    assert subscriber.name == "Ada"
    assert subscriber.referrer == PAGE_URL

    activity = db.query(Activity).filter(Activity.type == "new_subscriber").one()
    assert activity.account_id == test_account.id
    assert activity.data["formName"] == "Launch"


@pytest.mark.asyncio
async def test_widget_for_deleted_form_fails_to_load(override_db):
    document = Document.from_html('<div id="waitlist-container"></div>', url=PAGE_URL)
    errors = []

    async with api_client() as client:
        widget = init(
            document,
            form_id=4242,
            selector="#waitlist-container",
            on_error=errors.append,
            client=client,
        )
        await widget.wait_idle()

    assert widget.state is WidgetState.FAILED
    assert errors[0].response.status_code == 404
    assert override_db.query(Subscriber).count() == 0
