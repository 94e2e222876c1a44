"""Subscribers router - owner-side listing and export.

Submission is public and lives in ``forms_public``.
"""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from waitlist.core.deps import get_current_account, get_db
from waitlist.core.form_access import get_owned_form
from waitlist.db.models import Account, Subscriber
from waitlist.schemas.subscribers import SubscriberRead
from waitlist.services import export_service, form_service, subscriber_service
from waitlist.services.subscriber_service import DEFAULT_RECENT_LIMIT

router = APIRouter(prefix="/api/subscribers", tags=["subscribers"])


def _subscriber_read(subscriber: Subscriber) -> SubscriberRead:
    return SubscriberRead(
        id=subscriber.id,
        form_id=subscriber.form_id,
        email=subscriber.email,
        name=subscriber.name,
        referrer=subscriber.referrer,
        ip_address=subscriber.ip_address,
        metadata=subscriber.metadata_json,
        created_at=subscriber.created_at,
    )


@router.get("", response_model=list[SubscriberRead])
def list_subscribers(
    form_id: int | None = Query(None, alias="formId"),
    account: Account = Depends(get_current_account),
    db: Session = Depends(get_db),
):
    """
    List subscribers.

    With ``formId`` the form must belong to the caller; without it every
    subscriber across the caller's forms is returned.
    """
    if form_id is not None:
        form = get_owned_form(db, account.id, form_id)
        subscribers = subscriber_service.list_subscribers_by_form(db, form.id)
    else:
        subscribers = subscriber_service.list_subscribers_by_account(db, account.id)
    return [_subscriber_read(s) for s in subscribers]


@router.get("/recent", response_model=list[SubscriberRead])
def list_recent_subscribers(
    form_id: int | None = Query(None, alias="formId"),
    limit: int = Query(DEFAULT_RECENT_LIMIT, ge=1, le=100),
    account: Account = Depends(get_current_account),
    db: Session = Depends(get_db),
):
    if form_id is not None:
        form = get_owned_form(db, account.id, form_id)
        subscribers = subscriber_service.list_recent_subscribers(
            db, form_id=form.id, limit=limit
        )
    else:
        subscribers = subscriber_service.list_recent_subscribers(
            db, account_id=account.id, limit=limit
        )
    return [_subscriber_read(s) for s in subscribers]


@router.get("/export")
def export_subscribers(
    form_id: int | None = Query(None, alias="formId"),
    account: Account = Depends(get_current_account),
    db: Session = Depends(get_db),
):
    """Download subscribers as CSV, for one owned form or across all of them."""
    if form_id is not None:
        form = get_owned_form(db, account.id, form_id)
        subscribers = subscriber_service.list_subscribers_by_form(db, form.id)
        forms = [form]
    else:
        subscribers = subscriber_service.list_subscribers_by_account(db, account.id)
        forms = form_service.list_forms(db, account.id)
    return StreamingResponse(
        export_service.stream_subscribers_csv(subscribers, forms),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="subscribers.csv"'},
    )
