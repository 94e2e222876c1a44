"""Public endpoints used by the embeddable widget.

Neither endpoint requires a session and neither applies ownership checks.
There is no rate limiting, CAPTCHA, or duplicate-email rejection here.
"""

import logging

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from waitlist.core.deps import get_db
from waitlist.core.exceptions import NotFoundError
from waitlist.core.request_info import get_client_ip
from waitlist.db.models import Form, Subscriber
from waitlist.schemas.forms import FormPublicDescriptor
from waitlist.schemas.subscribers import SubscriberCreate, SubscriberPublicRead
from waitlist.services import form_service, subscriber_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["forms-public"])


def form_descriptor(form: Form) -> FormPublicDescriptor:
    return FormPublicDescriptor(
        id=form.id,
        name=form.name,
        description=form.description,
        collect_name=form.collect_name,
        collect_email=form.collect_email,
        social_sharing=form.social_sharing,
        confirmation_email=form.confirmation_email,
        custom_css=form.custom_css,
        redirect_url=form.redirect_url,
    )


def _subscriber_public_read(subscriber: Subscriber) -> SubscriberPublicRead:
    return SubscriberPublicRead(
        id=subscriber.id,
        form_id=subscriber.form_id,
        email=subscriber.email,
        name=subscriber.name,
        referrer=subscriber.referrer,
        created_at=subscriber.created_at,
    )


@router.get("/api/sdk/form/{form_id}", response_model=FormPublicDescriptor)
def get_public_form(form_id: int, db: Session = Depends(get_db)):
    form = form_service.get_form(db, form_id)
    if not form:
        raise NotFoundError("Form not found")
    return form_descriptor(form)


@router.post(
    "/api/subscribers",
    response_model=SubscriberPublicRead,
    status_code=status.HTTP_201_CREATED,
)
def submit_subscriber(
    body: SubscriberCreate,
    request: Request,
    db: Session = Depends(get_db),
):
    subscriber = subscriber_service.submit_subscriber(
        db,
        form_id=body.form_id,
        email=body.email,
        name=body.name,
        referrer=body.referrer or request.headers.get("referer"),
        ip_address=body.ip_address or get_client_ip(request),
        metadata=body.metadata,
    )
    return _subscriber_public_read(subscriber)
