"""Subscriber service - signups and tenant-scoped subscriber queries.

Account-scoped queries always resolve the account's form ids first and then
filter subscribers by that set. With no forms the answer is empty/zero and the
subscriber table is not queried.
"""

import logging
from datetime import datetime
from typing import Any

from sqlalchemy import func
from sqlalchemy.orm import Session

from waitlist.core.exceptions import NotFoundError
from waitlist.core.request_info import hash_email
from waitlist.core.structured_logging import build_log_context
from waitlist.db.models import Subscriber
from waitlist.services import activity_service, form_service

logger = logging.getLogger(__name__)

DEFAULT_RECENT_LIMIT = 5


def get_subscriber(db: Session, subscriber_id: int) -> Subscriber | None:
    return db.get(Subscriber, subscriber_id)


def submit_subscriber(
    db: Session,
    form_id: int,
    email: str,
    name: str | None = None,
    referrer: str | None = None,
    ip_address: str | None = None,
    metadata: dict[str, Any] | None = None,
) -> Subscriber:
    """
    Public signup entry point.

    Raises:
        NotFoundError: the form does not exist (nothing is written)
    """
    form = form_service.get_form(db, form_id)
    if not form:
        raise NotFoundError("Form not found")

    # Email is mandatory whatever form.collect_email says
    subscriber = Subscriber(
        form_id=form.id,
        email=email.strip(),
        name=name or None,
        referrer=referrer or None,
        ip_address=ip_address,
        metadata_json=metadata,
    )
    db.add(subscriber)
    db.commit()
    db.refresh(subscriber)

    activity_service.log_new_subscriber(db, form, subscriber)
    logger.info(
        "Subscriber %s (%s) joined form %s",
        subscriber.id,
        hash_email(subscriber.email),
        form.id,
        extra=build_log_context(account_id=form.owner_id, form_id=form.id),
    )
    return subscriber


def list_subscribers_by_form(db: Session, form_id: int) -> list[Subscriber]:
    return (
        db.query(Subscriber)
        .filter(Subscriber.form_id == form_id)
        .order_by(Subscriber.created_at.desc(), Subscriber.id.desc())
        .all()
    )


def list_subscribers_by_account(db: Session, account_id: int) -> list[Subscriber]:
    form_ids = form_service.get_form_ids_for_account(db, account_id)
    if not form_ids:
        return []
    return (
        db.query(Subscriber)
        .filter(Subscriber.form_id.in_(form_ids))
        .order_by(Subscriber.created_at.desc(), Subscriber.id.desc())
        .all()
    )


def count_subscribers(
    db: Session,
    form_id: int | None = None,
    account_id: int | None = None,
) -> int:
    """
    Count subscribers of one form, of every form an account owns, or overall.

    ``form_id`` wins when both filters are given.
    """
    query = db.query(func.count(Subscriber.id))
    if form_id is not None:
        query = query.filter(Subscriber.form_id == form_id)
    elif account_id is not None:
        form_ids = form_service.get_form_ids_for_account(db, account_id)
        if not form_ids:
            return 0
        query = query.filter(Subscriber.form_id.in_(form_ids))
    return query.scalar() or 0


def count_subscribers_since(db: Session, account_id: int, since: datetime) -> int:
    form_ids = form_service.get_form_ids_for_account(db, account_id)
    if not form_ids:
        return 0
    return (
        db.query(func.count(Subscriber.id))
        .filter(Subscriber.form_id.in_(form_ids), Subscriber.created_at >= since)
        .scalar()
        or 0
    )


def list_recent_subscribers(
    db: Session,
    form_id: int | None = None,
    account_id: int | None = None,
    limit: int = DEFAULT_RECENT_LIMIT,
) -> list[Subscriber]:
    query = db.query(Subscriber)
    if form_id is not None:
        query = query.filter(Subscriber.form_id == form_id)
    elif account_id is not None:
        form_ids = form_service.get_form_ids_for_account(db, account_id)
        if not form_ids:
            return []
        query = query.filter(Subscriber.form_id.in_(form_ids))
    return (
        query.order_by(Subscriber.created_at.desc(), Subscriber.id.desc())
        .limit(limit)
        .all()
    )
