"""Activity recorder - append-only account timeline.

Activities are written after the primary mutation has committed. A failed
activity write is rolled back and logged; it never fails the operation that
triggered it and is not retried.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from waitlist.core.structured_logging import build_log_context
from waitlist.db.enums import ActivityType
from waitlist.db.models import Activity, Form, Subscriber

logger = logging.getLogger(__name__)

DEFAULT_ACTIVITY_LIMIT = 10


def log_activity(
    db: Session,
    account_id: int,
    activity_type: ActivityType | str,
    data: dict | None = None,
    form_id: int | None = None,
    subscriber_id: int | None = None,
) -> Activity:
    """
    Add an activity row and commit it.

    ``activity_type`` is not checked against ``ActivityType``: any string is
    stored as-is. The read side decides how to present unknown types.
    """
    type_value = activity_type.value if isinstance(activity_type, ActivityType) else str(activity_type)
    activity = Activity(
        account_id=account_id,
        form_id=form_id,
        subscriber_id=subscriber_id,
        type=type_value,
        data=data,
    )
    db.add(activity)
    db.commit()
    db.refresh(activity)
    return activity


def record(
    db: Session,
    account_id: int,
    activity_type: ActivityType | str,
    data: dict | None = None,
    *,
    form_id: int | None = None,
    subscriber_id: int | None = None,
) -> Activity | None:
    """
    Record an activity without letting storage errors escape.

    Returns the created activity, or None when the write failed.
    """
    try:
        return log_activity(
            db,
            account_id=account_id,
            activity_type=activity_type,
            data=data,
            form_id=form_id,
            subscriber_id=subscriber_id,
        )
    except SQLAlchemyError:
        db.rollback()
        logger.exception(
            "Failed to record activity %s",
            activity_type,
            extra=build_log_context(account_id=account_id, form_id=form_id),
        )
        return None


def log_form_created(db: Session, form: Form) -> Activity | None:
    """Log form creation."""
    return record(
        db,
        form.owner_id,
        ActivityType.FORM_CREATED,
        {"formName": form.name},
        form_id=form.id,
    )


def log_form_updated(db: Session, form: Form) -> Activity | None:
    """Log form update."""
    return record(
        db,
        form.owner_id,
        ActivityType.FORM_UPDATED,
        {"formName": form.name},
        form_id=form.id,
    )


def log_form_deleted(db: Session, account_id: int, form_name: str) -> Activity | None:
    """Log form deletion. The form row is gone, so only the name snapshot remains."""
    return record(db, account_id, ActivityType.FORM_DELETED, {"formName": form_name})


def log_new_subscriber(db: Session, form: Form, subscriber: Subscriber) -> Activity | None:
    """Log a signup. Attributed to the form owner, never to the anonymous submitter."""
    return record(
        db,
        form.owner_id,
        ActivityType.NEW_SUBSCRIBER,
        {
            "email": subscriber.email,
            "name": subscriber.name,
            "formName": form.name,
        },
        form_id=form.id,
        subscriber_id=subscriber.id,
    )


def list_activities(
    db: Session,
    account_id: int,
    limit: int = DEFAULT_ACTIVITY_LIMIT,
) -> list[Activity]:
    """Newest-first activities for an account."""
    return (
        db.query(Activity)
        .filter(Activity.account_id == account_id)
        .order_by(Activity.created_at.desc(), Activity.id.desc())
        .limit(limit)
        .all()
    )
