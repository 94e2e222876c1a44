"""Form service - CRUD for waitlist forms.

Every mutation commits first, then records its companion activity.
Ownership is enforced by callers (see ``waitlist.core.form_access``); the
public descriptor path reads forms without it.
"""

from typing import Any

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from waitlist.db.models import Activity, Form, Subscriber, utcnow
from waitlist.services import activity_service


# Fields an owner may set on create/update
EDITABLE_FIELDS = (
    "name",
    "description",
    "collect_name",
    "collect_email",
    "social_sharing",
    "confirmation_email",
    "custom_css",
    "redirect_url",
    "settings",
)

# Columns that reject NULL; an explicit null on update is ignored for these
NON_NULLABLE_FIELDS = {
    "name",
    "collect_name",
    "collect_email",
    "social_sharing",
    "confirmation_email",
}


def get_form(db: Session, form_id: int) -> Form | None:
    return db.get(Form, form_id)


def list_forms(db: Session, owner_id: int) -> list[Form]:
    return (
        db.query(Form)
        .filter(Form.owner_id == owner_id)
        .order_by(Form.created_at.desc(), Form.id.desc())
        .all()
    )


def get_form_ids_for_account(db: Session, account_id: int) -> list[int]:
    """Resolve the set of form ids owned by an account (no caching)."""
    rows = db.query(Form.id).filter(Form.owner_id == account_id).all()
    return [row[0] for row in rows]


def count_active_forms(db: Session, owner_id: int) -> int:
    return db.query(func.count(Form.id)).filter(Form.owner_id == owner_id).scalar() or 0


def create_form(db: Session, owner_id: int, data: dict[str, Any]) -> Form:
    """Create a form owned by ``owner_id``. Unknown keys in ``data`` are ignored."""
    values = {key: data[key] for key in EDITABLE_FIELDS if key in data}
    for key in NON_NULLABLE_FIELDS:
        if key in values and values[key] is None:
            values.pop(key)
    form = Form(owner_id=owner_id, **values)
    db.add(form)
    db.commit()
    db.refresh(form)

    activity_service.log_form_created(db, form)
    return form


def update_form(db: Session, form: Form, changes: dict[str, Any]) -> Form:
    """
    Apply a partial update.

    Only keys present in ``changes`` are touched. ``updated_at`` advances on
    every call, even when no column value actually changed.
    """
    for key in EDITABLE_FIELDS:
        if key not in changes:
            continue
        value = changes[key]
        if value is None and key in NON_NULLABLE_FIELDS:
            continue
        setattr(form, key, value)
    form.updated_at = utcnow()

    db.commit()
    db.refresh(form)

    activity_service.log_form_updated(db, form)
    return form


def delete_form(db: Session, form: Form) -> None:
    """
    Delete a form and clean up what points at it.

    Subscribers of the form are removed; activities keep their payload
    snapshot but lose their form/subscriber references.
    """
    owner_id = form.owner_id
    form_name = form.name
    form_id = form.id

    subscriber_ids = [
        row[0] for row in db.query(Subscriber.id).filter(Subscriber.form_id == form_id).all()
    ]
    db.query(Activity).filter(
        or_(Activity.form_id == form_id, Activity.subscriber_id.in_(subscriber_ids))
    ).update(
        {Activity.form_id: None, Activity.subscriber_id: None},
        synchronize_session=False,
    )
    db.query(Subscriber).filter(Subscriber.form_id == form_id).delete(
        synchronize_session=False
    )
    db.delete(form)
    db.commit()

    activity_service.log_form_deleted(db, owner_id, form_name)
