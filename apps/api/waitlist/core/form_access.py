"""Form access control - tenant isolation for forms and their subscribers.

Access is owner-based: a form, and every subscriber attached to it, may only be
read or changed by the account that owns the form. The public widget path
(descriptor fetch and subscriber submission) never goes through here.

Check order is fixed: a missing form is reported as 404 before ownership is
evaluated, and an existing form owned by someone else is always 403.
"""

from sqlalchemy.orm import Session

from waitlist.core.exceptions import ForbiddenError, NotFoundError
from waitlist.db.models import Form
from waitlist.services import form_service


def assert_ownership(account_id: int, form: Form | None) -> None:
    """
    Check that ``account_id`` owns ``form``.

    Raises:
        NotFoundError: form is None
        ForbiddenError: form belongs to another account
    """
    if form is None:
        raise NotFoundError("Form not found")
    if form.owner_id != account_id:
        raise ForbiddenError("You don't have permission to access this form")


def get_owned_form(db: Session, account_id: int, form_id: int) -> Form:
    """Load a form and apply the ownership check."""
    form = form_service.get_form(db, form_id)
    assert_ownership(account_id, form)
    return form
