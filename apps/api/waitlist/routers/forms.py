"""Forms router - owner-side management of waitlist forms."""

from fastapi import APIRouter, Depends, status
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from waitlist.core.deps import get_current_account, get_db, require_csrf_header
from waitlist.core.form_access import get_owned_form
from waitlist.db.models import Account, Form
from waitlist.routers.forms_public import form_descriptor
from waitlist.schemas.forms import FormCreate, FormRead, FormUpdate
from waitlist.services import form_service
from waitlist.widget.render import render_preview_document

router = APIRouter(prefix="/api/forms", tags=["forms"])


def _form_read(form: Form) -> FormRead:
    return FormRead(
        id=form.id,
        owner_id=form.owner_id,
        name=form.name,
        description=form.description,
        collect_name=form.collect_name,
        collect_email=form.collect_email,
        social_sharing=form.social_sharing,
        confirmation_email=form.confirmation_email,
        custom_css=form.custom_css,
        redirect_url=form.redirect_url,
        settings=form.settings,
        created_at=form.created_at,
        updated_at=form.updated_at,
    )


@router.get("", response_model=list[FormRead])
def list_forms(
    account: Account = Depends(get_current_account),
    db: Session = Depends(get_db),
):
    """List the caller's forms, newest first."""
    return [_form_read(form) for form in form_service.list_forms(db, account.id)]


@router.post(
    "",
    response_model=FormRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_csrf_header)],
)
def create_form(
    body: FormCreate,
    account: Account = Depends(get_current_account),
    db: Session = Depends(get_db),
):
    # Ownership always comes from the session, never from the body
    form = form_service.create_form(db, account.id, body.model_dump())
    return _form_read(form)


@router.get("/{form_id}", response_model=FormRead)
def get_form(
    form_id: int,
    account: Account = Depends(get_current_account),
    db: Session = Depends(get_db),
):
    return _form_read(get_owned_form(db, account.id, form_id))


@router.put(
    "/{form_id}",
    response_model=FormRead,
    dependencies=[Depends(require_csrf_header)],
)
def update_form(
    form_id: int,
    body: FormUpdate,
    account: Account = Depends(get_current_account),
    db: Session = Depends(get_db),
):
    """Partial update. Fields absent from the body keep their stored value."""
    form = get_owned_form(db, account.id, form_id)
    form = form_service.update_form(db, form, body.model_dump(exclude_unset=True))
    return _form_read(form)


@router.delete(
    "/{form_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_csrf_header)],
)
def delete_form(
    form_id: int,
    account: Account = Depends(get_current_account),
    db: Session = Depends(get_db),
):
    form = get_owned_form(db, account.id, form_id)
    form_service.delete_form(db, form)


@router.get("/{form_id}/preview", response_class=HTMLResponse)
def preview_form(
    form_id: int,
    account: Account = Depends(get_current_account),
    db: Session = Depends(get_db),
):
    """Render the widget markup for a form exactly as the embed would show it."""
    form = get_owned_form(db, account.id, form_id)
    return HTMLResponse(render_preview_document(form_descriptor(form).model_dump(by_alias=True)))
