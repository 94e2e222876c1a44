"""Authentication endpoints - username/password sessions in a JWT cookie."""

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session

from waitlist.core.config import settings
from waitlist.core.deps import COOKIE_NAME, get_current_account, get_db, require_csrf_header
from waitlist.core.exceptions import UnauthenticatedError
from waitlist.core.rate_limit import limiter
from waitlist.core.security import create_session_token
from waitlist.db.models import Account
from waitlist.schemas.auth import AccountRead, LoginRequest, ProfileUpdate, RegisterRequest
from waitlist.services import account_service

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _account_read(account: Account) -> AccountRead:
    return AccountRead(
        id=account.id,
        username=account.username,
        email=account.email,
        name=account.name,
        company_name=account.company_name,
        created_at=account.created_at,
    )


def _set_session_cookie(response: Response, account: Account) -> None:
    token = create_session_token(account.id, account.token_version)
    response.set_cookie(
        key=COOKIE_NAME,
        value=token,
        max_age=settings.JWT_EXPIRES_HOURS * 3600,
        httponly=True,
        samesite="lax",
        secure=settings.cookie_secure,
        path="/",
    )


@router.post("/register", response_model=AccountRead, status_code=status.HTTP_201_CREATED)
@limiter.limit(f"{settings.RATE_LIMIT_AUTH}/minute")
def register(
    request: Request,
    response: Response,
    body: RegisterRequest,
    db: Session = Depends(get_db),
):
    """Create an account and log it in immediately."""
    account = account_service.create_account(
        db,
        username=body.username,
        email=body.email,
        password=body.password,
        name=body.name,
        company_name=body.company_name,
    )
    _set_session_cookie(response, account)
    return _account_read(account)


@router.post("/login", response_model=AccountRead)
@limiter.limit(f"{settings.RATE_LIMIT_AUTH}/minute")
def login(
    request: Request,
    response: Response,
    body: LoginRequest,
    db: Session = Depends(get_db),
):
    account = account_service.authenticate(db, body.username, body.password)
    if not account:
        raise UnauthenticatedError("Incorrect username or password")
    _set_session_cookie(response, account)
    return _account_read(account)


@router.post("/logout", dependencies=[Depends(require_csrf_header)])
def logout(
    response: Response,
    account: Account = Depends(get_current_account),
):
    """
    Clear session cookie.

    Requires X-Requested-With header for CSRF protection.
    """
    response.delete_cookie(COOKIE_NAME, path="/")
    return {"message": "Logged out successfully"}


@router.get("/user", response_model=AccountRead)
def get_user(account: Account = Depends(get_current_account)):
    return _account_read(account)


@router.put(
    "/user",
    response_model=AccountRead,
    dependencies=[Depends(require_csrf_header)],
)
def update_user(
    body: ProfileUpdate,
    account: Account = Depends(get_current_account),
    db: Session = Depends(get_db),
):
    """Update profile fields (name, company name). Handle and email are immutable."""
    account = account_service.update_profile(
        db, account, name=body.name, company_name=body.company_name
    )
    return _account_read(account)
