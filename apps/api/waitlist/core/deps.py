"""FastAPI dependencies for authentication and database access."""

from typing import Generator

import jwt
from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from waitlist.core.exceptions import UnauthenticatedError
from waitlist.core.security import decode_session_token
from waitlist.db.models import Account
from waitlist.db.session import SessionLocal


# Cookie and header names
COOKIE_NAME = "waitlist_session"
CSRF_HEADER = "X-Requested-With"
CSRF_HEADER_VALUE = "XMLHttpRequest"


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency.

    Yields a database session and ensures it's closed after the request.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_account(
    request: Request,
    db: Session = Depends(get_db),
) -> Account:
    """
    Get authenticated account from session cookie.

    Validates:
    - Session cookie exists
    - JWT is valid and not expired
    - Account exists
    - Token version matches (for revocation support)

    Raises:
        UnauthenticatedError: Authentication failed (401)
    """
    token = request.cookies.get(COOKIE_NAME)
    if not token:
        raise UnauthenticatedError("Not authenticated")

    try:
        payload = decode_session_token(token)
    except jwt.InvalidTokenError:
        raise UnauthenticatedError("Invalid session")

    try:
        account_id = int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        raise UnauthenticatedError("Invalid session")

    account = db.get(Account, account_id)
    if not account:
        raise UnauthenticatedError("Account not found")

    # Token version check (revocation support)
    if account.token_version != payload.get("token_version"):
        raise UnauthenticatedError("Session revoked")

    return account


def require_csrf_header(request: Request) -> None:
    """
    Verify CSRF header on mutations.

    Apply to state-changing authenticated endpoints (POST, PUT, DELETE).
    The public widget endpoints do not use it.

    Raises:
        HTTPException 403: Missing or invalid CSRF header
    """
    if request.headers.get(CSRF_HEADER) != CSRF_HEADER_VALUE:
        raise HTTPException(
            status_code=403,
            detail=f"Missing CSRF header. Include '{CSRF_HEADER}: {CSRF_HEADER_VALUE}'",
        )
