"""Account service - registration, lookup and credential checks."""

import logging

from sqlalchemy.orm import Session

from waitlist.core.exceptions import ValidationError
from waitlist.core.security import hash_password, verify_password
from waitlist.core.structured_logging import build_log_context
from waitlist.db.models import Account

logger = logging.getLogger(__name__)


def get_account(db: Session, account_id: int) -> Account | None:
    return db.get(Account, account_id)


def get_account_by_username(db: Session, username: str) -> Account | None:
    return db.query(Account).filter(Account.username == username).first()


def get_account_by_email(db: Session, email: str) -> Account | None:
    return db.query(Account).filter(Account.email == email.strip().lower()).first()


def create_account(
    db: Session,
    username: str,
    email: str,
    password: str,
    name: str | None = None,
    company_name: str | None = None,
) -> Account:
    """
    Register a new account.

    Raises:
        ValidationError: username or email already taken
    """
    username = username.strip()
    email = email.strip().lower()

    if get_account_by_username(db, username):
        raise ValidationError("Username already exists")
    if get_account_by_email(db, email):
        raise ValidationError("Email already exists")

    account = Account(
        username=username,
        email=email,
        password_hash=hash_password(password),
        name=name,
        company_name=company_name,
    )
    db.add(account)
    db.commit()
    db.refresh(account)
    logger.info("Account registered", extra=build_log_context(account_id=account.id))
    return account


def authenticate(db: Session, username: str, password: str) -> Account | None:
    """Return the account when the credentials match, else None."""
    account = get_account_by_username(db, username.strip())
    if not account or not verify_password(password, account.password_hash):
        return None
    return account


def update_profile(
    db: Session,
    account: Account,
    name: str | None = None,
    company_name: str | None = None,
) -> Account:
    """Profile fields are the only mutable part of an account."""
    if name is not None:
        account.name = name
    if company_name is not None:
        account.company_name = company_name
    db.commit()
    db.refresh(account)
    return account


def revoke_sessions(db: Session, account: Account) -> None:
    """Invalidate every session token issued so far."""
    account.token_version += 1
    db.commit()
