"""
Test configuration and fixtures.

Provides:
- A fresh in-memory SQLite database per test
- Account factories and JWT cookie minting for authenticated tests
- HTTPX AsyncClient over ASGITransport with get_db overridden
"""
import os
from dataclasses import dataclass
from typing import AsyncGenerator, Generator

# Settings are read at import time, so configure the environment first
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ["TESTING"] = "1"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["ENV"] = "dev"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.orm import Session, sessionmaker

from waitlist.core.deps import COOKIE_NAME, CSRF_HEADER, CSRF_HEADER_VALUE, get_db
from waitlist.core.security import create_session_token, hash_password
from waitlist.db.base import Base
from waitlist.db.models import Account, Form, Subscriber
from waitlist.db.session import build_engine
from waitlist.main import app


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture(scope="function")
def engine():
    engine = build_engine("sqlite+pysqlite:///:memory:")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db(session_factory) -> Generator[Session, None, None]:
    session = session_factory()
    yield session
    session.close()


# =============================================================================
# Factories
# =============================================================================

def make_account(db: Session, username: str = "owner", **kwargs) -> Account:
    account = Account(
        username=username,
        email=kwargs.pop("email", f"{username}@example.com"),
        password_hash=kwargs.pop("password_hash", hash_password("password123")),
        **kwargs,
    )
    db.add(account)
    db.commit()
    db.refresh(account)
    return account


def make_form(db: Session, owner: Account, name: str = "Launch", **kwargs) -> Form:
    form = Form(owner_id=owner.id, name=name, **kwargs)
    db.add(form)
    db.commit()
    db.refresh(form)
    return form


def make_subscriber(db: Session, form: Form, email: str = "ada@example.com", **kwargs) -> Subscriber:
    subscriber = Subscriber(form_id=form.id, email=email, **kwargs)
    db.add(subscriber)
    db.commit()
    db.refresh(subscriber)
    return subscriber


@pytest.fixture(scope="function")
def test_account(db: Session) -> Account:
    return make_account(db, "owner", name="Owner", company_name="Acme")


@pytest.fixture(scope="function")
def other_account(db: Session) -> Account:
    return make_account(db, "intruder")


# =============================================================================
# Auth Fixtures
# =============================================================================

@dataclass
class TestAuth:
    """Test authentication context."""
    account: Account
    token: str
    cookie_name: str = COOKIE_NAME


@pytest.fixture(scope="function")
def test_auth(test_account: Account) -> TestAuth:
    token = create_session_token(test_account.id, test_account.token_version)
    return TestAuth(account=test_account, token=token)


# =============================================================================
# Client Fixtures
# =============================================================================

@pytest.fixture(scope="function")
def override_db(db: Session) -> Generator[Session, None, None]:
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    yield db
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def client(override_db: Session) -> AsyncGenerator[AsyncClient, None]:
    """Unauthenticated client for public endpoints."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as c:
        yield c


@pytest.fixture(scope="function")
async def authed_client(
    override_db: Session,
    test_auth: TestAuth,
) -> AsyncGenerator[AsyncClient, None]:
    """Authenticated client with session cookie and CSRF header."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        cookies={test_auth.cookie_name: test_auth.token},
        headers={CSRF_HEADER: CSRF_HEADER_VALUE},
    ) as c:
        yield c


def client_for(account: Account) -> AsyncClient:
    """Authenticated client for an arbitrary account (caller manages the context)."""
    return AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        cookies={COOKIE_NAME: create_session_token(account.id, account.token_version)},
        headers={CSRF_HEADER: CSRF_HEADER_VALUE},
    )
