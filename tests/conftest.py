# tests/conftest.py

import uuid
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from tasklist.application import create_app
from tasklist.core.config import Settings
from tasklist.core.db import create_engine, create_session_factory, init_models
from tasklist.core.security import PasswordHasher, SessionAuthenticator, SessionKeys
from tasklist.db.repositories.account_repository import AccountRepository
from tasklist.domains.identity.entities import Account


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    """
    Settings for a throwaway SQLite database per test.

    bcrypt rounds are lowered so the suite stays fast; cookies are not
    marked Secure because the test client talks plain http.
    """
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'tasklist.sqlite3'}",
        jwt_secret="test-jwt-secret",
        cookie_secret="test-cookie-secret",
        cookie_secure=False,
        bcrypt_rounds=4,
        _env_file=None,
    )


@pytest.fixture()
async def session_factory(settings: Settings):
    engine = create_engine(settings.database_url)
    await init_models(engine)
    yield create_session_factory(engine)
    await engine.dispose()


@pytest.fixture()
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture()
def hasher(settings: Settings) -> PasswordHasher:
    return PasswordHasher(rounds=settings.bcrypt_rounds)


@pytest.fixture()
def authenticator(settings: Settings) -> SessionAuthenticator:
    return SessionAuthenticator(SessionKeys.from_settings(settings))


@pytest.fixture()
async def make_account(session):
    """Creates accounts directly in the store, bypassing password hashing."""

    async def _make(email: str = None) -> uuid.UUID:
        email = email or f"{uuid.uuid4().hex[:8]}@example.com"
        account = await AccountRepository(session).create(
            Account.create_account(email=email, password_hash="not-a-real-hash")
        )
        return account.uuid

    return _make


@pytest.fixture()
def client(settings: Settings):
    app = create_app(settings)
    with TestClient(app) as client:
        yield client
