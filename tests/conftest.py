"""Pytest configuration and shared fixtures for Budget Tracker tests.

Provides an isolated SQLite database per test, repository fixtures, fake
capabilities (hasher, mailer, clock) and a Flask test client.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from budgettracker import create_app
from budgettracker.config import BaseConfig, DevConfig
from budgettracker.infra.database import create_db_engine, create_session_factory, init_database
from budgettracker.infra.repositories import (
    SQLModelConfigurationRepository,
    SQLModelSessionRepository,
    SQLModelTransactionRepository,
    SQLModelUserRepository,
)
from budgettracker.models import User
from budgettracker.services.auth import SessionAuthenticator
from budgettracker.services.jobs import clear_jobs, set_async_execution
from budgettracker.services.mailer import MailMessage, MailResult
from budgettracker.services.security import JoseTokenCodec

TEST_SECRET = "test-secret"
DEFAULT_PASSWORD = "secret123"


# =============================================================================
# Fakes
# =============================================================================


class PlainHasher:
    """Reversible stand-in for argon2 so tests stay fast."""

    def hash(self, password: str) -> str:
        return f"plain:{password}"

    def verify(self, password_hash: str, password: str) -> bool:
        return password_hash == f"plain:{password}"


class RecordingMailer:
    """Collects outgoing messages; ``fail=True`` makes every send raise."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.sent: list[MailMessage] = []

    def send(self, message: MailMessage) -> MailResult:
        if self.fail:
            raise ConnectionError("SMTP unavailable")
        self.sent.append(message)
        return MailResult(success=True, message="sent", message_id=f"<{len(self.sent)}@test>")

    def verify_connection(self) -> MailResult:
        return MailResult(success=not self.fail, message="checked")

    def subjects(self) -> list[str]:
        return [message.subject for message in self.sent]


class FixedClock:
    """Deterministic UTC clock that only moves when told to."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 5, 20, 9, 30, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


# =============================================================================
# Configuration & Database Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def synchronous_jobs():
    """Run background jobs inline so side effects are observable."""

    set_async_execution(False)
    clear_jobs()
    yield
    set_async_execution(True)
    clear_jobs()


@pytest.fixture()
def config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> BaseConfig:
    monkeypatch.setenv("BUDGETTRACKER_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("BUDGETTRACKER_DATABASE_URL", f"sqlite:///{tmp_path / 'test.db'}")
    monkeypatch.setenv("BUDGETTRACKER_JWT_SECRET", TEST_SECRET)
    monkeypatch.delenv("BUDGETTRACKER_ENV", raising=False)
    monkeypatch.delenv("BUDGETTRACKER_EMAIL_ENABLED", raising=False)
    return DevConfig()


@pytest.fixture()
def db_engine(config: BaseConfig):
    """File-backed SQLite engine so separate connections share one database."""

    engine = create_db_engine(config)
    init_database(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(db_engine):
    return create_session_factory(db_engine)


@pytest.fixture()
def users_repo(session_factory) -> SQLModelUserRepository:
    return SQLModelUserRepository(session_factory)


@pytest.fixture()
def sessions_repo(session_factory) -> SQLModelSessionRepository:
    return SQLModelSessionRepository(session_factory)


@pytest.fixture()
def configurations_repo(session_factory) -> SQLModelConfigurationRepository:
    return SQLModelConfigurationRepository(session_factory)


@pytest.fixture()
def transactions_repo(session_factory) -> SQLModelTransactionRepository:
    return SQLModelTransactionRepository(session_factory)


# =============================================================================
# Capability Fixtures
# =============================================================================


@pytest.fixture()
def hasher() -> PlainHasher:
    return PlainHasher()


@pytest.fixture()
def mailer() -> RecordingMailer:
    return RecordingMailer()


@pytest.fixture()
def failing_mailer() -> RecordingMailer:
    return RecordingMailer(fail=True)


@pytest.fixture()
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture()
def codec() -> JoseTokenCodec:
    return JoseTokenCodec(TEST_SECRET, expires_in=timedelta(hours=1))


@pytest.fixture()
def authenticator(users_repo, sessions_repo, codec, hasher, config, mailer, clock) -> SessionAuthenticator:
    return SessionAuthenticator(
        users=users_repo,
        sessions=sessions_repo,
        codec=codec,
        hasher=hasher,
        config=config,
        mailer=mailer,
        clock=clock,
    )


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture()
def user_factory(users_repo, hasher):
    """Persist users directly, verified unless told otherwise."""

    def _create_user(
        email: str = "alice@example.com",
        *,
        user_name: str = "alice",
        password: str = DEFAULT_PASSWORD,
        verified: bool = True,
    ) -> User:
        return users_repo.create(
            User(
                user_name=user_name,
                email=email,
                password_hash=hasher.hash(password),
                is_verified=verified,
            )
        )

    return _create_user


@pytest.fixture()
def user(user_factory) -> User:
    return user_factory()


# =============================================================================
# Flask Fixtures
# =============================================================================


@pytest.fixture()
def app(config: BaseConfig):
    app = create_app("development")
    app.config.update(TESTING=True)
    yield app
    app.extensions["budgettracker"].engine.dispose()


@pytest.fixture()
def client(app):
    with app.test_client() as client:
        yield client


@pytest.fixture()
def services(app):
    return app.extensions["budgettracker"]
