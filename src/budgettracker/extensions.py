"""Per-application wiring of storage, capabilities and services."""

from __future__ import annotations

from dataclasses import dataclass

from flask import Flask, current_app
from flask_mail import Mail
from sqlalchemy.engine import Engine

from .config import BaseConfig
from .infra.database import SessionFactory, bootstrap_database
from .infra.repositories import (
    SQLModelConfigurationRepository,
    SQLModelSessionRepository,
    SQLModelTransactionRepository,
    SQLModelUserRepository,
)
from .services.auth import SessionAuthenticator
from .services.mailer import DisabledMailer, FlaskMailMailer, Mailer
from .services.security import Argon2PasswordHasher, JoseTokenCodec, PasswordHasher, TokenCodec

EXTENSION_KEY = "budgettracker"


@dataclass
class AppServices:
    """Everything a request handler needs, built once per app."""

    config: BaseConfig
    engine: Engine
    session_factory: SessionFactory
    users: SQLModelUserRepository
    sessions: SQLModelSessionRepository
    configurations: SQLModelConfigurationRepository
    transactions: SQLModelTransactionRepository
    hasher: PasswordHasher
    codec: TokenCodec
    mailer: Mailer
    authenticator: SessionAuthenticator


def build_mailer(app: Flask, config: BaseConfig) -> Mailer:
    if not config.EMAIL_ENABLED:
        return DisabledMailer()
    app.config.update(config.flask_mail_settings())
    return FlaskMailMailer(
        app, Mail(app), sender=(config.EMAIL_FROM_NAME, config.EMAIL_FROM_ADDRESS)
    )


def init_services(app: Flask, config: BaseConfig) -> AppServices:
    """Create the engine + schema and attach an ``AppServices`` to ``app``."""

    engine, session_factory = bootstrap_database(config)
    users = SQLModelUserRepository(session_factory)
    sessions = SQLModelSessionRepository(session_factory)
    hasher = Argon2PasswordHasher()
    codec = JoseTokenCodec(
        config.JWT_SECRET, expires_in=config.JWT_EXPIRES_IN, algorithm=config.JWT_ALGORITHM
    )
    mailer = build_mailer(app, config)

    services = AppServices(
        config=config,
        engine=engine,
        session_factory=session_factory,
        users=users,
        sessions=sessions,
        configurations=SQLModelConfigurationRepository(session_factory),
        transactions=SQLModelTransactionRepository(session_factory),
        hasher=hasher,
        codec=codec,
        mailer=mailer,
        authenticator=SessionAuthenticator(
            users=users,
            sessions=sessions,
            codec=codec,
            hasher=hasher,
            config=config,
            mailer=mailer,
        ),
    )
    app.extensions[EXTENSION_KEY] = services
    return services


def get_services() -> AppServices:
    """Return the services bound to the current Flask app."""

    services = current_app.extensions.get(EXTENSION_KEY)
    if services is None:  # pragma: no cover - misconfigured app
        raise RuntimeError("Application services not initialized")
    return services
