"""Engine creation, schema setup and transactional sessions."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Callable, ContextManager, Iterator, Tuple

from sqlalchemy.engine import Engine, make_url
from sqlmodel import Session, SQLModel, create_engine

from ..config import BaseConfig
from ..logging_config import get_logger

logger = get_logger(__name__)

SessionFactory = Callable[[], ContextManager[Session]]


def create_db_engine(config: BaseConfig, *, echo: bool = False) -> Engine:
    """Build the engine for ``config.DATABASE_URL`` with per-backend options."""

    engine = create_engine(config.DATABASE_URL, echo=echo, **config.sqlalchemy_engine_options())
    logger.debug(
        "Database engine created",
        extra={"url": make_url(config.DATABASE_URL).render_as_string(hide_password=True)},
    )
    return engine


def init_database(engine: Engine) -> None:
    """Create any missing tables for the registered models."""

    from .. import models  # noqa: F401  registers tables on SQLModel.metadata

    SQLModel.metadata.create_all(engine)


def create_session_factory(engine: Engine) -> SessionFactory:
    """Return a factory of sessions that commit on success and roll back on error.

    Objects stay usable after the block exits (``expire_on_commit=False``) so
    repositories can expunge and hand them to callers.
    """

    @contextmanager
    def factory() -> Iterator[Session]:
        session = Session(engine, expire_on_commit=False)
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    return factory


def bootstrap_database(config: BaseConfig | None = None) -> Tuple[Engine, SessionFactory]:
    """Engine + schema + session factory in one call, for the app factory and CLI."""

    engine = create_db_engine(config or BaseConfig())
    init_database(engine)
    return engine, create_session_factory(engine)
