"""SQLModel implementation of the configuration store."""

from __future__ import annotations

from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import select

from ...clock import utcnow
from ...domain.repositories.configuration import ConfigurationMutator
from ...errors import Conflict
from ...models.configuration import UserConfiguration
from ..database import SessionFactory

_UPSERT_ATTEMPTS = 2


class SQLModelConfigurationRepository:
    """SQLModel-based configuration repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def get_by_user(self, user_id: int) -> Optional[UserConfiguration]:
        with self.session_factory() as session:
            row = session.exec(
                select(UserConfiguration).where(UserConfiguration.user_id == user_id)
            ).first()
            if row:
                session.expunge(row)
            return row

    def upsert(
        self, user_id: int, mutate: ConfigurationMutator
    ) -> tuple[UserConfiguration, bool]:
        for attempt in range(1, _UPSERT_ATTEMPTS + 1):
            try:
                with self.session_factory() as session:
                    row = session.exec(
                        select(UserConfiguration).where(UserConfiguration.user_id == user_id)
                    ).first()
                    created = row is None
                    if row is None:
                        row = UserConfiguration(user_id=user_id)
                    mutate(row, created)
                    row.updated_at = utcnow()
                    session.add(row)
                    session.commit()
                    session.refresh(row)
                    session.expunge(row)
                    return row, created
            except IntegrityError as exc:
                # Another request created the row first; the retry updates it instead.
                if attempt >= _UPSERT_ATTEMPTS:
                    raise Conflict("Configuration already exists for this user") from exc
        raise Conflict("Configuration already exists for this user")  # pragma: no cover
