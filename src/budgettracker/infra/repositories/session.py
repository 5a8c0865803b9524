"""SQLModel implementation of the session store."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlmodel import select

from ...errors import Conflict
from ...logging_config import get_logger
from ...models.session import UserSession
from ..database import SessionFactory

logger = get_logger(__name__)

# One retry covers the case where a concurrent login inserted the active row
# between our lookup and our insert.
_UPSERT_ATTEMPTS = 2


class SQLModelSessionRepository:
    """SQLModel-based session repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def get_by_id(self, session_id: int) -> Optional[UserSession]:
        with self.session_factory() as session:
            row = session.get(UserSession, session_id)
            if row:
                session.expunge(row)
            return row

    def find_active(self, user_id: int, device_id: str) -> Optional[UserSession]:
        with self.session_factory() as session:
            row = session.exec(
                select(UserSession)
                .where(UserSession.user_id == user_id)
                .where(UserSession.device_id == device_id)
                .where(UserSession.is_active == True)  # noqa: E712
            ).first()
            if row:
                session.expunge(row)
            return row

    def find_active_by_token(self, token: str) -> Optional[UserSession]:
        with self.session_factory() as session:
            row = session.exec(
                select(UserSession)
                .where(UserSession.token == token)
                .where(UserSession.is_active == True)  # noqa: E712
            ).first()
            if row:
                session.expunge(row)
            return row

    def upsert_active(
        self,
        *,
        user_id: int,
        device_id: str,
        token: str,
        ip_address: str,
        user_agent: Optional[str],
        device_info: Optional[dict[str, Any]],
        now: datetime,
    ) -> tuple[UserSession, bool]:
        for attempt in range(1, _UPSERT_ATTEMPTS + 1):
            try:
                with self.session_factory() as session:
                    row = session.exec(
                        select(UserSession)
                        .where(UserSession.user_id == user_id)
                        .where(UserSession.device_id == device_id)
                        .where(UserSession.is_active == True)  # noqa: E712
                    ).first()
                    created = row is None
                    if row is None:
                        row = UserSession(user_id=user_id, device_id=device_id, token=token, created_at=now)
                    row.token = token
                    row.ip_address = ip_address
                    row.user_agent = user_agent
                    row.device_info = device_info
                    row.is_active = True
                    row.last_activity = now
                    row.logged_out_at = None
                    row.updated_at = now
                    session.add(row)
                    session.commit()
                    session.refresh(row)
                    session.expunge(row)
                    return row, created
            except IntegrityError as exc:
                if attempt >= _UPSERT_ATTEMPTS:
                    raise Conflict("An active session already exists for this device") from exc
                logger.info(
                    "Concurrent login detected; retrying session upsert",
                    extra={"user_id": user_id, "device_id": device_id},
                )
        raise Conflict("An active session already exists for this device")  # pragma: no cover

    def touch(self, session_id: int, now: datetime) -> Optional[UserSession]:
        with self.session_factory() as session:
            row = session.get(UserSession, session_id)
            if row is None:
                return None
            row.last_activity = now
            row.updated_at = now
            session.add(row)
            session.commit()
            session.refresh(row)
            session.expunge(row)
            return row

    def deactivate(self, session_id: int, now: datetime) -> Optional[UserSession]:
        with self.session_factory() as session:
            row = session.get(UserSession, session_id)
            if row is None:
                return None
            row.is_active = False
            row.logged_out_at = now
            row.updated_at = now
            session.add(row)
            session.commit()
            session.refresh(row)
            session.expunge(row)
            return row

    def deactivate_all(self, user_id: int, now: datetime) -> int:
        with self.session_factory() as session:
            result = session.execute(
                update(UserSession)
                .where(UserSession.user_id == user_id)
                .where(UserSession.is_active == True)  # noqa: E712
                .values(is_active=False, logged_out_at=now, updated_at=now)
            )
            session.commit()
            return int(result.rowcount or 0)

    def list_active(self, user_id: int) -> list[UserSession]:
        with self.session_factory() as session:
            rows = list(
                session.exec(
                    select(UserSession)
                    .where(UserSession.user_id == user_id)
                    .where(UserSession.is_active == True)  # noqa: E712
                    .order_by(UserSession.last_activity.desc())  # type: ignore
                ).all()
            )
            session.expunge_all()
            return rows
