"""Session store tests, including the concurrent-login path."""

from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime, timezone

import pytest
from sqlalchemy import event
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from budgettracker.infra.repositories import SQLModelSessionRepository
from budgettracker.models import UserSession

NOW = datetime(2024, 5, 20, 9, 0, tzinfo=timezone.utc)


def _upsert(repo, user, token: str, device_id: str = "dev-1"):
    return repo.upsert_active(
        user_id=user.id,
        device_id=device_id,
        token=token,
        ip_address="127.0.0.1",
        user_agent=None,
        device_info=None,
        now=NOW,
    )


def test_upsert_refreshes_existing_active_row(sessions_repo, user):
    first, created_first = _upsert(sessions_repo, user, "token-1")
    second, created_second = _upsert(sessions_repo, user, "token-2")

    assert created_first is True
    assert created_second is False
    assert first.id == second.id
    assert second.token == "token-2"
    assert sessions_repo.find_active_by_token("token-1") is None
    assert sessions_repo.find_active(user.id, "dev-1").token == "token-2"


def test_database_allows_one_active_row_per_device(db_engine, user):
    with Session(db_engine) as session:
        session.add(UserSession(user_id=user.id, device_id="dev-1", token="a", is_active=False))
        session.add(UserSession(user_id=user.id, device_id="dev-1", token="b", is_active=True))
        session.commit()

    with Session(db_engine) as session:
        session.add(UserSession(user_id=user.id, device_id="dev-1", token="c", is_active=True))
        with pytest.raises(IntegrityError):
            session.commit()


def test_upsert_retries_when_a_concurrent_login_wins(db_engine, session_factory, user):
    calls = {"count": 0}

    @contextmanager
    def racing_factory():
        with session_factory() as session:
            calls["count"] += 1
            if calls["count"] == 1:

                def competing_login(*_args):
                    # Another request commits the active row between our lookup and insert.
                    with Session(db_engine) as other:
                        other.add(
                            UserSession(user_id=user.id, device_id="dev-1", token="other-token")
                        )
                        other.commit()

                event.listen(session, "before_flush", competing_login, once=True)
            yield session

    repo = SQLModelSessionRepository(racing_factory)

    row, created = _upsert(repo, user, "our-token")

    assert calls["count"] == 2
    assert created is False
    assert row.token == "our-token"
    with Session(db_engine) as session:
        active = session.exec(
            select(UserSession).where(UserSession.is_active == True)  # noqa: E712
        ).all()
    assert [session_row.token for session_row in active] == ["our-token"]


def test_deactivate_all_counts_only_active_rows(sessions_repo, user):
    _upsert(sessions_repo, user, "t1", device_id="a")
    stale, _ = _upsert(sessions_repo, user, "t2", device_id="b")
    sessions_repo.deactivate(stale.id, NOW)

    assert sessions_repo.deactivate_all(user.id, NOW) == 1
    assert sessions_repo.list_active(user.id) == []
