"""SQLModel implementation of the credential store."""

from __future__ import annotations

from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import select

from ...clock import utcnow
from ...errors import Conflict
from ...models.user import User
from ..database import SessionFactory


class SQLModelUserRepository:
    """SQLModel-based user repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with self.session_factory() as session:
            user = session.get(User, user_id)
            if user:
                session.expunge(user)
            return user

    def get_by_email(self, email: str) -> Optional[User]:
        with self.session_factory() as session:
            user = session.exec(select(User).where(User.email == email)).first()
            if user:
                session.expunge(user)
            return user

    def get_by_verification_token(self, token: str) -> Optional[User]:
        with self.session_factory() as session:
            user = session.exec(select(User).where(User.verification_token == token)).first()
            if user:
                session.expunge(user)
            return user

    def list_all(self) -> list[User]:
        with self.session_factory() as session:
            users = list(session.exec(select(User).order_by(User.created_at, User.id)).all())
            session.expunge_all()
            return users

    def create(self, user: User) -> User:
        try:
            with self.session_factory() as session:
                session.add(user)
                session.commit()
                session.refresh(user)
                session.expunge(user)
                return user
        except IntegrityError as exc:
            raise Conflict("A user with this email already exists") from exc

    def update(self, user: User) -> User:
        user.updated_at = utcnow()
        try:
            with self.session_factory() as session:
                merged = session.merge(user)
                session.commit()
                session.refresh(merged)
                session.expunge(merged)
                return merged
        except IntegrityError as exc:
            raise Conflict("A user with this email already exists") from exc

    def delete(self, user_id: int) -> bool:
        """Delete the user; ORM cascades remove sessions, configuration and transactions."""
        with self.session_factory() as session:
            user = session.get(User, user_id)
            if user is None:
                return False
            session.delete(user)
            session.commit()
            return True
