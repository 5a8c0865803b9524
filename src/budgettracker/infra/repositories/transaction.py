"""SQLModel implementation of Transaction repository."""

from __future__ import annotations

from typing import Optional

from sqlmodel import select

from ...clock import utcnow
from ...models.transaction import Transaction
from ..database import SessionFactory


class SQLModelTransactionRepository:
    """SQLModel-based transaction repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, transaction_id: int, *, user_id: int) -> Optional[Transaction]:
        """Retrieve a transaction by ID."""
        with self.session_factory() as session:
            obj = session.exec(
                select(Transaction)
                .where(Transaction.id == transaction_id)
                .where(Transaction.user_id == user_id)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_for_user(
        self, *, user_id: int, month: Optional[int] = None, year: Optional[int] = None
    ) -> list[Transaction]:
        """List a user's transactions, optionally for one month and/or year."""
        with self.session_factory() as session:
            statement = select(Transaction).where(Transaction.user_id == user_id)
            if month is not None:
                statement = statement.where(Transaction.month == month)
            if year is not None:
                statement = statement.where(Transaction.year == year)
            statement = statement.order_by(
                Transaction.transaction_date.desc(),  # type: ignore
                Transaction.created_at.desc(),  # type: ignore
                Transaction.id.desc(),  # type: ignore
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def latest_paid_emi(self, *, user_id: int, month: int, year: int) -> Optional[Transaction]:
        """Return the most recent EMI-paying transaction in the period."""
        with self.session_factory() as session:
            obj = session.exec(
                select(Transaction)
                .where(Transaction.user_id == user_id)
                .where(Transaction.month == month)
                .where(Transaction.year == year)
                .where(Transaction.paid_emi == True)  # noqa: E712
                .order_by(
                    Transaction.transaction_date.desc(),  # type: ignore
                    Transaction.created_at.desc(),  # type: ignore
                    Transaction.id.desc(),  # type: ignore
                )
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def create(self, transaction: Transaction, *, user_id: int) -> Transaction:
        """Create a new transaction."""
        with self.session_factory() as session:
            transaction.user_id = user_id
            session.add(transaction)
            session.commit()
            session.refresh(transaction)
            session.expunge(transaction)
            return transaction

    def update(self, transaction: Transaction, *, user_id: int) -> Transaction:
        """Update an existing transaction."""
        with self.session_factory() as session:
            transaction.user_id = user_id
            transaction.updated_at = utcnow()
            merged = session.merge(transaction)
            session.commit()
            session.refresh(merged)
            session.expunge(merged)
            return merged

    def delete(self, transaction_id: int, *, user_id: int) -> bool:
        """Delete a transaction by ID."""
        with self.session_factory() as session:
            transaction = session.exec(
                select(Transaction)
                .where(Transaction.id == transaction_id)
                .where(Transaction.user_id == user_id)
            ).first()
            if transaction is None:
                return False
            session.delete(transaction)
            session.commit()
            return True
