"""SQLModel definitions for income/expense transactions."""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar, Optional

from sqlalchemy import Index
from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

from ..clock import utcnow
from .columns import timestamp_column

if TYPE_CHECKING:  # pragma: no cover - import guard for circular dependency
    from .user import User


class TransactionType(str, Enum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class Transaction(SQLModel, table=True):
    """A single financial event; month/year are derived from the date."""

    __tablename__: ClassVar[str] = "user_transactions"
    __table_args__ = (Index("ix_user_transactions_period", "user_id", "month", "year"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", nullable=False, index=True)
    type: TransactionType = Field(nullable=False)
    amount: float = Field(nullable=False, ge=0)
    category: Optional[str] = Field(default=None, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    transaction_date: date = Field(nullable=False, index=True)
    month: int = Field(nullable=False, ge=1, le=12)
    year: int = Field(nullable=False)
    loan_reference: Optional[str] = Field(default=None, max_length=150)
    paid_emi: bool = Field(default=False, nullable=False, index=True)
    created_at: datetime = Field(default_factory=utcnow, sa_column=timestamp_column())
    updated_at: datetime = Field(default_factory=utcnow, sa_column=timestamp_column())

    user: "User" = Relationship(sa_relationship=relationship("User", back_populates="transactions"))

    def set_date(self, value: date) -> None:
        """Assign the transaction date and recompute month/year."""

        self.transaction_date = value
        self.month = value.month
        self.year = value.year

    def public_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "type": self.type.value if isinstance(self.type, TransactionType) else self.type,
            "amount": self.amount,
            "category": self.category,
            "description": self.description,
            "transactionDate": self.transaction_date.isoformat() if self.transaction_date else None,
            "month": self.month,
            "year": self.year,
            "loanReference": self.loan_reference,
            "paidEmi": self.paid_emi,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
