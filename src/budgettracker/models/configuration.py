"""Per-user financial configuration (loans, EMI, income)."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, ClassVar, Optional

from sqlalchemy import JSON, Column
from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

from ..clock import utcnow
from .columns import timestamp_column
from .loan import EmiScheduleEntry, LoanRecord

if TYPE_CHECKING:  # pragma: no cover
    from .user import User


class UserConfiguration(SQLModel, table=True):
    """One-to-one with ``User``; ``is_configured`` only ever flips to True."""

    __tablename__: ClassVar[str] = "user_configuration"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", nullable=False, unique=True, index=True)
    total_emi: Optional[float] = Field(default=None)
    number_of_loans: int = Field(default=0, nullable=False, ge=0)
    emi_schedule: Optional[list[dict[str, Any]]] = Field(default=None, sa_column=Column(JSON))
    loans: Optional[list[dict[str, Any]]] = Field(default=None, sa_column=Column(JSON))
    income: Optional[float] = Field(default=None)
    is_configured: bool = Field(default=False, nullable=False)
    created_at: datetime = Field(default_factory=utcnow, sa_column=timestamp_column())
    updated_at: datetime = Field(default_factory=utcnow, sa_column=timestamp_column())

    user: "User" = Relationship(
        sa_relationship=relationship("User", back_populates="configuration")
    )

    def loan_records(self) -> list[LoanRecord]:
        return [LoanRecord.from_dict(item) for item in (self.loans or []) if isinstance(item, dict)]

    def schedule_entries(self) -> list[EmiScheduleEntry]:
        return [
            EmiScheduleEntry.from_dict(item)
            for item in (self.emi_schedule or [])
            if isinstance(item, dict)
        ]

    def public_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "totalEmi": self.total_emi,
            "numberOfLoans": self.number_of_loans,
            "emiSchedule": self.emi_schedule,
            "loans": self.loans,
            "income": self.income,
            "isConfigured": self.is_configured,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
