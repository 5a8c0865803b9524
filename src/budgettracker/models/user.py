"""User model supporting registration, verification and sessions."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, ClassVar, Optional

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

from ..clock import utcnow
from .columns import timestamp_column

if TYPE_CHECKING:  # pragma: no cover - import guard for circular dependency
    from .configuration import UserConfiguration
    from .session import UserSession
    from .transaction import Transaction


class User(SQLModel, table=True):
    """Registered account; created unverified and verified exactly once."""

    __tablename__: ClassVar[str] = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_name: str = Field(nullable=False, max_length=50)
    email: str = Field(nullable=False, unique=True, index=True, max_length=255)
    password_hash: str = Field(nullable=False, max_length=255)
    is_verified: bool = Field(default=False, nullable=False)
    verification_token: Optional[str] = Field(
        default=None, unique=True, index=True, max_length=128
    )
    verification_token_expiry: Optional[datetime] = Field(
        default=None, sa_column=timestamp_column(nullable=True)
    )
    created_at: datetime = Field(default_factory=utcnow, sa_column=timestamp_column())
    updated_at: datetime = Field(default_factory=utcnow, sa_column=timestamp_column())

    sessions: list["UserSession"] = Relationship(
        sa_relationship=relationship(
            "UserSession", back_populates="user", cascade="all, delete-orphan"
        ),
    )
    configuration: "UserConfiguration | None" = Relationship(
        sa_relationship=relationship(
            "UserConfiguration",
            back_populates="user",
            uselist=False,
            cascade="all, delete-orphan",
        ),
    )
    transactions: list["Transaction"] = Relationship(
        sa_relationship=relationship(
            "Transaction", back_populates="user", cascade="all, delete-orphan"
        ),
    )

    def public_dict(self) -> dict[str, Any]:
        """Serialize without the password hash or verification secrets."""

        return {
            "id": self.id,
            "userName": self.user_name,
            "email": self.email,
            "isVerified": self.is_verified,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
