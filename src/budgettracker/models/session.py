"""Per-device authentication sessions."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, ClassVar, Optional

from sqlalchemy import JSON, Column, Index, text
from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

from ..clock import utcnow
from .columns import timestamp_column

if TYPE_CHECKING:  # pragma: no cover
    from .user import User


class UserSession(SQLModel, table=True):
    """One (user, device) login; revoked by flipping ``is_active``, never deleted."""

    __tablename__: ClassVar[str] = "user_sessions"
    # At most one active row per (user, device); inactive rows are history.
    __table_args__ = (
        Index(
            "uq_user_sessions_active_device",
            "user_id",
            "device_id",
            unique=True,
            sqlite_where=text("is_active = 1"),
            postgresql_where=text("is_active"),
        ),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", nullable=False, index=True)
    device_id: str = Field(nullable=False, index=True, max_length=255)
    ip_address: str = Field(default="unknown", nullable=False, max_length=64)
    user_agent: Optional[str] = Field(default=None, max_length=1024)
    device_info: Optional[dict[str, Any]] = Field(default=None, sa_column=Column(JSON))
    token: str = Field(nullable=False, unique=True, max_length=2048)
    is_active: bool = Field(default=True, nullable=False, index=True)
    last_activity: datetime = Field(default_factory=utcnow, sa_column=timestamp_column())
    logged_out_at: Optional[datetime] = Field(
        default=None, sa_column=timestamp_column(nullable=True)
    )
    created_at: datetime = Field(default_factory=utcnow, sa_column=timestamp_column())
    updated_at: datetime = Field(default_factory=utcnow, sa_column=timestamp_column())

    user: "User" = Relationship(sa_relationship=relationship("User", back_populates="sessions"))

    def public_dict(self) -> dict[str, Any]:
        """Serialize without the bearer token."""

        return {
            "id": self.id,
            "userId": self.user_id,
            "deviceId": self.device_id,
            "ipAddress": self.ip_address,
            "userAgent": self.user_agent,
            "deviceInfo": self.device_info,
            "isActive": self.is_active,
            "lastActivity": self.last_activity.isoformat() if self.last_activity else None,
            "loggedOutAt": self.logged_out_at.isoformat() if self.logged_out_at else None,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
