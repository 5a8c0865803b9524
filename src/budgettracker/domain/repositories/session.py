"""Session store protocol."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Protocol

from ...models.session import UserSession


class SessionRepository(Protocol):
    """Repository for per-device sessions; unique on (user, device, active) and token."""

    def get_by_id(self, session_id: int) -> Optional[UserSession]:
        ...

    def find_active(self, user_id: int, device_id: str) -> Optional[UserSession]:
        """Return the active session for a (user, device) pair."""
        ...

    def find_active_by_token(self, token: str) -> Optional[UserSession]:
        ...

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
        """Atomically refresh the active row for (user, device) or insert one.

        Returns the row and whether it was created.
        """
        ...

    def touch(self, session_id: int, now: datetime) -> Optional[UserSession]:
        """Stamp last activity."""
        ...

    def deactivate(self, session_id: int, now: datetime) -> Optional[UserSession]:
        ...

    def deactivate_all(self, user_id: int, now: datetime) -> int:
        """Deactivate every active session of a user and return the count."""
        ...

    def list_active(self, user_id: int) -> list[UserSession]:
        """Active sessions ordered by last activity, newest first."""
        ...
