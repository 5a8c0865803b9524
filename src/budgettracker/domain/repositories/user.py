"""Credential store protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.user import User


class UserRepository(Protocol):
    """Repository for user accounts keyed by id and unique email."""

    def get_by_id(self, user_id: int) -> Optional[User]:
        """Retrieve a user by ID."""
        ...

    def get_by_email(self, email: str) -> Optional[User]:
        """Retrieve a user by (normalized) email."""
        ...

    def get_by_verification_token(self, token: str) -> Optional[User]:
        """Retrieve the user holding a pending verification token."""
        ...

    def list_all(self) -> list[User]:
        """List users ordered by creation time."""
        ...

    def create(self, user: User) -> User:
        """Insert a user; raises Conflict on duplicate email."""
        ...

    def update(self, user: User) -> User:
        """Persist changes to an existing user; raises Conflict on duplicate email."""
        ...

    def delete(self, user_id: int) -> bool:
        """Delete a user and everything it owns; False when missing."""
        ...
