"""Transaction store protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.transaction import Transaction


class TransactionRepository(Protocol):
    """Repository for managing transaction entities."""

    def get_by_id(self, transaction_id: int, *, user_id: int) -> Optional[Transaction]:
        """Retrieve a transaction owned by the user."""
        ...

    def list_for_user(
        self, *, user_id: int, month: Optional[int] = None, year: Optional[int] = None
    ) -> list[Transaction]:
        """Transactions newest first (date, then creation time)."""
        ...

    def latest_paid_emi(self, *, user_id: int, month: int, year: int) -> Optional[Transaction]:
        """Most recent transaction flagged as paying the EMI for a period."""
        ...

    def create(self, transaction: Transaction, *, user_id: int) -> Transaction:
        ...

    def update(self, transaction: Transaction, *, user_id: int) -> Transaction:
        ...

    def delete(self, transaction_id: int, *, user_id: int) -> bool:
        ...
