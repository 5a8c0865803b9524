"""Transaction persistence and monthly summaries."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable, Mapping, Optional

from ..domain.repositories.transaction import TransactionRepository
from ..errors import NotFound
from ..models.transaction import Transaction, TransactionType

UPDATABLE_FIELDS = (
    "type",
    "amount",
    "category",
    "description",
    "transaction_date",
    "loan_reference",
    "paid_emi",
)


@dataclass(slots=True)
class TransactionSummary:
    income_total: float = 0.0
    expense_total: float = 0.0
    emi_paid: bool = False
    paid_emi_transaction_id: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "incomeTotal": self.income_total,
            "expenseTotal": self.expense_total,
            "emiPaid": self.emi_paid,
            "paidEmiTransactionId": self.paid_emi_transaction_id,
        }


def compute_summary(transactions: Iterable[Transaction]) -> TransactionSummary:
    """Total income and expenses; the first EMI-paying transaction is reported."""

    summary = TransactionSummary()
    for txn in transactions:
        amount = float(txn.amount or 0.0)
        if txn.type == TransactionType.INCOME:
            summary.income_total += amount
        elif txn.type == TransactionType.EXPENSE:
            summary.expense_total += amount
        if txn.paid_emi and summary.paid_emi_transaction_id is None:
            summary.emi_paid = True
            summary.paid_emi_transaction_id = txn.id
    return summary


def list_transactions(
    repo: TransactionRepository,
    *,
    user_id: int,
    month: Optional[int] = None,
    year: Optional[int] = None,
) -> tuple[list[Transaction], TransactionSummary]:
    rows = repo.list_for_user(user_id=user_id, month=month, year=year)
    return rows, compute_summary(rows)


def create_transaction(
    repo: TransactionRepository,
    *,
    user_id: int,
    type: TransactionType,
    amount: float,
    transaction_date: date,
    category: Optional[str] = None,
    description: Optional[str] = None,
    loan_reference: Optional[str] = None,
    paid_emi: bool = False,
) -> Transaction:
    txn = Transaction(
        user_id=user_id,
        type=type,
        amount=amount,
        category=category or None,
        description=description or None,
        loan_reference=loan_reference or None,
        paid_emi=bool(paid_emi),
        transaction_date=transaction_date,
        month=transaction_date.month,
        year=transaction_date.year,
    )
    return repo.create(txn, user_id=user_id)


def update_transaction(
    repo: TransactionRepository,
    *,
    user_id: int,
    transaction_id: int,
    changes: Mapping[str, Any],
) -> Transaction:
    """Apply a partial update; month/year follow the date when it changes."""

    txn = repo.get_by_id(transaction_id, user_id=user_id)
    if txn is None:
        raise NotFound("Unable to find transaction for this user")

    for name in UPDATABLE_FIELDS:
        if name not in changes:
            continue
        if name == "transaction_date":
            txn.set_date(changes[name])
        else:
            setattr(txn, name, changes[name])
    return repo.update(txn, user_id=user_id)


def delete_transaction(repo: TransactionRepository, *, user_id: int, transaction_id: int) -> None:
    if not repo.delete(transaction_id, user_id=user_id):
        raise NotFound("Unable to find transaction for this user")
