"""Loan allocation: split the EMI budget across loans and project payoff dates."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Iterable, Mapping, Optional, Union

from ..models.loan import LoanRecord
from ..numeric import to_iso_date, to_optional_number
from .amortization import monthly_rate_from_annual, months_to_payoff

# Assumed payoff horizon when the user has not configured a total EMI.
FALLBACK_PAYOFF_MONTHS = 12

LoanInput = Union[LoanRecord, Mapping[str, Any]]


@dataclass(slots=True)
class EnrichedLoan:
    """A stored loan plus its computed monthly payment and payoff projection."""

    id: str
    bank_name: Optional[str]
    loan_type: Optional[str]
    principal: Optional[float]
    balance: float
    interest_rate: Optional[float]
    start_date: Optional[str]
    current_balance: Optional[float]
    notes: Optional[str]
    monthly_payment: float
    months_to_payoff: Optional[int]
    payoff_date: Optional[str]

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "bankName": self.bank_name,
            "loanType": self.loan_type,
            "principal": self.principal,
            "balance": self.balance,
            "interestRate": self.interest_rate,
            "startDate": self.start_date,
            "currentBalance": self.current_balance,
            "notes": self.notes,
            "monthlyPayment": self.monthly_payment,
            "monthsToPayoff": self.months_to_payoff,
            "payoffDate": self.payoff_date,
        }


@dataclass(slots=True)
class LoanPortfolio:
    loans: list[EnrichedLoan] = field(default_factory=list)
    total_balance: float = 0.0


def resolve_balance(loan: LoanRecord) -> float:
    """Prefer the outstanding balance, then the principal, else 0."""

    if loan.current_balance is not None:
        return loan.current_balance
    if loan.principal is not None:
        return loan.principal
    return 0.0


def add_months(start: date, months: int) -> date:
    """First day of the month ``months`` after ``start``'s month."""

    index = start.year * 12 + (start.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def project_payoff_date(months: Optional[int], today: date) -> Optional[str]:
    """ISO payoff date, or ``None`` when there is no projection or it falls past year 9999."""

    if months is None:
        return None
    try:
        return to_iso_date(add_months(today, months))
    except (OverflowError, ValueError):
        return None


def _as_record(loan: LoanInput) -> LoanRecord:
    return loan if isinstance(loan, LoanRecord) else LoanRecord.from_dict(loan)


def allocate_loans(
    *, total_emi: Any, loans: Iterable[LoanInput], today: date
) -> LoanPortfolio:
    """Enrich ``loans`` in input order with payment, months and payoff date.

    When both ``total_emi`` and the summed balance are positive each loan gets
    a share of the EMI proportional to its balance; otherwise each loan is
    assumed to be paid off evenly over twelve months.
    """

    records = [_as_record(loan) for loan in loans]
    balances = [resolve_balance(record) for record in records]
    total_balance = sum(balances)
    emi = to_optional_number(total_emi) or 0.0
    proportional = total_balance > 0 and emi > 0

    enriched: list[EnrichedLoan] = []
    for index, (record, balance) in enumerate(zip(records, balances)):
        if proportional:
            payment = emi * (balance / total_balance)
        else:
            payment = balance / FALLBACK_PAYOFF_MONTHS
        months = months_to_payoff(balance, monthly_rate_from_annual(record.interest_rate), payment)
        enriched.append(
            EnrichedLoan(
                id=record.id if record.id is not None else str(index),
                bank_name=record.bank_name,
                loan_type=record.loan_type,
                principal=record.principal,
                balance=balance,
                interest_rate=record.interest_rate,
                start_date=record.start_date,
                current_balance=record.current_balance,
                notes=record.notes,
                monthly_payment=payment,
                months_to_payoff=months,
                payoff_date=project_payoff_date(months, today),
            )
        )

    return LoanPortfolio(loans=enriched, total_balance=total_balance)


__all__ = [
    "EnrichedLoan",
    "FALLBACK_PAYOFF_MONTHS",
    "LoanPortfolio",
    "add_months",
    "allocate_loans",
    "project_payoff_date",
    "resolve_balance",
]
