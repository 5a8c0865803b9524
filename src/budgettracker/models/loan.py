"""Versioned record types stored inside the configuration JSON columns."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..numeric import to_optional_number

LOAN_SCHEMA_VERSION = 1


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass(slots=True)
class LoanRecord:
    """One user-declared loan; every field except the version is optional."""

    id: Optional[str] = None
    bank_name: Optional[str] = None
    loan_type: Optional[str] = None
    principal: Optional[float] = None
    interest_rate: Optional[float] = None  # percent per annum
    start_date: Optional[str] = None
    current_balance: Optional[float] = None
    notes: Optional[str] = None
    schema_version: int = LOAN_SCHEMA_VERSION

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LoanRecord":
        """Build from the camelCase JSON shape, coercing numeric fields."""

        raw_id = data.get("id")
        return cls(
            id=None if raw_id is None or raw_id == "" else str(raw_id),
            bank_name=_optional_text(data.get("bankName")),
            loan_type=_optional_text(data.get("loanType")),
            principal=to_optional_number(data.get("principal")),
            interest_rate=to_optional_number(data.get("interestRate")),
            start_date=_optional_text(data.get("startDate")),
            current_balance=to_optional_number(data.get("currentBalance")),
            notes=_optional_text(data.get("notes")),
            schema_version=int(data.get("schemaVersion") or LOAN_SCHEMA_VERSION),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "schemaVersion": self.schema_version,
            "id": self.id,
            "bankName": self.bank_name,
            "loanType": self.loan_type,
            "principal": self.principal,
            "interestRate": self.interest_rate,
            "startDate": self.start_date,
            "currentBalance": self.current_balance,
            "notes": self.notes,
        }


@dataclass(slots=True)
class EmiScheduleEntry:
    """A dated EMI amount in the optional schedule."""

    date: Optional[str]
    amount: Optional[float]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "EmiScheduleEntry":
        return cls(date=_optional_text(data.get("date")), amount=to_optional_number(data.get("amount")))

    def to_dict(self) -> dict[str, Any]:
        return {"date": self.date, "amount": self.amount}
