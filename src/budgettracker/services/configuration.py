"""Configuration writes and the live loan-summary view."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Optional

from ..clock import as_utc, utcnow
from ..domain.repositories.configuration import ConfigurationRepository
from ..domain.repositories.transaction import TransactionRepository
from ..errors import NotFound
from ..logging_config import get_logger
from ..models.configuration import UserConfiguration
from ..models.loan import EmiScheduleEntry, LoanRecord
from ..numeric import to_iso_date, to_optional_number
from .loans import EnrichedLoan, allocate_loans

logger = get_logger(__name__)

# Keys accepted on write, mapped to model attributes.
CONFIGURATION_FIELDS = {
    "totalEmi": "total_emi",
    "numberOfLoans": "number_of_loans",
    "emiSchedule": "emi_schedule",
    "loans": "loans",
    "income": "income",
}


@dataclass(slots=True)
class ConfigurationWrite:
    configuration: UserConfiguration
    created: bool


@dataclass(slots=True)
class EmiStatus:
    month: int
    year: int
    paid: bool = False
    transaction_id: Optional[int] = None
    paid_on: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "month": self.month,
            "year": self.year,
            "paidThisMonth": self.paid,
            "paidTransactionId": self.transaction_id,
            "paidOn": self.paid_on,
        }


@dataclass(slots=True)
class LoanSummary:
    income: Optional[float]
    total_emi: Optional[float]
    number_of_loans: int
    total_loan_balance: float
    emi_status: EmiStatus
    loans: list[EnrichedLoan] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "income": self.income,
            "totalEmi": self.total_emi,
            "numberOfLoans": self.number_of_loans,
            "totalLoanBalance": self.total_loan_balance,
            "loans": [loan.to_dict() for loan in self.loans],
            "emiStatus": self.emi_status.to_dict(),
        }


def _normalize_loans(value: Any) -> Optional[list[dict[str, Any]]]:
    if value is None:
        return None
    return [LoanRecord.from_dict(item).to_dict() for item in value if isinstance(item, Mapping)]


def _normalize_schedule(value: Any) -> Optional[list[dict[str, Any]]]:
    if value is None:
        return None
    return [EmiScheduleEntry.from_dict(item).to_dict() for item in value if isinstance(item, Mapping)]


def _normalize_updates(updates: Mapping[str, Any]) -> dict[str, Any]:
    """Translate supplied camelCase keys into storable model values."""

    values: dict[str, Any] = {}
    if "totalEmi" in updates:
        values["total_emi"] = to_optional_number(updates["totalEmi"])
    if "income" in updates:
        values["income"] = to_optional_number(updates["income"])
    if "numberOfLoans" in updates:
        count = to_optional_number(updates["numberOfLoans"])
        values["number_of_loans"] = int(count) if count is not None else 0
    if "emiSchedule" in updates:
        values["emi_schedule"] = _normalize_schedule(updates["emiSchedule"])
    if "loans" in updates:
        values["loans"] = _normalize_loans(updates["loans"])
    return values


def supplies_configuration(values: Mapping[str, Any]) -> bool:
    """True when income, total EMI or a non-empty loan list is present."""

    return bool(values.get("income") or values.get("total_emi") or values.get("loans"))


def create_or_update_configuration(
    repo: ConfigurationRepository, *, user_id: int, updates: Mapping[str, Any]
) -> ConfigurationWrite:
    """Find-or-create the user's configuration and apply the supplied fields.

    Keys absent from ``updates`` keep their stored values; an explicit
    ``None`` clears them. ``is_configured`` never reverts to False.
    """

    values = _normalize_updates(updates)
    configured_now = supplies_configuration(values)

    def apply(row: UserConfiguration, created: bool) -> None:
        for attribute, value in values.items():
            setattr(row, attribute, value)
        row.is_configured = bool(row.is_configured or configured_now)

    configuration, created = repo.upsert(user_id, apply)
    logger.info(
        "Configuration %s",
        "created" if created else "updated",
        extra={"user_id": user_id, "is_configured": configuration.is_configured},
    )
    return ConfigurationWrite(configuration=configuration, created=created)


def get_configuration(repo: ConfigurationRepository, *, user_id: int) -> Optional[UserConfiguration]:
    return repo.get_by_user(user_id)


def configuration_status(repo: ConfigurationRepository, *, user_id: int) -> bool:
    configuration = repo.get_by_user(user_id)
    return bool(configuration and configuration.is_configured)


def get_loan_summary(
    configurations: ConfigurationRepository,
    transactions: TransactionRepository,
    *,
    user_id: int,
    now: Optional[datetime] = None,
) -> LoanSummary:
    """Merge stored configuration with this month's EMI payment state.

    Read-only: projections are recomputed on every call and never stored.
    Raises NotFound when the user has no configuration row.
    """

    configuration = configurations.get_by_user(user_id)
    if configuration is None:
        raise NotFound("Configuration not found for this user")

    current = as_utc(now) if now else utcnow()
    portfolio = allocate_loans(
        total_emi=configuration.total_emi,
        loans=configuration.loan_records(),
        today=current.date(),
    )

    status = EmiStatus(month=current.month, year=current.year)
    paid = transactions.latest_paid_emi(user_id=user_id, month=current.month, year=current.year)
    if paid is not None:
        status.paid = True
        status.transaction_id = paid.id
        status.paid_on = to_iso_date(paid.transaction_date)

    return LoanSummary(
        income=configuration.income,
        total_emi=configuration.total_emi,
        number_of_loans=configuration.number_of_loans,
        total_loan_balance=portfolio.total_balance,
        emi_status=status,
        loans=portfolio.loans,
    )
