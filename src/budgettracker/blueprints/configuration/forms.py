"""Configuration payload validation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping

from ...numeric import parse_iso_date, to_optional_number
from ...services.configuration import CONFIGURATION_FIELDS
from ..forms import MAX_AMOUNT, FormErrorsMixin

MAX_LOAN_COUNT = 1000


@dataclass(slots=True)
class ConfigurationForm(FormErrorsMixin):
    """Holds only the configuration keys the client actually sent."""

    data: Mapping[str, Any] = field(default_factory=dict)
    errors: Dict[str, List[str]] = field(default_factory=dict, init=False)

    @property
    def updates(self) -> dict[str, Any]:
        return {key: self.data[key] for key in CONFIGURATION_FIELDS if key in self.data}

    def _check_amount(self, key: str, value: Any) -> None:
        if value is None:
            return
        number = to_optional_number(value)
        if number is None:
            self.add_error(key, "Must be a number")
        elif number < 0:
            self.add_error(key, "Must not be negative")
        elif number > MAX_AMOUNT:
            self.add_error(key, f"Must not exceed {MAX_AMOUNT:,}")

    def _check_count(self, key: str, value: Any) -> None:
        if value is None:
            return
        number = to_optional_number(value)
        if number is None or not number.is_integer():
            self.add_error(key, "Must be a whole number")
        elif number < 0:
            self.add_error(key, "Must not be negative")
        elif number > MAX_LOAN_COUNT:
            self.add_error(key, f"Must not exceed {MAX_LOAN_COUNT}")

    def validate(self) -> bool:
        self.errors.clear()
        updates = self.updates

        for key in ("totalEmi", "income"):
            if key in updates:
                self._check_amount(key, updates[key])
        if "numberOfLoans" in updates:
            self._check_count("numberOfLoans", updates["numberOfLoans"])

        schedule = updates.get("emiSchedule")
        if schedule is not None:
            if not isinstance(schedule, list):
                self.add_error("emiSchedule", "Must be a list")
            else:
                for index, entry in enumerate(schedule):
                    if not isinstance(entry, Mapping):
                        self.add_error("emiSchedule", f"Entry {index} must be an object")
                        continue
                    if entry.get("date") is not None and parse_iso_date(entry["date"]) is None:
                        self.add_error("emiSchedule", f"Entry {index} has an invalid date")
                    self._check_amount("emiSchedule", entry.get("amount"))

        loans = updates.get("loans")
        if loans is not None:
            if not isinstance(loans, list):
                self.add_error("loans", "Must be a list")
            else:
                for index, loan in enumerate(loans):
                    self._check_loan(index, loan)

        return not self.errors

    def _check_loan(self, index: int, loan: Any) -> None:
        if not isinstance(loan, Mapping):
            self.add_error("loans", f"Loan {index} must be an object")
            return
        for key in ("principal", "currentBalance"):
            self._check_amount("loans", loan.get(key))
        rate = loan.get("interestRate")
        if rate is not None:
            number = to_optional_number(rate)
            if number is None or not 0 <= number <= 100:
                self.add_error("loans", f"Loan {index} interest rate must be between 0 and 100")
        version = loan.get("schemaVersion")
        if version is not None and (isinstance(version, bool) or not isinstance(version, int)):
            self.add_error("loans", f"Loan {index} schemaVersion must be an integer")
