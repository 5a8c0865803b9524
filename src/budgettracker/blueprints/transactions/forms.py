"""Transaction form definitions and validation helpers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping

from ...models.transaction import TransactionType
from ...numeric import parse_iso_date, to_optional_number
from ..forms import MAX_AMOUNT, FormErrorsMixin, parse_bool

# JSON key -> (service field, max length for text fields)
TEXT_FIELDS = {
    "category": ("category", 100),
    "description": ("description", 500),
    "loanReference": ("loan_reference", 150),
}


@dataclass(slots=True)
class TransactionForm(FormErrorsMixin):
    """Validates a create (``partial=False``) or update (``partial=True``) payload.

    After ``validate`` succeeds, ``values`` holds snake_case service arguments
    for the keys that were supplied.
    """

    data: Mapping[str, Any] = field(default_factory=dict)
    partial: bool = False
    values: Dict[str, Any] = field(default_factory=dict, init=False)
    errors: Dict[str, List[str]] = field(default_factory=dict, init=False)

    def validate(self) -> bool:
        self.errors.clear()
        self.values.clear()
        data = self.data

        if "type" in data or not self.partial:
            raw_type = str(data.get("type") or "").strip().upper()
            try:
                self.values["type"] = TransactionType(raw_type)
            except ValueError:
                self.add_error("type", "Type must be INCOME or EXPENSE")

        if "amount" in data or not self.partial:
            amount = to_optional_number(data.get("amount"))
            if amount is None:
                self.add_error("amount", "Amount must be a number")
            elif amount < 0:
                self.add_error("amount", "Amount must not be negative")
            elif amount > MAX_AMOUNT:
                self.add_error("amount", f"Amount must not exceed {MAX_AMOUNT:,}")
            else:
                self.values["amount"] = amount

        if "transactionDate" in data or not self.partial:
            parsed = parse_iso_date(data.get("transactionDate"))
            if parsed is None:
                self.add_error("transactionDate", "Transaction date must be an ISO date")
            else:
                self.values["transaction_date"] = parsed

        for key, (attribute, max_length) in TEXT_FIELDS.items():
            if key not in data:
                continue
            value = data[key]
            if value is None:
                self.values[attribute] = None
                continue
            text = str(value).strip()
            if len(text) > max_length:
                self.add_error(key, f"Must be at most {max_length} characters")
            else:
                self.values[attribute] = text or None

        if "paidEmi" in data:
            flag = parse_bool(data["paidEmi"])
            if flag is None:
                self.add_error("paidEmi", "paidEmi must be a boolean")
            else:
                self.values["paid_emi"] = flag

        return not self.errors
