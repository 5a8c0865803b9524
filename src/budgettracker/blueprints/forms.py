"""Shared helpers for the dataclass request forms."""

from __future__ import annotations

import re
from typing import Any, Dict, List, Mapping

from ..errors import ValidationFailed

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
TRUE_VALUES = {"1", "true", "yes", "on"}
FALSE_VALUES = {"0", "false", "no", "off"}
# Upper bound for any single money amount accepted from a client.
MAX_AMOUNT = 1_000_000_000_000


class FormErrorsMixin:
    """Collects per-field errors; subclasses declare ``errors`` as a dataclass field."""

    errors: Dict[str, List[str]]

    def add_error(self, field: str, message: str) -> None:
        self.errors.setdefault(field, []).append(message)

    def raise_for_errors(self) -> None:
        if self.errors:
            raise ValidationFailed(
                details=[
                    {"field": field, "message": message}
                    for field, messages in self.errors.items()
                    for message in messages
                ]
            )


def json_body(payload: Any) -> Mapping[str, Any]:
    """Return the request JSON as a mapping, treating anything else as empty."""

    return payload if isinstance(payload, Mapping) else {}


def parse_bool(value: Any) -> bool | None:
    """Interpret JSON/text booleans; None when unrecognized."""

    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in TRUE_VALUES:
            return True
        if lowered in FALSE_VALUES:
            return False
    return None


def first_present(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return None
