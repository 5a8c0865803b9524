"""Safe numeric coercion and ISO date formatting."""

from __future__ import annotations

import math
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Optional


def to_optional_number(value: Any) -> Optional[float]:
    """Return ``value`` as a finite float, or ``None`` when it is not numeric.

    Strings are parsed (``"1,200.50"`` is accepted), booleans are rejected and
    NaN/infinity are treated as missing.
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        cleaned = value.strip().replace(",", "")
        if not cleaned:
            return None
        try:
            number = float(Decimal(cleaned))
        except (InvalidOperation, ValueError):
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def to_number(value: Any, default: float = 0.0) -> float:
    """Coerce ``value`` to a finite float, falling back to ``default``."""

    number = to_optional_number(value)
    return default if number is None else number


def to_iso_date(value: date | datetime | None) -> Optional[str]:
    """Format a date (or the date part of a datetime) as ``YYYY-MM-DD``."""

    if value is None:
        return None
    if isinstance(value, datetime):
        value = value.date()
    return value.isoformat()


def parse_iso_date(value: Any) -> Optional[date]:
    """Parse ``YYYY-MM-DD`` or a full ISO timestamp into a date, else ``None``."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        return None


__all__ = ["parse_iso_date", "to_iso_date", "to_number", "to_optional_number"]
