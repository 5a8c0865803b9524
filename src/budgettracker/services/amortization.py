"""Months-to-payoff under a standard declining-balance amortization."""

from __future__ import annotations

import math
from typing import Optional

from ..numeric import to_optional_number


def months_to_payoff(balance: float, monthly_rate: float, payment: float) -> Optional[int]:
    """Return the whole number of months needed to clear ``balance``.

    ``monthly_rate`` is a fraction per month (annual percent / 100 / 12). The
    result is rounded up, so the last month may be a partial payment. ``None``
    means the loan never amortizes: no balance, no payment, a negative rate,
    or a payment that does not exceed the first month's interest.
    """

    balance_value = to_optional_number(balance)
    rate = to_optional_number(monthly_rate)
    payment_value = to_optional_number(payment)
    if balance_value is None or rate is None or payment_value is None:
        return None
    if balance_value <= 0 or payment_value <= 0 or rate < 0:
        return None

    if rate == 0:
        ratio = balance_value / payment_value
        if not math.isfinite(ratio):
            return None
        months = math.ceil(ratio)
    else:
        first_interest = balance_value * rate
        if payment_value <= first_interest:
            return None
        try:
            raw = (math.log(payment_value) - math.log(payment_value - first_interest)) / math.log1p(rate)
        except (ValueError, ZeroDivisionError):
            return None
        if not math.isfinite(raw):
            return None
        months = math.ceil(raw)

    return months if months > 0 else None


def monthly_rate_from_annual(interest_rate: object) -> float:
    """Convert an annual percentage into a monthly fraction; non-positive means 0."""

    rate = to_optional_number(interest_rate)
    if rate is None or rate <= 0:
        return 0.0
    return rate / 100.0 / 12.0


__all__ = ["monthly_rate_from_annual", "months_to_payoff"]
