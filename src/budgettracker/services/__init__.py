"""Service module exports."""

from . import (
    amortization,
    auth,
    configuration,
    email_templates,
    jobs,
    loans,
    mailer,
    security,
    transactions,
    users,
)

__all__ = [
    "amortization",
    "auth",
    "configuration",
    "email_templates",
    "jobs",
    "loans",
    "mailer",
    "security",
    "transactions",
    "users",
]
