"""Blueprint exports."""

from . import auth, configuration, transactions, users

__all__ = [
    "auth",
    "configuration",
    "transactions",
    "users",
]
