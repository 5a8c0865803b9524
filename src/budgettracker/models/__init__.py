"""SQLModel table exports."""

from .configuration import UserConfiguration
from .loan import EmiScheduleEntry, LoanRecord
from .session import UserSession
from .transaction import Transaction, TransactionType
from .user import User

__all__ = [
    "EmiScheduleEntry",
    "LoanRecord",
    "Transaction",
    "TransactionType",
    "User",
    "UserConfiguration",
    "UserSession",
]
