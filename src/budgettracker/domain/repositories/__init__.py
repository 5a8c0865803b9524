"""Repository protocol definitions for domain layer."""

from .configuration import ConfigurationRepository
from .session import SessionRepository
from .transaction import TransactionRepository
from .user import UserRepository

__all__ = [
    "ConfigurationRepository",
    "SessionRepository",
    "TransactionRepository",
    "UserRepository",
]
