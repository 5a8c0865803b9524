"""SQLModel repository implementations."""

from .configuration import SQLModelConfigurationRepository
from .session import SQLModelSessionRepository
from .transaction import SQLModelTransactionRepository
from .user import SQLModelUserRepository

__all__ = [
    "SQLModelConfigurationRepository",
    "SQLModelSessionRepository",
    "SQLModelTransactionRepository",
    "SQLModelUserRepository",
]
