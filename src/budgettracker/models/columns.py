"""Column types shared by the table models."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import Column, DateTime
from sqlalchemy.types import TypeDecorator

from ..clock import as_utc


class UTCDateTime(TypeDecorator):
    """``DateTime(timezone=True)`` that always binds and loads aware UTC values.

    SQLite keeps no offset, so loaded values get UTC attached again.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: Optional[datetime], dialect: Any) -> Optional[datetime]:
        if value is None:
            return None
        return as_utc(value)

    def process_result_value(self, value: Optional[datetime], dialect: Any) -> Optional[datetime]:
        if value is None:
            return None
        return as_utc(value)


def timestamp_column(*, nullable: bool = False) -> Column:
    return Column(UTCDateTime(), nullable=nullable)
