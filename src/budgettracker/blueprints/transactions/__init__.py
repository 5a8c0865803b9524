"""Transactions API blueprint package."""

from __future__ import annotations

from flask import Blueprint

bp = Blueprint("transactions", __name__, url_prefix="/api/transactions")

from . import routes  # noqa: E402,F401

__all__ = ["bp"]
