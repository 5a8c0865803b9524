"""Configuration API blueprint package."""

from __future__ import annotations

from flask import Blueprint

bp = Blueprint("configuration", __name__, url_prefix="/api/configuration")

from . import routes  # noqa: E402,F401

__all__ = ["bp"]
