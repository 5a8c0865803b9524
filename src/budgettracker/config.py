"""Application configuration objects and helpers."""

from __future__ import annotations

import os
import re
from datetime import timedelta
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

load_dotenv()

_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$", re.IGNORECASE)
_DURATION_UNITS = {"": 1, "s": 1, "m": 60, "h": 3600, "d": 86400}


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        return default


def parse_duration(value: str | int | None, *, default: timedelta) -> timedelta:
    """Parse ``7d``/``12h``/``30m``/``45s`` (or bare seconds) into a timedelta."""

    if value is None or value == "":
        return default
    if isinstance(value, int):
        return timedelta(seconds=value)
    match = _DURATION_RE.match(str(value))
    if not match:
        raise ValueError(f"Invalid duration: {value!r}")
    amount, unit = match.groups()
    return timedelta(seconds=int(amount) * _DURATION_UNITS[unit.lower()])


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "Budget Tracker"
    ENV_NAME = "default"
    DB_FILENAME = "budgettracker.db"
    JWT_ALGORITHM = "HS256"
    DEFAULT_JWT_SECRET = "replace-me"
    DEBUG = False
    TESTING = False

    def __init__(self) -> None:
        self.DEV_MODE = self.ENV_NAME != "production"
        self.SECRET_KEY = os.getenv("BUDGETTRACKER_SECRET_KEY", "replace-me")
        self.DATA_DIR = self._resolve_data_dir()
        self.DATABASE_URL = os.getenv("BUDGETTRACKER_DATABASE_URL", self._build_sqlite_url())

        self.JWT_SECRET = os.getenv("BUDGETTRACKER_JWT_SECRET", self.DEFAULT_JWT_SECRET)
        self.JWT_EXPIRES_IN = parse_duration(
            os.getenv("BUDGETTRACKER_JWT_EXPIRES_IN", "7d"), default=timedelta(days=7)
        )
        self.VERIFICATION_TTL = timedelta(
            hours=_env_int("BUDGETTRACKER_VERIFICATION_TTL_HOURS", 24)
        )

        self.EMAIL_ENABLED = _env_bool("BUDGETTRACKER_EMAIL_ENABLED", default=False)
        self.EMAIL_FROM_NAME = os.getenv("BUDGETTRACKER_EMAIL_FROM_NAME", self.APP_NAME)
        self.EMAIL_FROM_ADDRESS = os.getenv(
            "BUDGETTRACKER_EMAIL_FROM_ADDRESS", "noreply@budgettracker.local"
        )
        self.SMTP_HOST = os.getenv("BUDGETTRACKER_SMTP_HOST", "smtp.gmail.com")
        self.SMTP_PORT = _env_int("BUDGETTRACKER_SMTP_PORT", 587)
        self.SMTP_USE_TLS = _env_bool("BUDGETTRACKER_SMTP_USE_TLS", default=True)
        self.SMTP_USE_SSL = _env_bool("BUDGETTRACKER_SMTP_USE_SSL", default=False)
        self.SMTP_USER = os.getenv("BUDGETTRACKER_SMTP_USER", "")
        self.SMTP_PASSWORD = os.getenv("BUDGETTRACKER_SMTP_PASSWORD", "")

        self.FRONTEND_URL = os.getenv("BUDGETTRACKER_FRONTEND_URL", "http://localhost:5173")
        origins = os.getenv("BUDGETTRACKER_CORS_ORIGINS", "*")
        self.CORS_ORIGINS = [origin.strip() for origin in origins.split(",") if origin.strip()]
        self.SHOW_ERROR_DETAILS = self.DEV_MODE

        if not self.DEV_MODE and self.JWT_SECRET == self.DEFAULT_JWT_SECRET:
            raise ValueError("BUDGETTRACKER_JWT_SECRET must be set in production.")

    def _resolve_data_dir(self) -> Path:
        """Return the directory where the SQLite file and logs live."""

        data_root = os.getenv("BUDGETTRACKER_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _build_sqlite_url(self) -> str:
        return f"sqlite:///{self.DATA_DIR / self.DB_FILENAME}"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        if self.DATABASE_URL.startswith("sqlite"):
            return {"connect_args": {"check_same_thread": False}}
        return {"pool_pre_ping": True}

    def flask_mail_settings(self) -> dict[str, Any]:
        """Translate SMTP settings into the keys Flask-Mail reads."""

        return {
            "MAIL_SERVER": self.SMTP_HOST,
            "MAIL_PORT": self.SMTP_PORT,
            "MAIL_USE_TLS": self.SMTP_USE_TLS,
            "MAIL_USE_SSL": self.SMTP_USE_SSL,
            "MAIL_USERNAME": self.SMTP_USER or None,
            "MAIL_PASSWORD": self.SMTP_PASSWORD or None,
            "MAIL_DEFAULT_SENDER": (self.EMAIL_FROM_NAME, self.EMAIL_FROM_ADDRESS),
            "MAIL_SUPPRESS_SEND": not self.EMAIL_ENABLED,
        }


class DevConfig(BaseConfig):
    """Development configuration using local SQLite."""

    ENV_NAME = "development"
    DEBUG = True


class ProductionConfig(BaseConfig):
    """Production configuration; requires an explicit JWT secret."""

    ENV_NAME = "production"


CONFIG_MAP: dict[str, type[BaseConfig]] = {
    "development": DevConfig,
    "production": ProductionConfig,
    "default": BaseConfig,
}


def resolve_config(name: str | None = None) -> type[BaseConfig]:
    """Return the config class for the provided environment name."""

    name = name or os.getenv("BUDGETTRACKER_ENV")
    if not name:
        return DevConfig
    return CONFIG_MAP.get(name.lower(), BaseConfig)
