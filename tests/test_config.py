"""Configuration loading tests."""

from __future__ import annotations

from datetime import timedelta

import pytest

from budgettracker.config import (
    BaseConfig,
    DevConfig,
    ProductionConfig,
    parse_duration,
    resolve_config,
)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("7d", timedelta(days=7)),
        ("12h", timedelta(hours=12)),
        ("30m", timedelta(minutes=30)),
        ("45s", timedelta(seconds=45)),
        ("90", timedelta(seconds=90)),
        (3600, timedelta(hours=1)),
        ("", timedelta(days=1)),
        (None, timedelta(days=1)),
    ],
)
def test_parse_duration(value, expected):
    assert parse_duration(value, default=timedelta(days=1)) == expected


def test_parse_duration_rejects_garbage():
    with pytest.raises(ValueError):
        parse_duration("soon", default=timedelta(days=1))


def test_dev_config_reads_environment(config, tmp_path, monkeypatch):
    monkeypatch.setenv("BUDGETTRACKER_JWT_EXPIRES_IN", "2h")
    monkeypatch.setenv("BUDGETTRACKER_VERIFICATION_TTL_HOURS", "48")
    monkeypatch.setenv("BUDGETTRACKER_CORS_ORIGINS", "http://a.test, http://b.test")

    cfg = DevConfig()

    assert cfg.DEV_MODE is True
    assert cfg.SHOW_ERROR_DETAILS is True
    assert cfg.DATA_DIR == tmp_path.resolve()
    assert cfg.JWT_SECRET == "test-secret"
    assert cfg.JWT_EXPIRES_IN == timedelta(hours=2)
    assert cfg.VERIFICATION_TTL == timedelta(hours=48)
    assert cfg.CORS_ORIGINS == ["http://a.test", "http://b.test"]
    assert cfg.EMAIL_ENABLED is False


def test_default_sqlite_url_lives_in_data_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("BUDGETTRACKER_DATA_DIR", str(tmp_path))
    monkeypatch.delenv("BUDGETTRACKER_DATABASE_URL", raising=False)

    cfg = DevConfig()

    assert cfg.DATABASE_URL == f"sqlite:///{tmp_path.resolve() / 'budgettracker.db'}"
    assert "check_same_thread" in cfg.sqlalchemy_engine_options()["connect_args"]


def test_production_requires_jwt_secret(tmp_path, monkeypatch):
    monkeypatch.setenv("BUDGETTRACKER_DATA_DIR", str(tmp_path))
    monkeypatch.delenv("BUDGETTRACKER_JWT_SECRET", raising=False)

    with pytest.raises(ValueError):
        ProductionConfig()

    monkeypatch.setenv("BUDGETTRACKER_JWT_SECRET", "prod-secret")
    cfg = ProductionConfig()
    assert cfg.DEV_MODE is False
    assert cfg.SHOW_ERROR_DETAILS is False


def test_resolve_config(monkeypatch):
    monkeypatch.delenv("BUDGETTRACKER_ENV", raising=False)
    assert resolve_config() is DevConfig
    assert resolve_config("production") is ProductionConfig
    assert resolve_config("unknown") is BaseConfig

    monkeypatch.setenv("BUDGETTRACKER_ENV", "Production")
    assert resolve_config() is ProductionConfig


def test_flask_mail_settings(config, monkeypatch):
    monkeypatch.setenv("BUDGETTRACKER_EMAIL_ENABLED", "true")
    monkeypatch.setenv("BUDGETTRACKER_SMTP_HOST", "smtp.example.com")
    monkeypatch.setenv("BUDGETTRACKER_SMTP_PORT", "2525")
    monkeypatch.setenv("BUDGETTRACKER_SMTP_USER", "mailer")

    settings = DevConfig().flask_mail_settings()

    assert settings["MAIL_SERVER"] == "smtp.example.com"
    assert settings["MAIL_PORT"] == 2525
    assert settings["MAIL_USERNAME"] == "mailer"
    assert settings["MAIL_PASSWORD"] is None
    assert settings["MAIL_SUPPRESS_SEND"] is False
