"""Budget Tracker application factory."""

from __future__ import annotations

from importlib import import_module
from typing import Iterable

from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from . import cli as _cli
from .config import BaseConfig, resolve_config
from .errors import BudgetTrackerError, InternalError
from .logging_config import get_logger, setup_logging

logger = get_logger(__name__)


def _blueprint_paths() -> Iterable[str]:
    """Yield blueprint import paths served under ``/api``."""

    yield "budgettracker.blueprints.auth"
    yield "budgettracker.blueprints.users"
    yield "budgettracker.blueprints.configuration"
    yield "budgettracker.blueprints.transactions"


def create_app(config_name: str | None = None, *, config: BaseConfig | None = None) -> Flask:
    """Create and configure the Flask application instance."""

    app = Flask(__name__, instance_relative_config=True)
    config_obj = config or resolve_config(config_name)()
    app.config.from_object(config_obj)
    app.config["BUDGETTRACKER_CONFIG"] = config_obj
    app.json.sort_keys = False

    setup_logging(config_obj)

    # Imported lazily so importing the package does not configure SQLModel mappers.
    from .extensions import init_services

    init_services(app, config_obj)
    CORS(app, resources={r"/api/*": {"origins": config_obj.CORS_ORIGINS}})

    _register_blueprints(app)
    _register_error_handlers(app)

    @app.get("/api/health")
    def health():
        return jsonify({"status": "ok", "app": config_obj.APP_NAME, "env": config_obj.ENV_NAME})

    _cli.init_app(app)
    return app


def _register_blueprints(app: Flask) -> None:
    """Import and register all blueprints declared in `_blueprint_paths`."""

    for dotted_path in _blueprint_paths():
        module = import_module(dotted_path)
        blueprint = getattr(module, "bp")
        app.register_blueprint(blueprint)


def _register_error_handlers(app: Flask) -> None:
    """Render every failure as ``{"error", "message", "details"?}`` JSON."""

    config_obj: BaseConfig = app.config["BUDGETTRACKER_CONFIG"]

    @app.errorhandler(BudgetTrackerError)
    def handle_domain_error(exc: BudgetTrackerError):
        if exc.status_code >= 500:
            logger.error("Request failed: %s", exc.message, exc_info=exc)
        return jsonify(exc.to_dict()), exc.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        code = (exc.name or "error").lower().replace(" ", "_")
        return jsonify({"error": code, "message": exc.description}), exc.code or 500

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):
        logger.exception("Unhandled error")
        if config_obj.SHOW_ERROR_DETAILS:
            error = InternalError(details=str(exc))
        else:
            error = InternalError()
        return jsonify(error.to_dict()), error.status_code


__all__ = ["create_app"]
