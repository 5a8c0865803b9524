"""Financial configuration routes."""

from __future__ import annotations

from flask import jsonify, request

from ...extensions import get_services
from ...services import configuration as configuration_service
from ..forms import json_body
from ..guards import current_auth, require_auth
from . import bp
from .forms import ConfigurationForm


@bp.get("")
@require_auth
def get_configuration():
    row = configuration_service.get_configuration(
        get_services().configurations, user_id=current_auth().user.id
    )
    return jsonify(
        {
            "configuration": row.public_dict() if row else None,
            "isConfigured": bool(row and row.is_configured),
        }
    )


@bp.get("/status")
@require_auth
def configuration_status():
    configured = configuration_service.configuration_status(
        get_services().configurations, user_id=current_auth().user.id
    )
    return jsonify({"isConfigured": configured})


@bp.route("", methods=["POST", "PUT"])
@require_auth
def save_configuration():
    form = ConfigurationForm(data=json_body(request.get_json(silent=True)))
    if not form.validate():
        form.raise_for_errors()

    outcome = configuration_service.create_or_update_configuration(
        get_services().configurations, user_id=current_auth().user.id, updates=form.updates
    )
    message = "Configuration created" if outcome.created else "Configuration updated"
    return (
        jsonify({"message": message, "configuration": outcome.configuration.public_dict()}),
        201 if outcome.created else 200,
    )


@bp.get("/loan-summary")
@require_auth
def loan_summary():
    services = get_services()
    summary = configuration_service.get_loan_summary(
        services.configurations, services.transactions, user_id=current_auth().user.id
    )
    return jsonify(summary.to_dict())
