"""Income and expense transaction routes."""

from __future__ import annotations

from flask import jsonify, request

from ...errors import ValidationFailed
from ...extensions import get_services
from ...services import transactions as transaction_service
from ..forms import json_body
from ..guards import current_auth, require_auth
from . import bp
from .forms import TransactionForm


def _period_arg(name: str, low: int, high: int) -> int | None:
    raw = request.args.get(name)
    if raw is None or raw == "":
        return None
    try:
        value = int(raw)
    except ValueError:
        value = None
    if value is None or not low <= value <= high:
        raise ValidationFailed(details=[{"field": name, "message": f"{name} must be between {low} and {high}"}])
    return value


@bp.get("")
@require_auth
def list_transactions():
    rows, summary = transaction_service.list_transactions(
        get_services().transactions,
        user_id=current_auth().user.id,
        month=_period_arg("month", 1, 12),
        year=_period_arg("year", 1900, 9999),
    )
    return jsonify(
        {"transactions": [row.public_dict() for row in rows], "summary": summary.to_dict()}
    )


@bp.post("")
@require_auth
def create_transaction():
    form = TransactionForm(data=json_body(request.get_json(silent=True)))
    if not form.validate():
        form.raise_for_errors()

    txn = transaction_service.create_transaction(
        get_services().transactions, user_id=current_auth().user.id, **form.values
    )
    return jsonify({"message": "Transaction created", "transaction": txn.public_dict()}), 201


@bp.put("/<int:transaction_id>")
@require_auth
def update_transaction(transaction_id: int):
    form = TransactionForm(data=json_body(request.get_json(silent=True)), partial=True)
    if not form.validate():
        form.raise_for_errors()

    txn = transaction_service.update_transaction(
        get_services().transactions,
        user_id=current_auth().user.id,
        transaction_id=transaction_id,
        changes=form.values,
    )
    return jsonify({"message": "Transaction updated", "transaction": txn.public_dict()})


@bp.delete("/<int:transaction_id>")
@require_auth
def delete_transaction(transaction_id: int):
    transaction_service.delete_transaction(
        get_services().transactions,
        user_id=current_auth().user.id,
        transaction_id=transaction_id,
    )
    return jsonify({"message": "Transaction deleted"})
