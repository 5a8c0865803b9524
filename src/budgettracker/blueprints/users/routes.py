"""Registration, verification and account management routes."""

from __future__ import annotations

from flask import jsonify, request

from ...errors import Forbidden
from ...extensions import get_services
from ...services import users as user_service
from ..forms import first_present, json_body
from ..guards import current_auth, require_auth
from . import bp
from .forms import RegistrationForm, UserUpdateForm


def _ensure_self(user_id: int) -> None:
    if current_auth().user.id != user_id:
        raise Forbidden("You can only manage your own account")


@bp.post("")
def register():
    form = RegistrationForm.from_json(json_body(request.get_json(silent=True)))
    if not form.validate():
        form.raise_for_errors()

    services = get_services()
    profile = user_service.register_user(
        services.users,
        user_name=form.user_name,
        email=form.email,
        password=form.password,
        hasher=services.hasher,
        config=services.config,
        mailer=services.mailer,
    )
    return (
        jsonify(
            {
                "message": "Registration successful. Please check your email to verify your account.",
                "user": profile.to_dict(),
            }
        ),
        201,
    )


@bp.post("/verify-email")
def verify_email():
    body = json_body(request.get_json(silent=True))
    token = body.get("token") or request.args.get("token") or ""
    services = get_services()
    profile = user_service.verify_email(
        services.users, token=str(token), config=services.config, mailer=services.mailer
    )
    return jsonify({"message": "Email verified successfully", "user": profile.to_dict()})


@bp.post("/resend-verification")
def resend_verification():
    body = json_body(request.get_json(silent=True))
    email = first_present(body, "emailId", "email") or ""
    services = get_services()
    user_service.resend_verification(
        services.users, email=str(email), config=services.config, mailer=services.mailer
    )
    return jsonify({"message": "Verification email sent"})


@bp.get("")
@require_auth
def list_users():
    profiles = user_service.list_users(get_services().users)
    return jsonify({"users": [profile.to_dict() for profile in profiles]})


@bp.get("/<int:user_id>")
@require_auth
def get_user(user_id: int):
    profile = user_service.get_user(get_services().users, user_id=user_id)
    return jsonify({"user": profile.to_dict()})


@bp.put("/<int:user_id>")
@require_auth
def update_user(user_id: int):
    _ensure_self(user_id)
    form = UserUpdateForm.from_json(json_body(request.get_json(silent=True)))
    if not form.validate():
        form.raise_for_errors()

    services = get_services()
    profile = user_service.update_user(
        services.users,
        user_id=user_id,
        hasher=services.hasher,
        user_name=form.user_name,
        email=form.email,
        password=form.password,
    )
    return jsonify({"message": "User updated", "user": profile.to_dict()})


@bp.delete("/<int:user_id>")
@require_auth
def delete_user(user_id: int):
    _ensure_self(user_id)
    user_service.delete_user(get_services().users, user_id=user_id)
    return jsonify({"message": "User deleted"})
