"""Login, logout and session introspection routes."""

from __future__ import annotations

from flask import jsonify, request

from ...extensions import get_services
from ...services.auth import extract_bearer_token
from ..forms import json_body
from ..guards import current_auth, request_token, require_auth
from ..request_info import client_context
from . import bp
from .forms import LoginForm


@bp.post("/login")
def login():
    form = LoginForm.from_json(json_body(request.get_json(silent=True)))
    if not form.validate():
        form.raise_for_errors()

    result = get_services().authenticator.login(
        email=form.email,
        password=form.password,
        device_id=form.device_id,
        client=client_context(request),
    )
    return jsonify(
        {
            "message": "Login successful",
            "token": result.token,
            "deviceId": result.device_id,
            "user": result.user.to_dict(),
            "session": result.session.public_dict(),
        }
    )


@bp.post("/logout")
def logout():
    """End one device session; works with expired tokens since no signature check is made."""

    token = request_token()
    if token is None:
        body = json_body(request.get_json(silent=True))
        raw = body.get("token")
        token = extract_bearer_token(raw) if isinstance(raw, str) else None

    session = get_services().authenticator.logout(token)
    return jsonify(
        {
            "message": "Logout successful",
            "deviceId": session.device_id,
            "loggedOutAt": session.logged_out_at.isoformat() if session.logged_out_at else None,
        }
    )


@bp.get("/verify")
@require_auth
def verify():
    auth = current_auth()
    return jsonify({"valid": True, "user": auth.user.to_dict(), "deviceId": auth.session.device_id})


@bp.get("/session")
@require_auth
def session_info():
    auth = current_auth()
    return jsonify({"session": auth.session.public_dict(), "user": auth.user.to_dict()})


@bp.get("/sessions")
@require_auth
def active_sessions():
    auth = current_auth()
    sessions = get_services().authenticator.list_active_sessions(auth.user.id)
    return jsonify(
        {
            "sessions": [
                {**row.public_dict(), "current": row.id == auth.session.id} for row in sessions
            ],
            "count": len(sessions),
        }
    )


@bp.post("/logout-all")
@require_auth
def logout_all():
    count = get_services().authenticator.logout_all(current_auth().user.id)
    return jsonify({"message": "Logged out from all devices", "sessionsEnded": count})
