"""Route decorators that gate handlers on a resolved session."""

from __future__ import annotations

from functools import wraps
from typing import Any, Callable, Optional, TypeVar, cast

from flask import g, request

from ..extensions import get_services
from ..services.auth import AuthContext, extract_bearer_token

F = TypeVar("F", bound=Callable[..., Any])


def request_token() -> Optional[str]:
    return extract_bearer_token(request.headers.get("Authorization"))


def require_auth(view: F) -> F:
    """Reject the request unless its bearer token maps to an active session."""

    @wraps(view)
    def wrapped(*args: Any, **kwargs: Any) -> Any:
        g.auth = get_services().authenticator.authenticate(request_token())
        return view(*args, **kwargs)

    return cast(F, wrapped)


def current_auth() -> AuthContext:
    auth = g.get("auth")
    if auth is None:  # pragma: no cover - handler used without require_auth
        raise RuntimeError("current_auth() called outside an authenticated request")
    return auth
