"""Multi-device session authentication.

Each (user, device) pair owns at most one active ``UserSession`` row whose
token is the only accepted credential for that device. Logging in again on
the same device refreshes that row with a new token, so earlier tokens for
the device stop authenticating even though their signatures are still
valid. Logout flips ``is_active`` and keeps the row as history.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Optional
from uuid import uuid4

from ..clock import as_utc, utcnow
from ..config import BaseConfig
from ..domain.repositories.session import SessionRepository
from ..domain.repositories.user import UserRepository
from ..errors import (
    BadRequest,
    BudgetTrackerError,
    EmailNotVerified,
    InvalidCredentials,
    InvalidSession,
    NotFound,
    Unauthorized,
)
from ..logging_config import get_logger
from ..models.session import UserSession
from . import email_templates
from .mailer import Mailer, dispatch_best_effort
from .security import PasswordHasher, TokenCodec
from .users import UserProfile, normalize_email

logger = get_logger(__name__)

Clock = Callable[[], datetime]


@dataclass(slots=True)
class ClientContext:
    """Where a login came from."""

    ip_address: str = "unknown"
    user_agent: Optional[str] = None
    device_info: Optional[dict[str, Any]] = None


@dataclass(slots=True)
class LoginResult:
    token: str
    device_id: str
    user: UserProfile
    session: UserSession
    created: bool


@dataclass(slots=True)
class AuthContext:
    """The resolved identity behind a bearer token."""

    user: UserProfile
    session: UserSession
    token: str


def extract_bearer_token(header: Optional[str]) -> Optional[str]:
    """Return the token from ``Bearer <token>`` (or a bare token); None when empty."""

    if not header:
        return None
    value = header.strip()
    scheme, _, rest = value.partition(" ")
    if scheme.lower() == "bearer":
        value = rest.strip()
    return value or None


class SessionAuthenticator:
    """Login, per-request authentication and revocation for device sessions."""

    def __init__(
        self,
        *,
        users: UserRepository,
        sessions: SessionRepository,
        codec: TokenCodec,
        hasher: PasswordHasher,
        config: BaseConfig,
        mailer: Optional[Mailer] = None,
        clock: Clock = utcnow,
    ) -> None:
        self.users = users
        self.sessions = sessions
        self.codec = codec
        self.hasher = hasher
        self.config = config
        self.mailer = mailer
        self.clock = clock

    def login(
        self,
        *,
        email: str,
        password: str,
        device_id: Optional[str] = None,
        client: Optional[ClientContext] = None,
    ) -> LoginResult:
        """Verify credentials and issue a token bound to one device session.

        Unknown email and wrong password raise the same InvalidCredentials.
        """

        client = client or ClientContext()
        user = self.users.get_by_email(normalize_email(email))
        if user is None or not self.hasher.verify(user.password_hash, password or ""):
            logger.info("Login rejected", extra={"ip_address": client.ip_address})
            raise InvalidCredentials()
        if not user.is_verified:
            raise EmailNotVerified(user.email)

        resolved_device = (device_id or "").strip() or str(uuid4())
        now = as_utc(self.clock())
        token = self.codec.sign(
            {"userId": user.id, "email": user.email, "deviceId": resolved_device}
        )
        session, created = self.sessions.upsert_active(
            user_id=user.id,  # type: ignore[arg-type]
            device_id=resolved_device,
            token=token,
            ip_address=client.ip_address,
            user_agent=client.user_agent,
            device_info=client.device_info,
            now=now,
        )
        logger.info(
            "Login succeeded",
            extra={"user_id": user.id, "device_id": resolved_device, "session_created": created},
        )

        dispatch_best_effort(
            self.mailer,
            email_templates.login_notification(
                to=user.email,
                user_name=user.user_name,
                ip_address=client.ip_address,
                device_info=client.device_info,
                timestamp=now.strftime("%Y-%m-%d %H:%M:%S UTC"),
                app_name=self.config.APP_NAME,
            ),
            purpose="login-notification",
        )
        return LoginResult(
            token=token,
            device_id=resolved_device,
            user=UserProfile.from_user(user),
            session=session,
            created=created,
        )

    def authenticate(self, token: Optional[str]) -> AuthContext:
        """Resolve a bearer token to its active session and user, touching activity."""

        if not token:
            raise Unauthorized("No token provided")
        claims = self.codec.verify(token)
        user_id = claims.get("userId")
        device_id = claims.get("deviceId")
        if user_id is None or not device_id:
            raise Unauthorized("Token is malformed or invalid")

        session = self.sessions.find_active_by_token(token)
        if session is None or session.user_id != user_id or session.device_id != device_id:
            raise InvalidSession()

        user = self.users.get_by_id(user_id)
        if user is None:
            raise Unauthorized("User associated with this token no longer exists")

        touched = self.sessions.touch(session.id, as_utc(self.clock()))  # type: ignore[arg-type]
        return AuthContext(
            user=UserProfile.from_user(user),
            session=touched or session,
            token=token,
        )

    def authenticate_optional(self, token: Optional[str]) -> Optional[AuthContext]:
        """Like ``authenticate`` but any failure yields an anonymous (None) result."""

        if not token:
            return None
        try:
            return self.authenticate(token)
        except BudgetTrackerError as exc:
            logger.debug("Optional authentication ignored: %s", exc.code)
            return None

    def logout(self, token: Optional[str]) -> UserSession:
        """Deactivate the active session holding exactly this token."""

        if not token:
            raise BadRequest("Token is required for logout")
        session = self.sessions.find_active_by_token(token)
        if session is None:
            raise NotFound("Session already logged out or invalid")
        ended = self.sessions.deactivate(session.id, as_utc(self.clock()))  # type: ignore[arg-type]
        if ended is None:
            raise NotFound("Session already logged out or invalid")
        logger.info("Logout", extra={"user_id": ended.user_id, "device_id": ended.device_id})
        return ended

    def logout_all(self, user_id: int) -> int:
        """Deactivate every active session of the user; returns how many."""

        count = self.sessions.deactivate_all(user_id, as_utc(self.clock()))
        logger.info("Logged out from all devices", extra={"user_id": user_id, "sessions": count})
        return count

    def get_session(self, session_id: int) -> UserSession:
        session = self.sessions.get_by_id(session_id)
        if session is None:
            raise NotFound("Session not found")
        return session

    def list_active_sessions(self, user_id: int) -> list[UserSession]:
        return self.sessions.list_active(user_id)


__all__ = [
    "AuthContext",
    "ClientContext",
    "LoginResult",
    "SessionAuthenticator",
    "extract_bearer_token",
]
