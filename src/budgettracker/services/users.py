"""Account registration, email verification and user management."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from ..clock import as_utc, utcnow
from ..config import BaseConfig
from ..domain.repositories.user import UserRepository
from ..errors import BadRequest, NotFound, ValidationFailed
from ..logging_config import get_logger
from ..models.user import User
from . import email_templates
from .mailer import Mailer, dispatch_best_effort
from .security import PasswordHasher, generate_verification_token

logger = get_logger(__name__)

USER_NAME_LENGTH = (3, 50)
PASSWORD_LENGTH = (6, 100)


@dataclass(frozen=True, slots=True)
class UserProfile:
    """A user without credentials or verification secrets."""

    id: int
    user_name: str
    email: str
    is_verified: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_user(cls, user: User) -> "UserProfile":
        return cls(
            id=user.id,  # type: ignore[arg-type]
            user_name=user.user_name,
            email=user.email,
            is_verified=user.is_verified,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "userName": self.user_name,
            "email": self.email,
            "isVerified": self.is_verified,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def _check_length(field: str, value: str, bounds: tuple[int, int], label: str) -> None:
    low, high = bounds
    if not low <= len(value) <= high:
        raise ValidationFailed(
            details=[{"field": field, "message": f"{label} must be between {low} and {high} characters"}]
        )


def _verification_url(config: BaseConfig, token: str) -> str:
    return f"{config.FRONTEND_URL.rstrip('/')}/verify-email?token={token}"


def _send_verification(user: User, *, config: BaseConfig, mailer: Optional[Mailer]) -> None:
    message = email_templates.verification(
        to=user.email,
        user_name=user.user_name,
        verification_url=_verification_url(config, user.verification_token or ""),
        ttl_hours=int(config.VERIFICATION_TTL.total_seconds() // 3600),
        app_name=config.APP_NAME,
    )
    dispatch_best_effort(mailer, message, purpose="verification")


def register_user(
    repo: UserRepository,
    *,
    user_name: str,
    email: str,
    password: str,
    hasher: PasswordHasher,
    config: BaseConfig,
    mailer: Optional[Mailer] = None,
    now: Optional[datetime] = None,
) -> UserProfile:
    """Create an unverified account and email its verification link.

    Raises Conflict when the email is taken.
    """

    user_name = (user_name or "").strip()
    _check_length("userName", user_name, USER_NAME_LENGTH, "Username")
    _check_length("password", password or "", PASSWORD_LENGTH, "Password")

    issued = as_utc(now) if now else utcnow()
    user = User(
        user_name=user_name,
        email=normalize_email(email),
        password_hash=hasher.hash(password),
        is_verified=False,
        verification_token=generate_verification_token(),
        verification_token_expiry=issued + config.VERIFICATION_TTL,
    )
    user = repo.create(user)
    logger.info("User registered", extra={"user_id": user.id})
    _send_verification(user, config=config, mailer=mailer)
    return UserProfile.from_user(user)


def verify_email(
    repo: UserRepository,
    *,
    token: str,
    config: BaseConfig,
    mailer: Optional[Mailer] = None,
    now: Optional[datetime] = None,
) -> UserProfile:
    """Mark the account holding ``token`` verified and clear the token."""

    if not token or not token.strip():
        raise BadRequest("Verification token is required")
    user = repo.get_by_verification_token(token.strip())
    if user is None:
        raise NotFound("Invalid or already used verification token")
    current = as_utc(now) if now else utcnow()
    if user.verification_token_expiry is not None and user.verification_token_expiry < current:
        raise ValidationFailed("Verification token has expired; request a new one")

    user.is_verified = True
    user.verification_token = None
    user.verification_token_expiry = None
    user = repo.update(user)
    logger.info("Email verified", extra={"user_id": user.id})
    dispatch_best_effort(
        mailer,
        email_templates.welcome(to=user.email, user_name=user.user_name, app_name=config.APP_NAME),
        purpose="welcome",
    )
    return UserProfile.from_user(user)


def resend_verification(
    repo: UserRepository,
    *,
    email: str,
    config: BaseConfig,
    mailer: Optional[Mailer] = None,
    now: Optional[datetime] = None,
) -> UserProfile:
    user = repo.get_by_email(normalize_email(email))
    if user is None:
        raise NotFound("No account is registered with this email")
    if user.is_verified:
        raise BadRequest("Email is already verified")

    issued = as_utc(now) if now else utcnow()
    user.verification_token = generate_verification_token()
    user.verification_token_expiry = issued + config.VERIFICATION_TTL
    user = repo.update(user)
    _send_verification(user, config=config, mailer=mailer)
    return UserProfile.from_user(user)


def get_user(repo: UserRepository, *, user_id: int) -> UserProfile:
    user = repo.get_by_id(user_id)
    if user is None:
        raise NotFound("User not found")
    return UserProfile.from_user(user)


def list_users(repo: UserRepository) -> list[UserProfile]:
    return [UserProfile.from_user(user) for user in repo.list_all()]


def update_user(
    repo: UserRepository,
    *,
    user_id: int,
    hasher: PasswordHasher,
    user_name: Optional[str] = None,
    email: Optional[str] = None,
    password: Optional[str] = None,
) -> UserProfile:
    """Partial update; a new password is re-hashed."""

    user = repo.get_by_id(user_id)
    if user is None:
        raise NotFound("User not found")
    if user_name is not None:
        user_name = user_name.strip()
        _check_length("userName", user_name, USER_NAME_LENGTH, "Username")
        user.user_name = user_name
    if email is not None:
        user.email = normalize_email(email)
    if password is not None:
        _check_length("password", password, PASSWORD_LENGTH, "Password")
        user.password_hash = hasher.hash(password)
    return UserProfile.from_user(repo.update(user))


def delete_user(repo: UserRepository, *, user_id: int) -> None:
    """Delete the user together with sessions, configuration and transactions."""

    if not repo.delete(user_id):
        raise NotFound("User not found")
    logger.info("User deleted", extra={"user_id": user_id})
