"""Password hashing and bearer-token capabilities."""

from __future__ import annotations

import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Mapping, Optional, Protocol
from uuid import uuid4

from argon2 import PasswordHasher as _Argon2Hasher
from argon2.exceptions import InvalidHash, VerificationError, VerifyMismatchError
from jose import ExpiredSignatureError, JWTError, jwt

from ..errors import TokenExpired, Unauthorized


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str:  # pragma: no cover - interface
        ...

    def verify(self, password_hash: str, password: str) -> bool:  # pragma: no cover - interface
        ...


class TokenCodec(Protocol):
    def sign(self, claims: Mapping[str, Any], *, now: Optional[datetime] = None) -> str:  # pragma: no cover
        ...

    def verify(self, token: str) -> dict[str, Any]:  # pragma: no cover - interface
        ...


class Argon2PasswordHasher:
    """argon2id hashing; mismatches and corrupt hashes both verify as False."""

    def __init__(self, hasher: Optional[_Argon2Hasher] = None) -> None:
        self._hasher = hasher or _Argon2Hasher()

    def hash(self, password: str) -> str:
        return self._hasher.hash(password)

    def verify(self, password_hash: str, password: str) -> bool:
        try:
            return self._hasher.verify(password_hash, password)
        except (VerifyMismatchError, InvalidHash, VerificationError):
            return False


class JoseTokenCodec:
    """HMAC-signed JWTs carrying caller claims plus ``iat``, ``exp`` and a unique ``jti``."""

    def __init__(self, secret: str, *, expires_in: timedelta, algorithm: str = "HS256") -> None:
        if not secret:
            raise ValueError("A token signing secret is required")
        self._secret = secret
        self._expires_in = expires_in
        self._algorithm = algorithm

    def sign(self, claims: Mapping[str, Any], *, now: Optional[datetime] = None) -> str:
        issued = now or datetime.now(timezone.utc)
        if issued.tzinfo is None:
            issued = issued.replace(tzinfo=timezone.utc)
        payload = dict(claims)
        payload.setdefault("jti", uuid4().hex)
        payload["iat"] = int(issued.timestamp())
        payload["exp"] = int((issued + self._expires_in).timestamp())
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> dict[str, Any]:
        try:
            return jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except ExpiredSignatureError as exc:
            raise TokenExpired() from exc
        except JWTError as exc:
            raise Unauthorized("Token is malformed or invalid") from exc


def generate_verification_token() -> str:
    return secrets.token_urlsafe(32)


__all__ = [
    "Argon2PasswordHasher",
    "JoseTokenCodec",
    "PasswordHasher",
    "TokenCodec",
    "generate_verification_token",
]
