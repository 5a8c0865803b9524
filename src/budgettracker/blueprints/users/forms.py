"""Account form definitions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from ...services.users import PASSWORD_LENGTH, USER_NAME_LENGTH
from ..forms import EMAIL_RE, FormErrorsMixin, first_present


def _optional_text(value: Any) -> Optional[str]:
    return None if value is None else str(value)


@dataclass(slots=True)
class RegistrationForm(FormErrorsMixin):
    user_name: str = ""
    email: str = ""
    password: str = ""
    errors: Dict[str, List[str]] = field(default_factory=dict, init=False)

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "RegistrationForm":
        return cls(
            user_name=str(first_present(data, "userName", "user_name") or ""),
            email=str(first_present(data, "emailId", "email") or ""),
            password=str(data.get("password") or ""),
        )

    def validate(self) -> bool:
        self.errors.clear()

        self.user_name = self.user_name.strip()
        low, high = USER_NAME_LENGTH
        if not low <= len(self.user_name) <= high:
            self.add_error("userName", f"Username must be between {low} and {high} characters")

        self.email = self.email.strip()
        if not EMAIL_RE.match(self.email):
            self.add_error("email", "Please provide a valid email")

        low, high = PASSWORD_LENGTH
        if not low <= len(self.password) <= high:
            self.add_error("password", f"Password must be between {low} and {high} characters")

        return not self.errors


@dataclass(slots=True)
class UserUpdateForm(FormErrorsMixin):
    """Partial profile update; omitted fields stay None and are left untouched."""

    user_name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    errors: Dict[str, List[str]] = field(default_factory=dict, init=False)

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "UserUpdateForm":
        return cls(
            user_name=_optional_text(first_present(data, "userName", "user_name")),
            email=_optional_text(first_present(data, "emailId", "email")),
            password=_optional_text(data.get("password")),
        )

    def validate(self) -> bool:
        self.errors.clear()

        if self.user_name is not None:
            self.user_name = self.user_name.strip()
            low, high = USER_NAME_LENGTH
            if not low <= len(self.user_name) <= high:
                self.add_error("userName", f"Username must be between {low} and {high} characters")

        if self.email is not None:
            self.email = self.email.strip()
            if not EMAIL_RE.match(self.email):
                self.add_error("email", "Please provide a valid email")

        if self.password is not None:
            low, high = PASSWORD_LENGTH
            if not low <= len(self.password) <= high:
                self.add_error("password", f"Password must be between {low} and {high} characters")

        return not self.errors
