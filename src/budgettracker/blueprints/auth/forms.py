"""Login form definitions and validation helpers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from ..forms import EMAIL_RE, FormErrorsMixin, first_present

DEVICE_ID_MAX_LENGTH = 255


@dataclass(slots=True)
class LoginForm(FormErrorsMixin):
    """Credentials plus the optional client-chosen device identifier."""

    email: str = ""
    password: str = ""
    device_id: Optional[str] = None
    errors: Dict[str, List[str]] = field(default_factory=dict, init=False)

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "LoginForm":
        device_id = first_present(data, "deviceId", "device_id")
        return cls(
            email=str(first_present(data, "emailId", "email") or ""),
            password=str(data.get("password") or ""),
            device_id=None if device_id is None else str(device_id),
        )

    def validate(self) -> bool:
        self.errors.clear()

        self.email = self.email.strip()
        if not self.email:
            self.add_error("email", "Email is required")
        elif not EMAIL_RE.match(self.email):
            self.add_error("email", "Please provide a valid email")

        if not self.password:
            self.add_error("password", "Password is required")

        if self.device_id is not None:
            self.device_id = self.device_id.strip()
            if not 1 <= len(self.device_id) <= DEVICE_ID_MAX_LENGTH:
                self.add_error(
                    "deviceId", f"Device ID must be between 1 and {DEVICE_ID_MAX_LENGTH} characters"
                )

        return not self.errors
