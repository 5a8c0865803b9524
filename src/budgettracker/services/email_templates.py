"""Message bodies for account emails."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from .mailer import MailMessage

_LAYOUT = """<!DOCTYPE html>
<html>
<body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
  <h1>{title}</h1>
  {body}
  <p>Best regards,<br>The {app_name} Team</p>
  <p style="font-size: 12px; color: #666;">This is an automated email. Please do not reply.</p>
</body>
</html>"""


def _render(title: str, paragraphs: list[str], app_name: str) -> tuple[str, str]:
    html = _LAYOUT.format(
        title=title,
        body="\n  ".join(f"<p>{p}</p>" for p in paragraphs),
        app_name=app_name,
    )
    text = "\n\n".join([title, *paragraphs, f"Best regards,\nThe {app_name} Team"])
    return html, text


def welcome(*, to: str, user_name: str, app_name: str) -> MailMessage:
    html, text = _render(
        f"Welcome to {app_name}!",
        [
            f"Hello {user_name}!",
            "Your email address has been verified and your account is ready.",
            "You can now start tracking your income, expenses and loans.",
        ],
        app_name,
    )
    return MailMessage(to=to, subject=f"Welcome to {app_name}!", html=html, text=text)


def verification(*, to: str, user_name: str, verification_url: str, ttl_hours: int, app_name: str) -> MailMessage:
    html, text = _render(
        "Verify Your Email Address",
        [
            f"Hello {user_name}!",
            f"Please verify your email address to complete your {app_name} registration:",
            verification_url,
            f"This verification link will expire in {ttl_hours} hours.",
            f"If you did not create an account with {app_name}, please ignore this email.",
        ],
        app_name,
    )
    return MailMessage(to=to, subject="Verify Your Email Address", html=html, text=text)


def login_notification(
    *,
    to: str,
    user_name: str,
    ip_address: str,
    device_info: Optional[Mapping[str, Any]],
    timestamp: str,
    app_name: str,
) -> MailMessage:
    info = device_info or {}
    html, text = _render(
        "New Login Detected",
        [
            f"Hello {user_name}!",
            f"We detected a new login to your {app_name} account.",
            f"Time: {timestamp}",
            f"IP Address: {ip_address}",
            f"Device: {info.get('platform', 'unknown')}",
            f"Browser: {info.get('browser', 'unknown')}",
            "If you didn't perform this login, please change your password immediately.",
        ],
        app_name,
    )
    return MailMessage(to=to, subject="New Login Detected", html=html, text=text)
