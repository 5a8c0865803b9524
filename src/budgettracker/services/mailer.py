"""Outbound mail capability; every send from auth flows is best-effort."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Protocol

from ..logging_config import get_logger
from . import jobs

if TYPE_CHECKING:  # pragma: no cover
    from flask import Flask
    from flask_mail import Mail

logger = get_logger(__name__)

_TAG_RE = re.compile(r"<[^>]*>")


@dataclass(slots=True)
class MailMessage:
    to: str
    subject: str
    html: str
    text: Optional[str] = None

    def plain_text(self) -> str:
        return self.text if self.text is not None else _TAG_RE.sub("", self.html)


@dataclass(slots=True)
class MailResult:
    success: bool
    message: str = ""
    message_id: Optional[str] = None


class Mailer(Protocol):
    def send(self, message: MailMessage) -> MailResult:  # pragma: no cover - interface
        ...

    def verify_connection(self) -> MailResult:  # pragma: no cover - interface
        ...


class DisabledMailer:
    """Used when email is switched off: logs a preview and reports failure."""

    def send(self, message: MailMessage) -> MailResult:
        logger.info(
            "Email disabled; not sending %r",
            message.subject,
            extra={"to": message.to, "preview": message.plain_text()[:100]},
        )
        return MailResult(success=False, message="Email service is disabled")

    def verify_connection(self) -> MailResult:
        return MailResult(success=False, message="Email service is disabled")


class FlaskMailMailer:
    """SMTP delivery through Flask-Mail."""

    def __init__(self, app: "Flask", mail: "Mail", *, sender: tuple[str, str]) -> None:
        self._app = app
        self._mail = mail
        self._sender = sender

    def send(self, message: MailMessage) -> MailResult:
        from flask_mail import Message

        # Flask-Mail reads settings from the app, so sends from worker threads need a context.
        with self._app.app_context():
            msg = Message(
                subject=message.subject,
                recipients=[message.to],
                body=message.plain_text(),
                html=message.html,
                sender=self._sender,
            )
            self._mail.send(msg)
        return MailResult(success=True, message="sent", message_id=msg.msgId)

    def verify_connection(self) -> MailResult:
        try:
            with self._app.app_context():
                with self._mail.connect():
                    pass
        except Exception as exc:  # SMTP and socket errors vary by backend
            return MailResult(success=False, message=str(exc))
        return MailResult(success=True, message="SMTP connection successful")


def _deliver(mailer: Mailer, message: MailMessage, purpose: str) -> None:
    try:
        result = mailer.send(message)
    except Exception:
        logger.warning("Failed to send %s email", purpose, exc_info=True, extra={"to": message.to})
        return
    if not result.success:
        logger.debug("%s email not delivered: %s", purpose, result.message)


def dispatch_best_effort(mailer: Optional[Mailer], message: MailMessage, *, purpose: str) -> None:
    """Send ``message`` in the background; nothing here can fail the caller."""

    if mailer is None:
        return
    try:
        jobs.enqueue(
            f"email:{purpose}",
            _deliver,
            metadata={"purpose": purpose},
            mailer=mailer,
            message=message,
            purpose=purpose,
        )
    except Exception:
        logger.warning("Could not schedule %s email", purpose, exc_info=True)


__all__ = [
    "DisabledMailer",
    "FlaskMailMailer",
    "MailMessage",
    "MailResult",
    "Mailer",
    "dispatch_best_effort",
]
