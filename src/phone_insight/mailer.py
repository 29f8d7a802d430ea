from __future__ import annotations

import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage

from .config import ConfigurationError, Settings, get_settings
from .insight import InsightPayload

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MailResult:
    ok: bool
    error_kind: str | None = None
    detail: str | None = None


class Mailer:
    """Sends insight emails over SMTP."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    def build_message(self, to: str, payload: InsightPayload) -> EmailMessage:
        message = EmailMessage()
        message["To"] = to
        message["From"] = self.settings.sender_email
        message["Subject"] = payload.subject
        message.set_content(payload.raw)
        return message

    def send_insight(self, to: str, payload: InsightPayload) -> MailResult:
        """
        Email the raw insight payload to `to`.

        Never raises. Any failure, from a missing sender or a malformed
        recipient to SMTP errors, comes back as a failed MailResult so the
        callback can still be acknowledged.
        """
        if not self.settings.sender_email:
            return MailResult(
                ok=False,
                error_kind=ConfigurationError.__name__,
                detail="SENDER_EMAIL is not configured",
            )

        try:
            port = int(self.settings.smtp_port)
            message = self.build_message(to, payload)
            with smtplib.SMTP(self.settings.smtp_host, port) as smtp:
                if self.settings.smtp_starttls:
                    smtp.starttls()
                if self.settings.smtp_username and self.settings.smtp_password:
                    smtp.login(self.settings.smtp_username, self.settings.smtp_password)
                smtp.send_message(message)
        except Exception as exc:
            return MailResult(ok=False, error_kind=type(exc).__name__, detail=str(exc))

        logger.info("Insight email sent to %s", to)
        return MailResult(ok=True)


def get_mailer() -> Mailer:
    return Mailer(get_settings())
