from __future__ import annotations

import smtplib
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr
from typing import Optional

from loguru import logger

from descomplicar.config import get_settings

SMTP_TIMEOUT = 15  # seconds


@dataclass(frozen=True)
class SendEmailResult:
    sent: bool
    error: Optional[str] = None


class EmailSender:
    """Send email through the configured SMTP server."""

    def __init__(self):
        settings = get_settings()
        self.host = settings.smtp_host
        self.port = settings.smtp_port
        self.user = settings.smtp_user
        self.password = settings.smtp_password
        self.use_tls = settings.smtp_use_tls
        self.from_email = settings.smtp_from_email
        self.from_name = settings.smtp_from_name

    @classmethod
    def is_configured(cls) -> bool:
        """Check if SMTP host and sender address are set."""
        settings = get_settings()
        if settings.smtp_user and not settings.smtp_password:
            return False
        return bool(settings.smtp_host and settings.smtp_from_email)

    @property
    def from_address(self) -> str:
        if self.from_name:
            return formataddr((self.from_name, self.from_email))
        return self.from_email

    def send(
        self, to: str, subject: str, text: str, html: Optional[str] = None
    ) -> SendEmailResult:
        """Send one email.

        Args:
            to: Recipient address.
            subject: Subject line.
            text: Plain text body.
            html: Optional HTML alternative.

        Returns:
            SendEmailResult with the error message when sending failed.
        """
        if not self.is_configured():
            return SendEmailResult(sent=False, error="SMTP not configured")

        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self.from_address
        msg["To"] = to
        msg.attach(MIMEText(text, "plain", "utf-8"))
        if html:
            msg.attach(MIMEText(html, "html", "utf-8"))

        try:
            with smtplib.SMTP(self.host, self.port, timeout=SMTP_TIMEOUT) as server:
                if self.use_tls:
                    server.starttls()
                if self.user:
                    server.login(self.user, self.password)
                server.sendmail(self.from_email, [to], msg.as_string())
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Email to {to} failed: {e}")
            return SendEmailResult(sent=False, error=str(e))

        logger.info(f"Email sent to {to}")
        return SendEmailResult(sent=True)
