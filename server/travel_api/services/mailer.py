"""Outbound email over SMTP."""

import asyncio
import logging
import smtplib
import ssl
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional, Protocol

from ..core.config import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmailMessage:
    to: str
    subject: str
    html: str
    text: Optional[str] = None


class Mailer(Protocol):
    async def send(self, message: EmailMessage) -> bool: ...


class SmtpMailer:
    """
    Sends mail through an SMTP relay.

    smtplib blocks, so each send runs in a worker thread. When no SMTP user is
    configured the message is logged and dropped.
    """

    def __init__(
        self,
        host: str,
        port: int,
        user: Optional[str],
        password: Optional[str],
        use_tls: bool = True,
        timeout: float = 30.0,
    ):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout

    @property
    def configured(self) -> bool:
        return bool(self.user)

    def _build(self, message: EmailMessage) -> MIMEMultipart:
        mime = MIMEMultipart("alternative")
        mime["Subject"] = message.subject
        mime["From"] = self.user or ""
        mime["To"] = message.to
        if message.text:
            mime.attach(MIMEText(message.text, "plain", "utf-8"))
        mime.attach(MIMEText(message.html, "html", "utf-8"))
        return mime

    def _send_sync(self, message: EmailMessage) -> None:
        mime = self._build(message)
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
            if self.use_tls:
                server.starttls(context=ssl.create_default_context())
            if self.user and self.password:
                server.login(self.user, self.password)
            server.sendmail(self.user, [message.to], mime.as_string())

    async def send(self, message: EmailMessage) -> bool:
        """Send ``message``; returns False when SMTP is not configured."""
        if not self.configured:
            logger.info(
                "SMTP not configured, skipping email",
                extra={"to": message.to, "subject": message.subject}
            )
            return False

        await asyncio.to_thread(self._send_sync, message)
        logger.info("Email sent", extra={"to": message.to, "subject": message.subject})
        return True


def build_mailer() -> SmtpMailer:
    return SmtpMailer(
        host=settings.smtp_host,
        port=settings.smtp_port,
        user=settings.smtp_user,
        password=settings.smtp_password,
        use_tls=settings.smtp_use_tls,
    )


# Global mailer instance
mailer = build_mailer()


def get_mailer() -> Mailer:
    """FastAPI dependency returning the configured mailer."""
    return mailer
