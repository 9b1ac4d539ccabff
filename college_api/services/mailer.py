"""
Outbound mail over SMTP (aiosmtplib).

Unlike most helpers here a failed send is raised, not logged and dropped:
callers decide what a lost message means for their request.
"""

import logging
from email.mime.text import MIMEText
from typing import Optional

import aiosmtplib

from ..config import settings

logger = logging.getLogger(__name__)


class MailerNotConfigured(RuntimeError):
    pass


class Mailer:
    """Async SMTP sender configured from settings"""

    def __init__(
        self,
        host: str = None,
        port: int = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        sender: Optional[str] = None,
    ):
        self.host = host or settings.smtp_host
        self.port = port or settings.smtp_port
        self.username = username if username is not None else settings.smtp_user
        self.password = password if password is not None else settings.smtp_password
        self.sender = sender or settings.email_from or self.username

    @property
    def is_configured(self) -> bool:
        return bool(self.username and self.password and self.sender)

    async def send(self, to_email: str, subject: str, body: str, reply_to: Optional[str] = None) -> None:
        if not self.is_configured:
            raise MailerNotConfigured("SMTP credentials are not configured")

        message = MIMEText(body, "plain", "utf-8")
        message["From"] = self.sender
        message["To"] = to_email
        message["Subject"] = subject
        if reply_to:
            message["Reply-To"] = reply_to

        await aiosmtplib.send(
            message,
            hostname=self.host,
            port=self.port,
            username=self.username,
            password=self.password,
            start_tls=True,
        )
        logger.info("Sent mail to %s: %s", to_email, subject)


def get_mailer() -> Mailer:
    return Mailer()
