"""Outgoing mail over SMTP using ``aiosmtplib``."""

from __future__ import annotations

from dataclasses import dataclass
from email.message import EmailMessage
from typing import Optional

import aiosmtplib

from jobboard.core.logging import get_logger
from jobboard.domain.exceptions import UpstreamError

logger = get_logger(__name__)


@dataclass
class SmtpConfig:
    hostname: str
    port: int = 587
    username: Optional[str] = None
    password: Optional[str] = None
    start_tls: bool = True
    timeout: float = 30.0
    from_name: str = "Jobbee"
    from_email: str = "noreply@localhost"


class Mailer:
    """Sends plain-text notifications such as password reset links."""

    def __init__(self, config: SmtpConfig) -> None:
        self._config = config

    @property
    def sender(self) -> str:
        return f"{self._config.from_name} <{self._config.from_email}>"

    def _build_message(self, to: str, subject: str, text: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = to
        message["Subject"] = subject
        message.set_content(text)
        return message

    async def send(self, *, to: str, subject: str, text: str) -> None:
        message = self._build_message(to, subject, text)
        try:
            await aiosmtplib.send(
                message,
                hostname=self._config.hostname,
                port=self._config.port,
                username=self._config.username,
                password=self._config.password,
                start_tls=self._config.start_tls,
                timeout=self._config.timeout,
            )
        except (aiosmtplib.SMTPException, OSError) as exc:
            logger.error("Failed to send email", extra={"to": to, "error": str(exc)})
            raise UpstreamError("Problem occurred while sending the email") from exc
        logger.info("Email sent", extra={"to": to, "subject": subject})
