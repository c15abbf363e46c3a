"""
SMTP email adapter.

Sends multipart (text + HTML) mail through an SMTP relay. Port 465 uses
implicit TLS; any other port upgrades with STARTTLS.
"""

from __future__ import annotations

import logging
import smtplib
from dataclasses import dataclass
from email.errors import MessageError
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import make_msgid

from sjba_api.core.ports.email import EmailResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SMTPConfig:
    host: str
    port: int
    username: str
    password: str
    sender: str
    timeout: float = 10.0

    @property
    def implicit_tls(self) -> bool:
        return self.port == 465


class SMTPEmailAdapter:
    """Implements EmailPort. Never raises; failures come back as FAILED."""

    def __init__(self, config: SMTPConfig) -> None:
        self.config = config

    def send(self, to: str, subject: str, text: str, html: str | None = None) -> EmailResult:
        message_id = make_msgid()
        try:
            payload = self._build(to, subject, text, html, message_id)
        except (MessageError, ValueError) as e:
            logger.error("Could not build email to %s: %s", to, e)
            return EmailResult.failed(to, f"Invalid message: {e}")

        try:
            with self._connect() as server:
                server.login(self.config.username, self.config.password)
                server.sendmail(self.config.sender, [to], payload)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Failed to send email to %s (%s): %s", to, subject, e)
            return EmailResult.failed(to, str(e))

        logger.info("Email sent to %s (%s)", to, subject)
        return EmailResult.success(to, message_id)

    def _build(
        self, to: str, subject: str, text: str, html: str | None, message_id: str
    ) -> str:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self.config.sender
        msg["To"] = to
        msg["Message-ID"] = message_id
        msg.attach(MIMEText(text, "plain", "utf-8"))
        if html:
            msg.attach(MIMEText(html, "html", "utf-8"))
        return msg.as_string()

    def _connect(self) -> smtplib.SMTP:
        cfg = self.config
        if cfg.implicit_tls:
            return smtplib.SMTP_SSL(cfg.host, cfg.port, timeout=cfg.timeout)
        server = smtplib.SMTP(cfg.host, cfg.port, timeout=cfg.timeout)
        try:
            server.starttls()
        except smtplib.SMTPException:
            server.close()
            raise
        return server
