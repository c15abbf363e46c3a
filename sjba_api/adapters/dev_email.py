"""
Dev email adapter.

Logs emails instead of sending. Used for local development, for tests, and
whenever SMTP is not configured. Returns SKIPPED, never SENT.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import uuid4

from sjba_api.core.ports.email import EmailResult, EmailStatus

logger = logging.getLogger(__name__)


@dataclass
class SentEmail:
    """Record of a logged email for test assertions."""

    id: str
    recipient: str
    subject: str
    body_text: str
    body_html: str
    logged_at: datetime


@dataclass
class DevEmailAdapter:
    """Implements EmailPort by logging and keeping the message in memory."""

    sent_emails: list[SentEmail] = field(default_factory=list)

    log_level: int = logging.INFO
    body_preview_length: int = 100

    def send(self, to: str, subject: str, text: str, html: str | None = None) -> EmailResult:
        message_id = f"dev-{uuid4().hex[:12]}"
        self.sent_emails.append(
            SentEmail(
                id=message_id,
                recipient=to,
                subject=subject,
                body_text=text,
                body_html=html or "",
                logged_at=datetime.now(UTC),
            )
        )

        preview = text[: self.body_preview_length]
        if len(text) > self.body_preview_length:
            preview += "..."
        logger.log(
            self.log_level,
            "EMAIL (dev): To=%s, Subject=%s, Body=%s, MessageID=%s",
            to,
            subject,
            preview,
            message_id,
        )

        return EmailResult(
            status=EmailStatus.SKIPPED,
            message_id=message_id,
            recipient=to,
            error="Dev mode - email logged, not sent",
        )

    # --- Test Helper Methods ---

    def get_last_email(self) -> SentEmail | None:
        return self.sent_emails[-1] if self.sent_emails else None

    def clear(self) -> None:
        self.sent_emails.clear()

    @property
    def email_count(self) -> int:
        return len(self.sent_emails)
