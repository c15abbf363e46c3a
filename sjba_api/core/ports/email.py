"""
Transactional email interface.

Implementations:
- DevEmailAdapter: logs instead of sending (dev/test, unconfigured SMTP)
- SMTPEmailAdapter: sends through an SMTP relay

Senders never raise. Every outcome is reported through EmailResult.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Protocol


class EmailStatus(Enum):
    """Email send result status."""

    SENT = "sent"
    FAILED = "failed"
    SKIPPED = "skipped"  # Dev adapter or sender not configured


@dataclass
class EmailResult:
    """Result of an email send attempt."""

    status: EmailStatus
    message_id: str | None = None
    error: str | None = None
    sent_at: datetime | None = None
    recipient: str = ""

    @classmethod
    def success(cls, recipient: str, message_id: str | None = None) -> EmailResult:
        return cls(
            status=EmailStatus.SENT,
            message_id=message_id,
            recipient=recipient,
            sent_at=datetime.now(UTC),
        )

    @classmethod
    def skipped(cls, recipient: str, reason: str = "Dev mode") -> EmailResult:
        return cls(status=EmailStatus.SKIPPED, recipient=recipient, error=reason)

    @classmethod
    def failed(cls, recipient: str, error: str) -> EmailResult:
        return cls(status=EmailStatus.FAILED, recipient=recipient, error=error)

    @property
    def ok(self) -> bool:
        return self.status != EmailStatus.FAILED


class EmailPort(Protocol):
    """Email sending interface."""

    def send(self, to: str, subject: str, text: str, html: str | None = None) -> EmailResult:
        """
        Send a transactional email.

        Args:
            to: Recipient address
            subject: Subject line
            text: Plain text body
            html: HTML body (optional)

        Returns:
            EmailResult with send outcome. Must not raise.
        """
        ...
