"""
Contact component.

Stores a contact-form submission, then notifies the organization's inbox.

Flow:
1. Parse and validate the submission (all violations at once)
2. Persist it
3. Send the notification through the EmailPort

The sender never raises. A FAILED result becomes EMAIL_SEND_FAILED; a
SKIPPED result (no SMTP configured) is logged and the submission still
succeeds.
"""

from __future__ import annotations

import html
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any
from zoneinfo import ZoneInfo

from sjba_api.components.contact.ports import ContactRepoPort
from sjba_api.core.ports.email import EmailPort, EmailResult, EmailStatus
from sjba_api.domain import validators
from sjba_api.domain.entities import ContactSubmission
from sjba_api.domain.errors import UpstreamError

logger = logging.getLogger(__name__)

DEFAULT_RECIPIENT = "sjba@stern.nyu.edu"
EMAIL_SEND_FAILED = "EMAIL_SEND_FAILED"
DISPLAY_TZ = ZoneInfo("America/New_York")


@dataclass(frozen=True)
class Notification:
    """Rendered notification email."""

    subject: str
    text: str
    html: str


def format_submitted_at(value: datetime) -> str:
    """e.g. 'Monday, October 19, 2026 at 3:04:05 PM EDT'."""
    local = value.astimezone(DISPLAY_TZ)
    hour = local.hour % 12 or 12
    return (
        f"{local:%A, %B} {local.day}, {local.year} at "
        f"{hour}:{local:%M:%S %p} {local.tzname()}"
    )


def build_notification(submission: ContactSubmission) -> Notification:
    """Render subject, plain-text and HTML bodies for a submission."""
    name = f"{submission.first_name} {submission.last_name}"
    company = submission.company or "Not provided"
    submitted_at = format_submitted_at(submission.created_at)

    text = "\n".join(
        [
            "New Contact Form Submission",
            "",
            f"Name: {name}",
            f"Email: {submission.email}",
            f"Company: {company}",
            "",
            "Message:",
            submission.message,
            "",
            "---",
            f"Submitted at: {submitted_at}",
        ]
    )

    esc = html.escape
    message_html = esc(submission.message).replace("\n", "<br>")
    body_html = (
        "<h2>New Contact Form Submission</h2>"
        f"<p><strong>Name:</strong> {esc(name)}</p>"
        f'<p><strong>Email:</strong> <a href="mailto:{esc(submission.email)}">'
        f"{esc(submission.email)}</a></p>"
        f"<p><strong>Company:</strong> {esc(company)}</p>"
        f"<p><strong>Message:</strong></p><p>{message_html}</p>"
        "<hr>"
        f"<p><small>Submitted at: {esc(submitted_at)}</small></p>"
    )

    return Notification(
        subject=f"Contact Form Submission from {name}",
        text=text,
        html=body_html,
    )


def notify(
    submission: ContactSubmission,
    *,
    sender: EmailPort,
    recipient: str = DEFAULT_RECIPIENT,
) -> EmailResult:
    """
    Send the notification for a stored submission.

    Raises:
        UpstreamError: the sender reported FAILED (code EMAIL_SEND_FAILED)
    """
    note = build_notification(submission)
    result = sender.send(recipient, note.subject, note.text, note.html)

    if result.status == EmailStatus.FAILED:
        logger.error(
            "Contact notification for %s failed: %s", submission.id, result.error
        )
        raise UpstreamError(
            "Failed to send notification email. Please try again later or "
            f"contact us directly at {DEFAULT_RECIPIENT}.",
            provider="email",
            code=EMAIL_SEND_FAILED,
        )
    if result.status == EmailStatus.SKIPPED:
        logger.warning(
            "Email not configured - skipping notification (submission %s)",
            submission.id,
        )
    else:
        logger.info("Contact notification sent for %s", submission.id)
    return result


def run_submit(
    data: Mapping[str, Any],
    *,
    repo: ContactRepoPort,
    sender: EmailPort,
    recipient: str = DEFAULT_RECIPIENT,
) -> ContactSubmission:
    """
    Validate, store and announce a contact-form submission.

    Args:
        data: Submission fields (snake_case)
        repo: Submission storage
        sender: Notification email sender
        recipient: Inbox that receives the notification

    Returns:
        The stored submission

    Raises:
        ValidationFailed: bad fields
        StoreError: the submission could not be stored
        UpstreamError: the notification could not be sent
    """
    submission = validators.parse_contact(data)
    stored = repo.create(submission)
    logger.info("Stored contact submission %s", stored.id)
    notify(stored, sender=sender, recipient=recipient)
    return stored
