"""
Contact component.
"""

from sjba_api.components.contact.component import (
    DEFAULT_RECIPIENT,
    EMAIL_SEND_FAILED,
    Notification,
    build_notification,
    format_submitted_at,
    notify,
    run_submit,
)
from sjba_api.components.contact.ports import ContactRepoPort

__all__ = [
    "run_submit",
    "notify",
    "build_notification",
    "format_submitted_at",
    "Notification",
    "DEFAULT_RECIPIENT",
    "EMAIL_SEND_FAILED",
    "ContactRepoPort",
]
