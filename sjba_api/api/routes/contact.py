"""
Contact form endpoint.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, status

from sjba_api.adapters.sqlite_db import SQLiteContactRepo
from sjba_api.api.deps import Settings, get_app_settings, get_contact_repo, get_email_sender
from sjba_api.api.schemas import ContactRequest, ok
from sjba_api.components.contact import run_submit
from sjba_api.core.ports.email import EmailPort

router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
def submit_contact(
    body: ContactRequest,
    repo: SQLiteContactRepo = Depends(get_contact_repo),
    sender: EmailPort = Depends(get_email_sender),
    settings: Settings = Depends(get_app_settings),
) -> dict[str, Any]:
    run_submit(
        body.payload(),
        repo=repo,
        sender=sender,
        recipient=settings.contact_notification_email,
    )
    return ok(
        {"success": True, "message": "Message sent successfully"},
        message="Thank you for your message. We will get back to you soon!",
    )
