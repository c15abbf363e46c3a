"""
Field validation and parsing for every entity kind.

Each ``validate_*`` returns a list of human-readable messages (empty means
valid). Each ``parse_*`` runs the matching validator, raises
ValidationFailed with all messages at once, and otherwise returns the typed
record with trimmed and normalized values.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any
from uuid import UUID

from sjba_api.domain.entities import (
    BoardMember,
    ContactSubmission,
    Event,
    Member,
    NewsletterSignup,
    Semester,
    as_utc,
)
from sjba_api.domain.errors import ValidationFailed

# RFC 5322 simplified
EMAIL_REGEX = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+@"
    r"[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)+$"
)

MAX_EMAIL_LENGTH = 254

# Contact names go into the notification Subject header
CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")


# --- Primitive helpers ---


def clean_text(value: Any) -> str:
    """Trimmed string, or empty string for anything that is not a string."""
    return value.strip() if isinstance(value, str) else ""


def clean_optional(value: Any) -> str | None:
    text = clean_text(value)
    return text or None


def normalize_email(email: Any) -> str:
    return clean_text(email).lower()


def is_valid_email(email: str) -> bool:
    return len(email) <= MAX_EMAIL_LENGTH and EMAIL_REGEX.match(email) is not None


def email_in_domains(email: str, domains: Iterable[str]) -> bool:
    """True when the email's domain is one of ``domains`` or a subdomain of one."""
    domain = email.rsplit("@", 1)[-1].lower()
    for allowed in domains:
        allowed = allowed.lower().lstrip("@.")
        if domain == allowed or domain.endswith("." + allowed):
            return True
    return False


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 datetime (or date) into an aware UTC datetime."""
    if isinstance(value, datetime):
        return as_utc(value)
    text = clean_text(value)
    if not text:
        return None
    try:
        return as_utc(datetime.fromisoformat(text))
    except (ValueError, OverflowError):
        return None


def parse_uuid(value: Any, message: str = "Invalid ID") -> UUID:
    """Parse an id path parameter; raises ValidationFailed with ``message``."""
    if isinstance(value, UUID):
        return value
    try:
        return UUID(clean_text(value))
    except ValueError:
        raise ValidationFailed([message]) from None


def _require(errors: list[str], value: Any, label: str, max_length: int | None) -> None:
    text = clean_text(value)
    if not text:
        errors.append(f"{label} is required")
    elif max_length is not None and len(text) > max_length:
        errors.append(f"{label} cannot exceed {max_length} characters")


def _single_line(errors: list[str], value: Any, label: str) -> None:
    if CONTROL_CHARS.search(clean_text(value)):
        errors.append(f"{label} cannot contain line breaks or control characters")


def _limit(errors: list[str], value: Any, label: str, max_length: int) -> None:
    text = clean_text(value)
    if len(text) > max_length:
        errors.append(f"{label} cannot exceed {max_length} characters")


def _email(errors: list[str], value: Any, *, required: bool) -> None:
    email = normalize_email(value)
    if not email:
        if required:
            errors.append("Email is required")
        return
    if not is_valid_email(email):
        errors.append("Please enter a valid email")


def _raise_if(errors: list[str]) -> None:
    if errors:
        raise ValidationFailed(errors)


# --- Board members ---


def validate_board_member(data: Mapping[str, Any]) -> list[str]:
    errors: list[str] = []
    _require(errors, data.get("full_name"), "Name", 100)
    _require(errors, data.get("position"), "Position", 100)
    _email(errors, data.get("email"), required=False)
    _limit(errors, data.get("major"), "Major", 100)
    order_index = data.get("order_index", 0)
    if isinstance(order_index, bool) or not isinstance(order_index, int):
        errors.append("Order index must be an integer")
    return errors


def parse_board_member(data: Mapping[str, Any]) -> BoardMember:
    _raise_if(validate_board_member(data))
    fields: dict[str, Any] = {
        "position": clean_text(data.get("position")),
        "full_name": clean_text(data.get("full_name")),
        "bio": data.get("bio") or "",
        "major": clean_text(data.get("major")),
        "year": clean_text(data.get("year")),
        "hometown": clean_text(data.get("hometown")),
        "linkedin_url": clean_optional(data.get("linkedin_url")),
        "email": clean_text(data.get("email")),
        "headshot_file": clean_optional(data.get("headshot_file")),
        "order_index": data.get("order_index", 0),
    }
    if data.get("id"):
        fields["id"] = data["id"]
    return BoardMember(**fields)


# --- Events ---


def validate_event(data: Mapping[str, Any]) -> list[str]:
    errors: list[str] = []
    _require(errors, data.get("title"), "Title", 255)
    if data.get("start_time") in (None, ""):
        errors.append("Start time is required")
    elif parse_timestamp(data.get("start_time")) is None:
        errors.append("Start time must be a valid ISO 8601 date")
    if data.get("end_time") not in (None, "") and parse_timestamp(data.get("end_time")) is None:
        errors.append("End time must be a valid ISO 8601 date")
    # end_time >= start_time is intentionally not checked; see DESIGN.md
    return errors


def parse_event(data: Mapping[str, Any]) -> Event:
    _raise_if(validate_event(data))
    fields: dict[str, Any] = {
        "title": clean_text(data.get("title")),
        "description": data.get("description"),
        "company": clean_optional(data.get("company")),
        "start_time": parse_timestamp(data.get("start_time")),
        "end_time": parse_timestamp(data.get("end_time")),
        "location": clean_optional(data.get("location")),
        "flyer_file": clean_optional(data.get("flyer_file")),
        "rsvp_link": clean_optional(data.get("rsvp_link")),
        "semester": clean_optional(data.get("semester")),
    }
    for key in ("id", "created_at", "updated_at"):
        if data.get(key):
            fields[key] = data[key]
    return Event(**fields)


# --- Semesters and members ---


def validate_semester(data: Mapping[str, Any]) -> list[str]:
    errors: list[str] = []
    _require(errors, data.get("semester_name"), "Semester name", 100)
    return errors


def parse_semester(data: Mapping[str, Any]) -> Semester:
    _raise_if(validate_semester(data))
    return Semester(semester_name=clean_text(data.get("semester_name")))


def validate_member(data: Mapping[str, Any]) -> list[str]:
    errors: list[str] = []
    _require(errors, data.get("first_name"), "First name", 100)
    _require(errors, data.get("last_name"), "Last name", 100)
    _require(errors, data.get("semester"), "Semester", None)
    _email(errors, data.get("email"), required=False)
    return errors


def parse_member(data: Mapping[str, Any]) -> Member:
    _raise_if(validate_member(data))
    email = normalize_email(data.get("email"))
    return Member(
        first_name=clean_text(data.get("first_name")),
        last_name=clean_text(data.get("last_name")),
        semester=clean_text(data.get("semester")),
        email=email or None,
    )


# --- Contact ---


def validate_contact(data: Mapping[str, Any]) -> list[str]:
    errors: list[str] = []
    _require(errors, data.get("first_name"), "First name", 100)
    _single_line(errors, data.get("first_name"), "First name")
    _require(errors, data.get("last_name"), "Last name", 100)
    _single_line(errors, data.get("last_name"), "Last name")
    _email(errors, data.get("email"), required=True)
    _limit(errors, data.get("company"), "Company", 255)
    _require(errors, data.get("message"), "Message", 5000)
    return errors


def parse_contact(data: Mapping[str, Any]) -> ContactSubmission:
    _raise_if(validate_contact(data))
    return ContactSubmission(
        first_name=clean_text(data.get("first_name")),
        last_name=clean_text(data.get("last_name")),
        email=normalize_email(data.get("email")),
        company=clean_optional(data.get("company")),
        message=clean_text(data.get("message")),
    )


# --- Newsletter ---


def validate_newsletter_signup(
    data: Mapping[str, Any],
    allowed_domains: Iterable[str] = (),
) -> list[str]:
    errors: list[str] = []
    email = normalize_email(data.get("email"))
    domains = list(allowed_domains)
    if not email:
        errors.append("Email is required")
    elif not is_valid_email(email):
        errors.append("Please enter a valid email")
    elif domains and not email_in_domains(email, domains):
        listed = ", ".join(f"@{d.lstrip('@')}" for d in domains)
        errors.append(f"Please use an approved email address ({listed})")
    _require(errors, data.get("first_name"), "First name", 50)
    _require(errors, data.get("last_name"), "Last name", 50)
    _limit(errors, data.get("year"), "Year", 50)
    _limit(errors, data.get("college"), "College", 50)
    return errors


def parse_newsletter_signup(
    data: Mapping[str, Any],
    allowed_domains: Iterable[str] = (),
) -> NewsletterSignup:
    _raise_if(validate_newsletter_signup(data, allowed_domains))
    return NewsletterSignup(
        email=normalize_email(data.get("email")),
        first_name=clean_text(data.get("first_name")),
        last_name=clean_text(data.get("last_name")),
        year=clean_optional(data.get("year")),
        college=clean_optional(data.get("college")),
    )
