"""
Newsletter component models.

Input/output values for the signup reconciliation flow.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from sjba_api.domain.entities import NewsletterSignup
from sjba_api.rules.models import DuplicatePolicy

# --- Error codes ---

VALIDATION_ERROR = "VALIDATION_ERROR"
EMAIL_ALREADY_SUBSCRIBED = "EMAIL_ALREADY_SUBSCRIBED"
MAILING_LIST_ERROR = "MAILING_LIST_ERROR"
DATABASE_ERROR = "DATABASE_ERROR"

MANUAL_RECONCILIATION_MARKER = "MANUAL_RECONCILIATION_REQUIRED"


class Compensation(Enum):
    """What happened to the provider subscription after a local failure."""

    RECOVERED = "recovered"  # Subscriber removed again
    MANUAL = "manual"  # Removal failed; needs an operator


# --- Input Models ---


@dataclass(frozen=True)
class SignupInput:
    """Raw signup request (untrimmed, unvalidated)."""

    email: str | None
    first_name: str | None
    last_name: str | None
    year: str | None = None
    college: str | None = None


# --- Output Models ---


@dataclass(frozen=True)
class ValidationError:
    """Error detail."""

    code: str
    message: str
    field: str | None = None


@dataclass(frozen=True)
class SignupOutput:
    """Output from a signup attempt."""

    success: bool
    signup: NewsletterSignup | None = None
    created: bool = False  # True when a new row was inserted
    errors: list[ValidationError] = field(default_factory=list)
    compensation: Compensation | None = None

    @property
    def error_code(self) -> str | None:
        return self.errors[0].code if self.errors else None


# --- Configuration ---


@dataclass(frozen=True)
class NewsletterConfig:
    """Signup policy."""

    duplicate_policy: DuplicatePolicy = DuplicatePolicy.UPSERT
    allowed_email_domains: tuple[str, ...] = ("nyu.edu",)
    signup_tag: str = "Website Signup"
