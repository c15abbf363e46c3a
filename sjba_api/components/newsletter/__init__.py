"""
Newsletter component.

Signup reconciliation between the mailing list and the local store.
"""

from sjba_api.components.newsletter.component import (
    build_signup,
    normalize_email,
    run,
    run_signup,
    validate_signup,
)
from sjba_api.components.newsletter.models import (
    DATABASE_ERROR,
    EMAIL_ALREADY_SUBSCRIBED,
    MAILING_LIST_ERROR,
    MANUAL_RECONCILIATION_MARKER,
    VALIDATION_ERROR,
    Compensation,
    NewsletterConfig,
    SignupInput,
    SignupOutput,
    ValidationError,
)
from sjba_api.components.newsletter.ports import SignupRepoPort, SubscriberListPort

__all__ = [
    # Component
    "run",
    "run_signup",
    # Pure functions
    "normalize_email",
    "validate_signup",
    "build_signup",
    # Error codes
    "VALIDATION_ERROR",
    "EMAIL_ALREADY_SUBSCRIBED",
    "MAILING_LIST_ERROR",
    "DATABASE_ERROR",
    "MANUAL_RECONCILIATION_MARKER",
    # Models
    "Compensation",
    "NewsletterConfig",
    "SignupInput",
    "SignupOutput",
    "ValidationError",
    # Ports
    "SignupRepoPort",
    "SubscriberListPort",
]
