"""
Newsletter signup component.

Keeps the external mailing list and the local signup table consistent
across a write to two systems that share no transaction.

Key behaviors:
- The mailing list is written first; if it fails nothing is stored locally
- The local write is an upsert by lowercased email (or a reject, by policy)
- If the local write fails after the mailing list succeeded, the subscriber
  is removed again (compensation)
- If the compensation also fails, a CRITICAL record marked
  MANUAL_RECONCILIATION_REQUIRED carries the email and both errors

Side effects per call: one mailing-list upsert, at most one local mutation,
at most one compensating removal.
"""

from __future__ import annotations

import logging

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
from sjba_api.domain import validators
from sjba_api.domain.entities import NewsletterSignup
from sjba_api.domain.errors import DuplicateError
from sjba_api.rules.models import DuplicatePolicy

logger = logging.getLogger(__name__)


# --- Pure Functions (Functional Core) ---


def normalize_email(email: str | None) -> str:
    """Trim, then lowercase."""
    return validators.normalize_email(email)


def validate_signup(inp: SignupInput, config: NewsletterConfig) -> list[ValidationError]:
    """
    Validate a signup request.

    Args:
        inp: Raw signup input
        config: Signup policy (allowed email domains)

    Returns:
        Every violation found; empty when valid
    """
    messages = validators.validate_newsletter_signup(
        {
            "email": inp.email,
            "first_name": inp.first_name,
            "last_name": inp.last_name,
            "year": inp.year,
            "college": inp.college,
        },
        config.allowed_email_domains,
    )
    return [ValidationError(VALIDATION_ERROR, m) for m in messages]


def build_signup(inp: SignupInput) -> NewsletterSignup:
    """Typed, normalized record from a validated input."""
    return NewsletterSignup(
        email=normalize_email(inp.email),
        first_name=validators.clean_text(inp.first_name),
        last_name=validators.clean_text(inp.last_name),
        year=validators.clean_optional(inp.year),
        college=validators.clean_optional(inp.college),
    )


def _failure(code: str, message: str, compensation: Compensation | None = None) -> SignupOutput:
    return SignupOutput(
        success=False,
        errors=[ValidationError(code, message)],
        compensation=compensation,
    )


# --- Local write ---


def _store(
    signup: NewsletterSignup,
    repo: SignupRepoPort,
    policy: DuplicatePolicy,
) -> tuple[NewsletterSignup, bool]:
    """
    Upsert the local row. Returns (row, created).

    Raises DuplicateError under the reject policy when a concurrent request
    won the insert race.
    """
    existing = repo.get_by_email(signup.email)
    if existing is not None:
        if policy == DuplicatePolicy.REJECT:
            raise DuplicateError("Email is already subscribed")
        return repo.update(existing.model_copy(update=_name_fields(signup))), False

    try:
        return repo.create(signup), True
    except DuplicateError:
        if policy == DuplicatePolicy.REJECT:
            raise
        # Lost an insert race; the winner's row exists now
        logger.info("Signup insert raced for %s; updating instead", signup.email)
        existing = repo.get_by_email(signup.email)
        if existing is None:
            raise
        return repo.update(existing.model_copy(update=_name_fields(signup))), False


def _name_fields(signup: NewsletterSignup) -> dict[str, str | None]:
    return {
        "first_name": signup.first_name,
        "last_name": signup.last_name,
        "year": signup.year,
        "college": signup.college,
    }


def _compensate(
    email: str,
    db_error: Exception,
    mailing_list: SubscriberListPort,
) -> Compensation:
    """Undo the mailing-list upsert after a failed local write."""
    try:
        mailing_list.remove_subscriber(email)
    except Exception as rollback_error:
        logger.critical(
            "%s: %s is subscribed on the mailing list but has no local signup row; "
            "database error: %s; rollback error: %s",
            MANUAL_RECONCILIATION_MARKER,
            email,
            db_error,
            rollback_error,
            extra={
                "incident": MANUAL_RECONCILIATION_MARKER,
                "email": email,
                "db_error": str(db_error),
                "rollback_error": str(rollback_error),
            },
        )
        return Compensation.MANUAL

    logger.info(
        "Recovered newsletter inconsistency: removed %s from mailing list after "
        "database error: %s",
        email,
        db_error,
        extra={"incident": "NEWSLETTER_RECOVERED", "email": email, "db_error": str(db_error)},
    )
    return Compensation.RECOVERED


# --- Atomic Handler ---


def run_signup(
    inp: SignupInput,
    *,
    repo: SignupRepoPort,
    mailing_list: SubscriberListPort,
    config: NewsletterConfig | None = None,
) -> SignupOutput:
    """
    Handle a newsletter signup.

    Args:
        inp: Raw signup input
        repo: Local signup repository
        mailing_list: Mailing-list provider
        config: Signup policy

    Returns:
        SignupOutput. On failure ``errors[0].code`` is one of
        VALIDATION_ERROR, EMAIL_ALREADY_SUBSCRIBED, MAILING_LIST_ERROR,
        DATABASE_ERROR.
    """
    cfg = config or NewsletterConfig()

    errors = validate_signup(inp, cfg)
    if errors:
        return SignupOutput(success=False, errors=errors)

    signup = build_signup(inp)

    if cfg.duplicate_policy == DuplicatePolicy.REJECT:
        try:
            already = repo.get_by_email(signup.email)
        except Exception as e:
            logger.error("Signup lookup failed for %s: %s", signup.email, e)
            return _failure(DATABASE_ERROR, "Failed to save newsletter signup")
        if already is not None:
            return _failure(EMAIL_ALREADY_SUBSCRIBED, "Email is already subscribed")

    # 1. Mailing list first; failure is terminal and nothing is stored
    try:
        mailing_list.upsert_subscriber(
            signup.email,
            signup.first_name,
            signup.last_name,
            tags=[cfg.signup_tag] if cfg.signup_tag else [],
        )
    except Exception as e:
        logger.error(
            "Mailing list upsert failed for %s: %s",
            signup.email,
            e,
            extra={"email": signup.email},
        )
        return _failure(
            MAILING_LIST_ERROR, "Failed to subscribe to newsletter. Please try again later."
        )

    # 2. Local write
    try:
        stored, created = _store(signup, repo, cfg.duplicate_policy)
    except DuplicateError as e:
        if cfg.duplicate_policy == DuplicatePolicy.REJECT:
            # The concurrent winner owns the subscription; nothing to undo
            return _failure(EMAIL_ALREADY_SUBSCRIBED, "Email is already subscribed")
        return _local_failure(signup.email, e, mailing_list)
    except Exception as e:
        return _local_failure(signup.email, e, mailing_list)

    logger.info(
        "Newsletter signup %s for %s", "created" if created else "updated", stored.email
    )
    return SignupOutput(success=True, signup=stored, created=created)


def _local_failure(
    email: str,
    db_error: Exception,
    mailing_list: SubscriberListPort,
) -> SignupOutput:
    logger.error("Signup database write failed for %s: %s", email, db_error)
    compensation = _compensate(email, db_error, mailing_list)
    return _failure(DATABASE_ERROR, "Failed to save newsletter signup", compensation)


def run(
    inp: SignupInput,
    *,
    repo: SignupRepoPort,
    mailing_list: SubscriberListPort,
    config: NewsletterConfig | None = None,
) -> SignupOutput:
    """
    Main component entry point.

    Args:
        inp: Input command
        repo: Repository port (Required)
        mailing_list: Mailing-list port (Required)
        config: Configuration (Optional)

    Returns:
        Operation result
    """
    if isinstance(inp, SignupInput):
        return run_signup(inp, repo=repo, mailing_list=mailing_list, config=config)
    raise ValueError(f"Unknown input type: {type(inp)}")
