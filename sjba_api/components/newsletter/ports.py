"""
Newsletter component ports.

Protocol interfaces for the signup flow's two systems of record.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from sjba_api.domain.entities import NewsletterSignup


class SignupRepoPort(Protocol):
    """Local signup rows, unique by lowercased email."""

    def get_by_email(self, email: str) -> NewsletterSignup | None:
        ...

    def create(self, signup: NewsletterSignup) -> NewsletterSignup:
        """Raises DuplicateError if the email already has a row."""
        ...

    def update(self, signup: NewsletterSignup) -> NewsletterSignup:
        ...


class SubscriberListPort(Protocol):
    """External mailing list."""

    def upsert_subscriber(
        self,
        email: str,
        first_name: str,
        last_name: str,
        tags: Sequence[str] = (),
    ) -> None:
        ...

    def remove_subscriber(self, email: str) -> None:
        ...
