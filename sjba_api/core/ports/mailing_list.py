"""
Mailing-list provider interface.

Implementations:
- MailchimpAdapter: Mailchimp Marketing API v3 over HTTPS
- InMemoryMailingList: dev/test double

Every failing call raises MailingListError. Callers treat any exception from
these methods as a provider failure.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol


class MailingListPort(Protocol):
    def upsert_subscriber(
        self,
        email: str,
        first_name: str,
        last_name: str,
        tags: Sequence[str] = (),
    ) -> None:
        """
        Create or update a subscriber keyed by email, then apply ``tags``.

        New subscribers are created as subscribed. Existing subscribers
        keep their status and get their merge fields updated.

        Raises MailingListError only when the subscriber write fails. A
        failed tag update is logged and does not raise.
        """
        ...

    def remove_subscriber(self, email: str) -> None:
        """Remove the subscriber. An already-absent subscriber is success."""
        ...

    def ping(self) -> None:
        """Raise MailingListError unless the provider answers healthy."""
        ...
