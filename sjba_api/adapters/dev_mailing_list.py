"""
In-memory mailing list.

Used when Mailchimp is not configured and as the test double. Failures can
be injected per operation to exercise the reconciliation paths.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from sjba_api.domain.errors import MailingListError

logger = logging.getLogger(__name__)


@dataclass
class Subscriber:
    email: str
    first_name: str
    last_name: str
    tags: set[str] = field(default_factory=set)


@dataclass
class InMemoryMailingList:
    """MailingListPort backed by a dict keyed on lowercased email."""

    subscribers: dict[str, Subscriber] = field(default_factory=dict)
    calls: list[tuple[str, str]] = field(default_factory=list)

    # Failure injection
    fail_upsert: bool = False
    fail_remove: bool = False
    fail_ping: bool = False

    def upsert_subscriber(
        self,
        email: str,
        first_name: str,
        last_name: str,
        tags: Sequence[str] = (),
    ) -> None:
        self.calls.append(("upsert", email))
        if self.fail_upsert:
            raise MailingListError("Mailing list unavailable", status=503)

        key = email.lower()
        existing = self.subscribers.get(key)
        if existing is None:
            existing = Subscriber(email=key, first_name=first_name, last_name=last_name)
            self.subscribers[key] = existing
        else:
            existing.first_name = first_name
            existing.last_name = last_name
        existing.tags.update(tags)
        logger.info("MAILING LIST (dev): upserted %s tags=%s", key, sorted(existing.tags))

    def remove_subscriber(self, email: str) -> None:
        self.calls.append(("remove", email))
        if self.fail_remove:
            raise MailingListError("Mailing list unavailable", status=503)
        self.subscribers.pop(email.lower(), None)
        logger.info("MAILING LIST (dev): removed %s", email.lower())

    def ping(self) -> None:
        if self.fail_ping:
            raise MailingListError("Mailing list unavailable", status=503)

    # --- Test Helper Methods ---

    def has(self, email: str) -> bool:
        return email.lower() in self.subscribers

    def count(self, operation: str) -> int:
        return sum(1 for op, _ in self.calls if op == operation)
