"""
Record store interfaces.

Protocol-based repository ports. The SQLite adapter implements them;
tests use in-memory fakes.

Errors:
- Implementations raise StoreError when the store is unreachable or rejects
  a statement, and DuplicateError on a unique-key collision. They never
  return error strings.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID

from sjba_api.domain.entities import (
    BoardMember,
    ContactSubmission,
    Event,
    Member,
    NewsletterSignup,
    Semester,
    SiteConfigEntry,
)

# -----------------------------------------------------------------------------
# Query values
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class EventFilter:
    """
    Filter for the events listing.

    The same value produces the WHERE clause for both the count and the
    page query, so totals and pages can never disagree.
    """

    search: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None


# -----------------------------------------------------------------------------
# Board members
# -----------------------------------------------------------------------------


class BoardMemberRepoPort(Protocol):
    """Ordered by order_index, then full_name."""

    def list_all(self) -> list[BoardMember]: ...

    def get_by_id(self, member_id: UUID) -> BoardMember | None: ...

    def create(self, member: BoardMember) -> BoardMember: ...

    def update(self, member: BoardMember) -> BoardMember:
        """Raises NotFoundError when the row does not exist."""
        ...

    def delete(self, member_id: UUID) -> bool: ...

    def count(self) -> int: ...


# -----------------------------------------------------------------------------
# Events
# -----------------------------------------------------------------------------


class EventRepoPort(Protocol):
    """Ordered by start_time ascending."""

    def count(self, flt: EventFilter) -> int: ...

    def list_page(self, flt: EventFilter, limit: int, offset: int) -> list[Event]: ...

    def list_upcoming(self, now: datetime, limit: int) -> list[Event]: ...

    def get_by_id(self, event_id: UUID) -> Event | None: ...

    def create(self, event: Event) -> Event: ...

    def update(self, event: Event) -> Event:
        """Raises NotFoundError when the row does not exist."""
        ...


# -----------------------------------------------------------------------------
# Membership
# -----------------------------------------------------------------------------


class SemesterRepoPort(Protocol):
    def list_all(self) -> list[Semester]: ...

    def get_by_name(self, name: str) -> Semester | None: ...

    def create(self, semester: Semester) -> Semester:
        """Raises DuplicateError when the name already exists."""
        ...


class MemberRepoPort(Protocol):
    def list_all(self) -> list[Member]: ...

    def create(self, member: Member) -> Member: ...


# -----------------------------------------------------------------------------
# Inbound forms
# -----------------------------------------------------------------------------


class ContactRepoPort(Protocol):
    def create(self, submission: ContactSubmission) -> ContactSubmission: ...


class NewsletterSignupRepoPort(Protocol):
    """One row per distinct (lowercased) email."""

    def get_by_email(self, email: str) -> NewsletterSignup | None: ...

    def create(self, signup: NewsletterSignup) -> NewsletterSignup:
        """Raises DuplicateError when the email already has a row."""
        ...

    def update(self, signup: NewsletterSignup) -> NewsletterSignup:
        """Update name, year and college of the row with the same email."""
        ...


# -----------------------------------------------------------------------------
# Site config
# -----------------------------------------------------------------------------


class SiteConfigRepoPort(Protocol):
    def get_many(self, keys: list[str]) -> list[SiteConfigEntry]: ...

    def set(self, key: str, value: str | None) -> SiteConfigEntry: ...


class StorePingPort(Protocol):
    """Connectivity check used by readiness probes and the CLI."""

    def ping(self) -> None: ...
