"""
Events component ports.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol
from uuid import UUID

from sjba_api.core.ports.db import EventFilter
from sjba_api.domain.entities import Event


class EventRepoPort(Protocol):
    """
    Event storage.

    ``count`` and ``list_page`` must apply the same filter predicate.
    Listings are ordered by start_time ascending.
    """

    def count(self, flt: EventFilter) -> int:
        ...

    def list_page(self, flt: EventFilter, limit: int, offset: int) -> list[Event]:
        ...

    def list_upcoming(self, now: datetime, limit: int) -> list[Event]:
        ...

    def get_by_id(self, event_id: UUID) -> Event | None:
        ...

    def create(self, event: Event) -> Event:
        ...

    def update(self, event: Event) -> Event:
        ...
