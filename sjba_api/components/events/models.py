"""
Events component models.
"""

from __future__ import annotations

from dataclasses import dataclass

from sjba_api.domain.entities import Event


@dataclass(frozen=True)
class LimitBounds:
    default: int
    min: int
    max: int


# --- Input Models ---


@dataclass(frozen=True)
class EventListInput:
    """Raw listing query (query-string values, unvalidated)."""

    page: str | int | None = None
    limit: str | int | None = None
    search: str | None = None
    start_date: str | None = None
    end_date: str | None = None


# --- Output Models ---


@dataclass(frozen=True)
class Pagination:
    page: int
    limit: int
    total: int
    total_pages: int

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    def to_json(self) -> dict[str, int | bool]:
        return {
            "page": self.page,
            "limit": self.limit,
            "total": self.total,
            "totalPages": self.total_pages,
            "hasNext": self.has_next,
            "hasPrev": self.has_prev,
        }


@dataclass(frozen=True)
class EventListOutput:
    events: list[Event]
    pagination: Pagination
