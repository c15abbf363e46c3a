"""
Events component.

Listing query construction, pagination, and event lookups.

Key behaviors:
- One EventFilter drives both the count and the page query
- Search is a case-insensitive substring over title or description
- startDate/endDate bound start_time inclusively; a date-only endDate
  covers that whole day
- totalPages = ceil(total / limit); pages past the end are empty
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Mapping
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID

from sjba_api.components.events.models import (
    EventListInput,
    EventListOutput,
    LimitBounds,
    Pagination,
)
from sjba_api.components.events.ports import EventRepoPort
from sjba_api.core.ports.db import EventFilter
from sjba_api.domain import validators
from sjba_api.domain.entities import Event, utc_now
from sjba_api.domain.errors import NotFoundError, ValidationFailed

logger = logging.getLogger(__name__)

DATE_ONLY = re.compile(r"^\d{4}-\d{2}-\d{2}$")

DEFAULT_LIST_BOUNDS = LimitBounds(default=10, min=1, max=100)
DEFAULT_UPCOMING_BOUNDS = LimitBounds(default=5, min=1, max=50)


# --- Pure Functions (Functional Core) ---


def parse_int(value: str | int | None) -> int | None:
    """Integer from a query-string value, or None when it is not one."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    text = validators.clean_text(value)
    if re.fullmatch(r"[+-]?\d+", text):
        return int(text)
    return None


def parse_date_bound(value: str | None, *, end: bool = False) -> datetime | None:
    """
    Parse a startDate/endDate bound.

    A date-only end bound is widened to the last microsecond of that day.
    """
    text = validators.clean_text(value)
    if not text:
        return None
    parsed = validators.parse_timestamp(text)
    if parsed is not None and end and DATE_ONLY.match(text):
        try:
            parsed = parsed + timedelta(days=1) - timedelta(microseconds=1)
        except OverflowError:
            parsed = datetime.max.replace(tzinfo=UTC)
    return parsed


def resolve_limit(
    value: str | int | None,
    bounds: LimitBounds,
    errors: list[str],
) -> int:
    if value is None or value == "":
        return bounds.default
    limit = parse_int(value)
    if limit is None or not bounds.min <= limit <= bounds.max:
        errors.append(f"Limit must be between {bounds.min} and {bounds.max}")
        return bounds.default
    return limit


def build_filter(inp: EventListInput, errors: list[str]) -> EventFilter:
    """
    Build the listing filter, appending any problems to ``errors``.

    Args:
        inp: Raw listing query
        errors: Collector for validation messages

    Returns:
        EventFilter (meaningless when errors were appended)
    """
    search: str | None = None
    if inp.search is not None:
        search = inp.search.strip()
        if not search:
            errors.append("Search query cannot be empty")
            search = None

    start = parse_date_bound(inp.start_date)
    if validators.clean_text(inp.start_date) and start is None:
        errors.append("startDate must be a valid ISO 8601 date")

    end = parse_date_bound(inp.end_date, end=True)
    if validators.clean_text(inp.end_date) and end is None:
        errors.append("endDate must be a valid ISO 8601 date")

    return EventFilter(search=search, start_date=start, end_date=end)


def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit > 0 else 0


# --- Handlers ---


def run_list(
    inp: EventListInput,
    *,
    repo: EventRepoPort,
    bounds: LimitBounds = DEFAULT_LIST_BOUNDS,
) -> EventListOutput:
    """
    List one page of events.

    Raises:
        ValidationFailed: bad page, limit, search or date bounds
    """
    errors: list[str] = []

    page = 1
    if inp.page is not None and inp.page != "":
        parsed_page = parse_int(inp.page)
        if parsed_page is None or parsed_page < 1:
            errors.append("Page must be a positive integer")
        else:
            page = parsed_page

    limit = resolve_limit(inp.limit, bounds, errors)
    flt = build_filter(inp, errors)

    if errors:
        raise ValidationFailed(errors)

    total = repo.count(flt)
    pages = total_pages(total, limit)
    events: list[Event] = []
    if page <= pages:
        events = repo.list_page(flt, limit, (page - 1) * limit)

    return EventListOutput(
        events=events,
        pagination=Pagination(page=page, limit=limit, total=total, total_pages=pages),
    )


def run_upcoming(
    limit: str | int | None,
    *,
    repo: EventRepoPort,
    bounds: LimitBounds = DEFAULT_UPCOMING_BOUNDS,
    now: datetime | None = None,
) -> list[Event]:
    """Events starting at or after ``now``, soonest first."""
    errors: list[str] = []
    resolved = resolve_limit(limit, bounds, errors)
    if errors:
        raise ValidationFailed(errors)
    return repo.list_upcoming(now or utc_now(), resolved)


def get_event(event_id: str | UUID, *, repo: EventRepoPort) -> Event:
    uid = validators.parse_uuid(event_id, "Invalid event ID")
    event = repo.get_by_id(uid)
    if event is None:
        raise NotFoundError("Event not found", code="EVENT_NOT_FOUND")
    return event


def create_event(data: Mapping[str, Any], *, repo: EventRepoPort) -> Event:
    event = validators.parse_event(data)
    created = repo.create(event)
    logger.info("Created event %s (%s)", created.id, created.title)
    return created


def update_event(
    event_id: str | UUID,
    data: Mapping[str, Any],
    *,
    repo: EventRepoPort,
) -> Event:
    """Replace an event's fields, keeping its id and created_at."""
    current = get_event(event_id, repo=repo)
    fields = {**data, "id": current.id, "created_at": current.created_at}
    updated = validators.parse_event(fields).model_copy(update={"updated_at": utc_now()})
    return repo.update(updated)
