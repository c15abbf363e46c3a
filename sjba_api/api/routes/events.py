"""
Event endpoints.

- GET /v1/events: paginated listing with search and date bounds
- GET /v1/events/upcoming: next events from now
- GET /v1/events/{event_id}: one event
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query

from sjba_api.adapters.sqlite_db import SQLiteEventRepo
from sjba_api.api.deps import get_event_repo, get_events_bounds, get_upcoming_bounds
from sjba_api.api.schemas import ok
from sjba_api.components.events import (
    EventListInput,
    LimitBounds,
    get_event,
    run_list,
    run_upcoming,
)

router = APIRouter()


@router.get("")
def list_events(
    page: str | None = Query(None),
    limit: str | None = Query(None),
    search: str | None = Query(None),
    start_date: str | None = Query(None, alias="startDate"),
    end_date: str | None = Query(None, alias="endDate"),
    repo: SQLiteEventRepo = Depends(get_event_repo),
    bounds: LimitBounds = Depends(get_events_bounds),
) -> dict[str, Any]:
    result = run_list(
        EventListInput(
            page=page,
            limit=limit,
            search=search,
            start_date=start_date,
            end_date=end_date,
        ),
        repo=repo,
        bounds=bounds,
    )
    return ok(
        [e.to_json() for e in result.events],
        count=len(result.events),
        pagination=result.pagination.to_json(),
    )


@router.get("/upcoming")
def list_upcoming_events(
    limit: str | None = Query(None),
    repo: SQLiteEventRepo = Depends(get_event_repo),
    bounds: LimitBounds = Depends(get_upcoming_bounds),
) -> dict[str, Any]:
    events = run_upcoming(limit, repo=repo, bounds=bounds)
    return ok([e.to_json() for e in events], count=len(events))


@router.get("/{event_id}")
def read_event(
    event_id: str,
    repo: SQLiteEventRepo = Depends(get_event_repo),
) -> dict[str, Any]:
    return ok(get_event(event_id, repo=repo).to_json())
