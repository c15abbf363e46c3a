"""
Events component unit tests.

Covers:
- Query parameter validation (page, limit, search, date bounds)
- Filter construction, including date-only end bounds
- Pagination math and pages past the end
- Upcoming listing and single-event lookup
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

import pytest

from sjba_api.components.events import (
    EventListInput,
    build_filter,
    create_event,
    get_event,
    parse_date_bound,
    run_list,
    run_upcoming,
    total_pages,
    update_event,
)
from sjba_api.core.ports.db import EventFilter
from sjba_api.domain.entities import Event
from sjba_api.domain.errors import NotFoundError, ValidationFailed

# --- Mock Repository ---


class MockEventRepo:
    """In-memory event repository applying EventFilter in Python."""

    def __init__(self, events: list[Event] | None = None) -> None:
        self.events: dict[UUID, Event] = {e.id: e for e in events or []}
        self.page_calls = 0

    def _matching(self, flt: EventFilter) -> list[Event]:
        result = []
        for e in self.events.values():
            if flt.search:
                needle = flt.search.lower()
                haystack = [e.title.lower(), (e.description or "").lower()]
                if not any(needle in h for h in haystack):
                    continue
            if flt.start_date and e.start_time < flt.start_date:
                continue
            if flt.end_date and e.start_time > flt.end_date:
                continue
            result.append(e)
        return sorted(result, key=lambda e: e.start_time)

    def count(self, flt: EventFilter) -> int:
        return len(self._matching(flt))

    def list_page(self, flt: EventFilter, limit: int, offset: int) -> list[Event]:
        self.page_calls += 1
        return self._matching(flt)[offset : offset + limit]

    def list_upcoming(self, now: datetime, limit: int) -> list[Event]:
        upcoming = [e for e in self.events.values() if e.start_time >= now]
        return sorted(upcoming, key=lambda e: e.start_time)[:limit]

    def get_by_id(self, event_id: UUID) -> Event | None:
        return self.events.get(event_id)

    def create(self, event: Event) -> Event:
        self.events[event.id] = event
        return event

    def update(self, event: Event) -> Event:
        if event.id not in self.events:
            raise NotFoundError("Event not found", code="EVENT_NOT_FOUND")
        self.events[event.id] = event
        return event


BASE = datetime(2026, 3, 1, 18, 0, tzinfo=UTC)


def make_event(title: str, days: int, description: str | None = None) -> Event:
    return Event(title=title, description=description, start_time=BASE + timedelta(days=days))


@pytest.fixture
def repo() -> MockEventRepo:
    events = [make_event(f"Event {i}", i) for i in range(23)]
    events.append(make_event("Goldman Coffee Chat", 30, "Meet the banking team"))
    events.append(make_event("Resume Workshop", 31, "Bring your RESUME for review"))
    return MockEventRepo(events)


# --- Pure Functions ---


class TestTotalPages:
    def test_exact(self) -> None:
        assert total_pages(20, 10) == 2

    def test_rounds_up(self) -> None:
        assert total_pages(21, 10) == 3

    def test_empty(self) -> None:
        assert total_pages(0, 10) == 0


class TestParseDateBound:
    def test_date_only_start_is_midnight(self) -> None:
        assert parse_date_bound("2026-03-01") == datetime(2026, 3, 1, tzinfo=UTC)

    def test_date_only_end_covers_day(self) -> None:
        bound = parse_date_bound("2026-03-01", end=True)
        assert bound == datetime(2026, 3, 1, 23, 59, 59, 999999, tzinfo=UTC)

    def test_datetime_end_is_exact(self) -> None:
        bound = parse_date_bound("2026-03-01T12:00:00Z", end=True)
        assert bound == datetime(2026, 3, 1, 12, tzinfo=UTC)

    def test_offset_converted_to_utc(self) -> None:
        bound = parse_date_bound("2026-03-01T12:00:00-05:00")
        assert bound == datetime(2026, 3, 1, 17, tzinfo=UTC)

    def test_invalid(self) -> None:
        assert parse_date_bound("next tuesday") is None

    def test_last_representable_day(self) -> None:
        bound = parse_date_bound("9999-12-31", end=True)
        assert bound == datetime.max.replace(tzinfo=UTC)

    def test_offset_past_year_9999_is_invalid(self) -> None:
        assert parse_date_bound("9999-12-31T23:00:00-05:00") is None


class TestBuildFilter:
    def test_search_trimmed(self) -> None:
        errors: list[str] = []
        flt = build_filter(EventListInput(search="  coffee "), errors)
        assert errors == []
        assert flt.search == "coffee"

    def test_blank_search_rejected(self) -> None:
        errors: list[str] = []
        build_filter(EventListInput(search="   "), errors)
        assert errors == ["Search query cannot be empty"]

    def test_bad_dates_reported(self) -> None:
        errors: list[str] = []
        build_filter(EventListInput(start_date="soon", end_date="later"), errors)
        assert errors == [
            "startDate must be a valid ISO 8601 date",
            "endDate must be a valid ISO 8601 date",
        ]


# --- Listing ---


class TestRunList:
    def test_defaults(self, repo: MockEventRepo) -> None:
        result = run_list(EventListInput(), repo=repo)
        assert result.pagination.page == 1
        assert result.pagination.limit == 10
        assert result.pagination.total == 25
        assert result.pagination.total_pages == 3
        assert len(result.events) == 10
        assert result.events[0].title == "Event 0"

    def test_ordered_by_start_time(self, repo: MockEventRepo) -> None:
        result = run_list(EventListInput(limit="100"), repo=repo)
        starts = [e.start_time for e in result.events]
        assert starts == sorted(starts)

    def test_last_page_partial(self, repo: MockEventRepo) -> None:
        result = run_list(EventListInput(page="3", limit="10"), repo=repo)
        assert len(result.events) == 5
        assert result.pagination.has_prev
        assert not result.pagination.has_next

    def test_page_past_end_is_empty(self, repo: MockEventRepo) -> None:
        result = run_list(EventListInput(page="9"), repo=repo)
        assert result.events == []
        assert result.pagination.total == 25
        assert repo.page_calls == 0

    def test_search_title_or_description(self, repo: MockEventRepo) -> None:
        result = run_list(EventListInput(search="resume"), repo=repo)
        assert [e.title for e in result.events] == ["Resume Workshop"]

        result = run_list(EventListInput(search="BANKING"), repo=repo)
        assert [e.title for e in result.events] == ["Goldman Coffee Chat"]

    def test_date_range_inclusive(self, repo: MockEventRepo) -> None:
        result = run_list(
            EventListInput(start_date="2026-03-02T18:00:00Z", end_date="2026-03-04"),
            repo=repo,
        )
        assert [e.title for e in result.events] == ["Event 1", "Event 2", "Event 3"]

    def test_total_matches_filtered_set(self, repo: MockEventRepo) -> None:
        inp = EventListInput(search="event", limit="7")
        result = run_list(inp, repo=repo)
        assert result.pagination.total == 23
        assert result.pagination.total_pages == 4

    @pytest.mark.parametrize("page", ["0", "-1", "abc", "1.5"])
    def test_invalid_page(self, repo: MockEventRepo, page: str) -> None:
        with pytest.raises(ValidationFailed) as exc:
            run_list(EventListInput(page=page), repo=repo)
        assert exc.value.errors == ["Page must be a positive integer"]

    @pytest.mark.parametrize("limit", ["0", "101", "ten"])
    def test_invalid_limit(self, repo: MockEventRepo, limit: str) -> None:
        with pytest.raises(ValidationFailed) as exc:
            run_list(EventListInput(limit=limit), repo=repo)
        assert exc.value.errors == ["Limit must be between 1 and 100"]

    def test_all_errors_collected(self, repo: MockEventRepo) -> None:
        with pytest.raises(ValidationFailed) as exc:
            run_list(EventListInput(page="0", limit="0", search=" "), repo=repo)
        assert len(exc.value.errors) == 3


class TestRunUpcoming:
    def test_default_limit(self, repo: MockEventRepo) -> None:
        events = run_upcoming(None, repo=repo, now=BASE + timedelta(days=10))
        assert [e.title for e in events] == [f"Event {i}" for i in range(10, 15)]

    def test_includes_event_starting_now(self, repo: MockEventRepo) -> None:
        events = run_upcoming("1", repo=repo, now=BASE)
        assert [e.title for e in events] == ["Event 0"]

    def test_limit_bounds(self, repo: MockEventRepo) -> None:
        with pytest.raises(ValidationFailed) as exc:
            run_upcoming("51", repo=repo)
        assert exc.value.errors == ["Limit must be between 1 and 50"]


# --- Lookups and writes ---


class TestGetEvent:
    def test_found(self, repo: MockEventRepo) -> None:
        event = next(iter(repo.events.values()))
        assert get_event(str(event.id), repo=repo) == event

    def test_bad_uuid(self, repo: MockEventRepo) -> None:
        with pytest.raises(ValidationFailed) as exc:
            get_event("not-a-uuid", repo=repo)
        assert exc.value.errors == ["Invalid event ID"]

    def test_missing(self, repo: MockEventRepo) -> None:
        with pytest.raises(NotFoundError) as exc:
            get_event(str(uuid4()), repo=repo)
        assert exc.value.code == "EVENT_NOT_FOUND"


class TestWrites:
    def test_create_requires_title_and_start(self) -> None:
        with pytest.raises(ValidationFailed) as exc:
            create_event({"title": " "}, repo=MockEventRepo())
        assert exc.value.errors == ["Title is required", "Start time is required"]

    def test_end_before_start_is_accepted(self) -> None:
        event = create_event(
            {
                "title": "Backwards",
                "start_time": "2026-03-01T18:00:00Z",
                "end_time": "2026-03-01T17:00:00Z",
            },
            repo=MockEventRepo(),
        )
        assert event.end_time is not None and event.end_time < event.start_time

    def test_update_keeps_identity(self) -> None:
        repo = MockEventRepo()
        event = create_event(
            {"title": "Mixer", "start_time": "2026-03-01T18:00:00Z"}, repo=repo
        )

        updated = update_event(
            event.id,
            {"title": "Spring Mixer", "start_time": "2026-03-02T18:00:00Z"},
            repo=repo,
        )

        assert updated.id == event.id
        assert updated.created_at == event.created_at
        assert updated.updated_at >= event.updated_at
        assert repo.events[event.id].title == "Spring Mixer"
