"""
Integration tests for the SQLite repositories against a migrated database.
"""

from __future__ import annotations

import sqlite3
from datetime import UTC, datetime, timedelta

import pytest

from sjba_api.adapters.sqlite_db import (
    SQLiteBoardMemberRepo,
    SQLiteContactRepo,
    SQLiteEventRepo,
    SQLiteMemberRepo,
    SQLiteNewsletterSignupRepo,
    SQLiteSemesterRepo,
    SQLiteSiteConfigRepo,
    SQLiteStorePing,
    build_event_where,
    escape_like,
)
from sjba_api.components.events import EventListInput, run_list
from sjba_api.core.ports.db import EventFilter
from sjba_api.domain.entities import (
    BoardMember,
    ContactSubmission,
    Event,
    Member,
    NewsletterSignup,
    Semester,
)
from sjba_api.domain.errors import DuplicateError, NotFoundError, StoreError

BASE = datetime(2026, 9, 1, 18, 0, tzinfo=UTC)


def make_event(i: int, **overrides: object) -> Event:
    fields: dict[str, object] = {
        "title": f"Event {i:02d}",
        "description": "Speaker series" if i % 2 else "Networking night",
        "start_time": BASE + timedelta(days=i),
    }
    fields.update(overrides)
    return Event(**fields)  # type: ignore[arg-type]


class TestQueryHelpers:
    def test_escape_like(self) -> None:
        assert escape_like("50%_off\\") == "50\\%\\_off\\\\"

    def test_empty_filter(self) -> None:
        assert build_event_where(EventFilter()) == ("", [])

    def test_all_clauses(self) -> None:
        where, params = build_event_where(
            EventFilter(search="Mixer", start_date=BASE, end_date=BASE + timedelta(days=1))
        )
        assert where.startswith(" WHERE (lower(title) LIKE ?")
        assert where.count(" AND ") == 2
        assert params[0] == "%mixer%"
        assert len(params) == 4


class TestEventRepo:
    @pytest.fixture
    def repo(self, db_path: str) -> SQLiteEventRepo:
        repo = SQLiteEventRepo(db_path)
        # inserted out of order on purpose
        for i in [5, 1, 12, 3, 8, 0, 10, 2, 7, 11, 4, 9, 6]:
            repo.create(make_event(i))
        return repo

    def test_round_trip(self, repo: SQLiteEventRepo) -> None:
        event = repo.create(make_event(40, location="KMC 2-60"))
        loaded = repo.get_by_id(event.id)
        assert loaded is not None
        assert loaded.start_time == event.start_time
        assert loaded.location == "KMC 2-60"

    def test_pagination_consistency(self, repo: SQLiteEventRepo) -> None:
        flt = EventFilter()
        total = repo.count(flt)
        seen: list[str] = []
        for page in range(1, 6):
            seen.extend(e.title for e in repo.list_page(flt, 3, (page - 1) * 3))
        assert total == 13
        assert len(seen) == total
        assert len(set(seen)) == total
        assert seen == sorted(seen)

    def test_filtered_pagination_consistency(self, repo: SQLiteEventRepo) -> None:
        inp = EventListInput(search="SPEAKER", limit=2)
        first = run_list(inp, repo=repo)
        assert first.pagination is not None
        pages = first.pagination.total_pages

        titles: list[str] = []
        for page in range(1, pages + 1):
            out = run_list(EventListInput(search="SPEAKER", limit=2, page=page), repo=repo)
            titles.extend(e.title for e in out.events)

        assert len(titles) == first.pagination.total == 6
        assert all(int(t.split()[-1]) % 2 == 1 for t in titles)

    def test_past_last_page_is_empty(self, repo: SQLiteEventRepo) -> None:
        out = run_list(EventListInput(page=99, limit=5), repo=repo)
        assert out.events == []
        assert out.pagination is not None and out.pagination.total == 13

    def test_date_bounds_inclusive(self, repo: SQLiteEventRepo) -> None:
        flt = EventFilter(start_date=BASE + timedelta(days=2), end_date=BASE + timedelta(days=4))
        titles = [e.title for e in repo.list_page(flt, 10, 0)]
        assert titles == ["Event 02", "Event 03", "Event 04"]

    def test_like_wildcards_match_literally(self, repo: SQLiteEventRepo) -> None:
        repo.create(make_event(50, title="100% Fun"))
        assert repo.count(EventFilter(search="%")) == 1
        assert repo.count(EventFilter(search="_")) == 0

    def test_upcoming(self, repo: SQLiteEventRepo) -> None:
        upcoming = repo.list_upcoming(BASE + timedelta(days=10), 5)
        assert [e.title for e in upcoming] == ["Event 10", "Event 11", "Event 12"]

    def test_update_missing(self, repo: SQLiteEventRepo) -> None:
        with pytest.raises(NotFoundError):
            repo.update(make_event(99))


class TestBoardMemberRepo:
    def test_crud(self, db_path: str) -> None:
        repo = SQLiteBoardMemberRepo(db_path)
        a = repo.create(BoardMember(position="VP", full_name="Bo", order_index=2))
        b = repo.create(BoardMember(position="President", full_name="Al", order_index=1))
        assert [m.full_name for m in repo.list_all()] == ["Al", "Bo"]
        assert repo.count() == 2

        repo.update(a.model_copy(update={"order_index": 0}))
        assert [m.full_name for m in repo.list_all()] == ["Bo", "Al"]

        assert repo.delete(b.id)
        assert not repo.delete(b.id)
        assert repo.get_by_id(b.id) is None


class TestRosterRepos:
    def test_semester_unique(self, db_path: str) -> None:
        repo = SQLiteSemesterRepo(db_path)
        repo.create(Semester(semester_name="Fall 2026"))
        with pytest.raises(DuplicateError):
            repo.create(Semester(semester_name="Fall 2026"))
        assert repo.get_by_name("Fall 2026") is not None
        assert repo.get_by_name("Spring 2027") is None

    def test_member_requires_semester_row(self, db_path: str) -> None:
        with pytest.raises(StoreError):
            SQLiteMemberRepo(db_path).create(
                Member(first_name="A", last_name="B", semester="Nope")
            )

    def test_member_listing(self, db_path: str) -> None:
        SQLiteSemesterRepo(db_path).create(Semester(semester_name="Fall 2026"))
        repo = SQLiteMemberRepo(db_path)
        repo.create(Member(first_name="Zed", last_name="Adams", semester="Fall 2026"))
        repo.create(Member(first_name="Amy", last_name="Adams", semester="Fall 2026"))
        assert [m.first_name for m in repo.list_all()] == ["Amy", "Zed"]


class TestNewsletterRepo:
    def test_unique_email(self, db_path: str) -> None:
        repo = SQLiteNewsletterSignupRepo(db_path)
        repo.create(NewsletterSignup(email="a@nyu.edu", first_name="A", last_name="B"))
        with pytest.raises(DuplicateError) as exc:
            repo.create(NewsletterSignup(email="a@nyu.edu", first_name="C", last_name="D"))
        assert exc.value.message == "Email already subscribed"

    def test_update_keeps_optional_fields(self, db_path: str) -> None:
        repo = SQLiteNewsletterSignupRepo(db_path)
        original = repo.create(
            NewsletterSignup(email="a@nyu.edu", first_name="A", last_name="B", year="2027")
        )
        updated = repo.update(original.model_copy(update={"first_name": "Ann", "year": None}))
        assert updated.first_name == "Ann"
        assert updated.year == "2027"
        assert updated.id == original.id


class TestMisc:
    def test_contact_insert(self, db_path: str) -> None:
        sub = SQLiteContactRepo(db_path).create(
            ContactSubmission(first_name="A", last_name="B", email="a@b.co", message="Hi")
        )
        conn = sqlite3.connect(db_path)
        try:
            (count,) = conn.execute(
                "SELECT COUNT(*) FROM contact_submissions WHERE id = ?", (str(sub.id),)
            ).fetchone()
        finally:
            conn.close()
        assert count == 1

    def test_site_config(self, db_path: str) -> None:
        repo = SQLiteSiteConfigRepo(db_path)
        repo.set("banner", "one")
        repo.set("banner", "two")
        repo.set("footer", None)
        entries = repo.get_many(["footer", "banner", "missing"])
        assert [(e.key, e.value) for e in entries] == [("banner", "two"), ("footer", None)]
        assert repo.get_many([]) == []

    def test_ping(self, db_path: str) -> None:
        SQLiteStorePing(db_path).ping()

    def test_ping_unreachable(self, tmp_path) -> None:  # type: ignore[no-untyped-def]
        with pytest.raises(StoreError):
            SQLiteStorePing(str(tmp_path / "missing" / "x.db")).ping()
