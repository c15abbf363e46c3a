"""
SQLite record store adapter.

Implements the repository ports in sjba_api.core.ports.db. Every statement
runs inside ``_session()``, which maps driver errors onto the tagged store
errors: a unique-key collision becomes DuplicateError, anything else from
sqlite3 becomes StoreError.
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from typing import Any
from uuid import UUID

from sjba_api.core.ports.db import EventFilter
from sjba_api.domain.entities import (
    BoardMember,
    ContactSubmission,
    Event,
    Member,
    NewsletterSignup,
    Semester,
    SiteConfigEntry,
    to_storage_ts,
)
from sjba_api.domain.errors import DuplicateError, NotFoundError, StoreError

logger = logging.getLogger(__name__)

CONNECT_TIMEOUT_SECONDS = 5.0

_UNIQUE_ERRORS = {"SQLITE_CONSTRAINT_UNIQUE", "SQLITE_CONSTRAINT_PRIMARYKEY"}

# -----------------------------------------------------------------------------
# Helper functions
# -----------------------------------------------------------------------------


def dict_factory(cursor: sqlite3.Cursor, row: tuple[Any, ...]) -> dict[str, Any]:
    """Convert SQLite row to dictionary."""
    return {col[0]: row[idx] for idx, col in enumerate(cursor.description)}


def escape_like(text: str) -> str:
    """Escape LIKE wildcards so user input matches literally (ESCAPE '\\')."""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def build_event_where(flt: EventFilter) -> tuple[str, list[Any]]:
    """
    WHERE clause and parameters for an EventFilter.

    Shared by the count and the page query.
    """
    clauses: list[str] = []
    params: list[Any] = []

    if flt.search:
        pattern = f"%{escape_like(flt.search.lower())}%"
        clauses.append(
            "(lower(title) LIKE ? ESCAPE '\\' OR lower(coalesce(description, '')) LIKE ? ESCAPE '\\')"
        )
        params.extend([pattern, pattern])
    if flt.start_date is not None:
        clauses.append("start_time >= ?")
        params.append(to_storage_ts(flt.start_date))
    if flt.end_date is not None:
        clauses.append("start_time <= ?")
        params.append(to_storage_ts(flt.end_date))

    where = f" WHERE {' AND '.join(clauses)}" if clauses else ""
    return where, params


# -----------------------------------------------------------------------------
# Base SQLite Repository
# -----------------------------------------------------------------------------


class SQLiteRepoBase:
    """Base class for SQLite repositories."""

    duplicate_message = "Record already exists"

    def __init__(self, db_path: str, connection: sqlite3.Connection | None = None):
        self.db_path = db_path
        self._external_conn = connection

    def _get_conn(self) -> sqlite3.Connection:
        """Get database connection (uses external if provided)."""
        if self._external_conn is not None:
            return self._external_conn

        conn = sqlite3.connect(self.db_path, timeout=CONNECT_TIMEOUT_SECONDS)
        conn.row_factory = dict_factory
        conn.execute("PRAGMA foreign_keys = ON;")
        return conn

    def _should_close(self) -> bool:
        """Whether to close connection after use."""
        return self._external_conn is None

    @contextmanager
    def _session(self) -> Iterator[sqlite3.Connection]:
        conn: sqlite3.Connection | None = None
        try:
            conn = self._get_conn()
            yield conn
            if self._should_close():
                conn.commit()
        except sqlite3.IntegrityError as e:
            if conn is not None and self._should_close():
                conn.rollback()
            if getattr(e, "sqlite_errorname", "") in _UNIQUE_ERRORS:
                raise DuplicateError(self.duplicate_message, details=str(e)) from e
            raise StoreError(f"Database constraint failed: {e}") from e
        except sqlite3.Error as e:
            if conn is not None and self._should_close():
                conn.rollback()
            raise StoreError(f"Database error: {e}") from e
        finally:
            if conn is not None and self._should_close():
                conn.close()


class SQLiteStorePing(SQLiteRepoBase):
    """Connectivity probe for readiness checks and the CLI."""

    def ping(self) -> None:
        with self._session() as conn:
            conn.execute("SELECT 1").fetchone()


# -----------------------------------------------------------------------------
# Board members
# -----------------------------------------------------------------------------


class SQLiteBoardMemberRepo(SQLiteRepoBase):
    """SQLite implementation of BoardMemberRepoPort."""

    def list_all(self) -> list[BoardMember]:
        with self._session() as conn:
            rows = conn.execute(
                "SELECT * FROM board_members ORDER BY order_index ASC, full_name ASC"
            ).fetchall()
        return [BoardMember.from_row(r) for r in rows]

    def get_by_id(self, member_id: UUID) -> BoardMember | None:
        with self._session() as conn:
            row = conn.execute(
                "SELECT * FROM board_members WHERE id = ?", (str(member_id),)
            ).fetchone()
        return BoardMember.from_row(row) if row else None

    def create(self, member: BoardMember) -> BoardMember:
        row = member.to_row()
        with self._session() as conn:
            conn.execute(
                """
                INSERT INTO board_members (
                    id, position, full_name, bio, major, year, hometown,
                    linkedin_url, email, headshot_file, order_index
                ) VALUES (
                    :id, :position, :full_name, :bio, :major, :year, :hometown,
                    :linkedin_url, :email, :headshot_file, :order_index
                )
                """,
                row,
            )
        return member

    def update(self, member: BoardMember) -> BoardMember:
        row = member.to_row()
        with self._session() as conn:
            cursor = conn.execute(
                """
                UPDATE board_members SET
                    position = :position, full_name = :full_name, bio = :bio,
                    major = :major, year = :year, hometown = :hometown,
                    linkedin_url = :linkedin_url, email = :email,
                    headshot_file = :headshot_file, order_index = :order_index
                WHERE id = :id
                """,
                row,
            )
            if cursor.rowcount == 0:
                raise NotFoundError("Board member not found", code="BOARD_MEMBER_NOT_FOUND")
        return member

    def delete(self, member_id: UUID) -> bool:
        with self._session() as conn:
            cursor = conn.execute("DELETE FROM board_members WHERE id = ?", (str(member_id),))
            return cursor.rowcount > 0

    def count(self) -> int:
        with self._session() as conn:
            row = conn.execute("SELECT COUNT(*) AS n FROM board_members").fetchone()
        return int(row["n"])


# -----------------------------------------------------------------------------
# Events
# -----------------------------------------------------------------------------


class SQLiteEventRepo(SQLiteRepoBase):
    """SQLite implementation of EventRepoPort."""

    def count(self, flt: EventFilter) -> int:
        where, params = build_event_where(flt)
        with self._session() as conn:
            row = conn.execute(f"SELECT COUNT(*) AS n FROM events{where}", params).fetchone()
        return int(row["n"])

    def list_page(self, flt: EventFilter, limit: int, offset: int) -> list[Event]:
        where, params = build_event_where(flt)
        with self._session() as conn:
            rows = conn.execute(
                f"SELECT * FROM events{where} ORDER BY start_time ASC, id ASC LIMIT ? OFFSET ?",
                [*params, limit, offset],
            ).fetchall()
        return [Event.from_row(r) for r in rows]

    def list_upcoming(self, now: datetime, limit: int) -> list[Event]:
        with self._session() as conn:
            rows = conn.execute(
                "SELECT * FROM events WHERE start_time >= ? ORDER BY start_time ASC LIMIT ?",
                (to_storage_ts(now), limit),
            ).fetchall()
        return [Event.from_row(r) for r in rows]

    def get_by_id(self, event_id: UUID) -> Event | None:
        with self._session() as conn:
            row = conn.execute("SELECT * FROM events WHERE id = ?", (str(event_id),)).fetchone()
        return Event.from_row(row) if row else None

    def create(self, event: Event) -> Event:
        with self._session() as conn:
            conn.execute(
                """
                INSERT INTO events (
                    id, title, description, company, start_time, end_time,
                    location, flyer_file, rsvp_link, semester, created_at, updated_at
                ) VALUES (
                    :id, :title, :description, :company, :start_time, :end_time,
                    :location, :flyer_file, :rsvp_link, :semester, :created_at, :updated_at
                )
                """,
                event.to_row(),
            )
        return event

    def update(self, event: Event) -> Event:
        with self._session() as conn:
            cursor = conn.execute(
                """
                UPDATE events SET
                    title = :title, description = :description, company = :company,
                    start_time = :start_time, end_time = :end_time, location = :location,
                    flyer_file = :flyer_file, rsvp_link = :rsvp_link,
                    semester = :semester, updated_at = :updated_at
                WHERE id = :id
                """,
                event.to_row(),
            )
            if cursor.rowcount == 0:
                raise NotFoundError("Event not found", code="EVENT_NOT_FOUND")
        return event


# -----------------------------------------------------------------------------
# Membership
# -----------------------------------------------------------------------------


class SQLiteSemesterRepo(SQLiteRepoBase):
    """SQLite implementation of SemesterRepoPort."""

    duplicate_message = "Semester already exists"

    def list_all(self) -> list[Semester]:
        with self._session() as conn:
            rows = conn.execute("SELECT * FROM semesters ORDER BY semester_name ASC").fetchall()
        return [Semester.from_row(r) for r in rows]

    def get_by_name(self, name: str) -> Semester | None:
        with self._session() as conn:
            row = conn.execute(
                "SELECT * FROM semesters WHERE semester_name = ?", (name,)
            ).fetchone()
        return Semester.from_row(row) if row else None

    def create(self, semester: Semester) -> Semester:
        with self._session() as conn:
            conn.execute(
                "INSERT INTO semesters (id, semester_name) VALUES (:id, :semester_name)",
                semester.to_row(),
            )
        return semester


class SQLiteMemberRepo(SQLiteRepoBase):
    """SQLite implementation of MemberRepoPort."""

    def list_all(self) -> list[Member]:
        with self._session() as conn:
            rows = conn.execute(
                "SELECT * FROM members ORDER BY last_name ASC, first_name ASC"
            ).fetchall()
        return [Member.from_row(r) for r in rows]

    def create(self, member: Member) -> Member:
        with self._session() as conn:
            conn.execute(
                """
                INSERT INTO members (id, first_name, last_name, semester, email)
                VALUES (:id, :first_name, :last_name, :semester, :email)
                """,
                member.to_row(),
            )
        return member


# -----------------------------------------------------------------------------
# Inbound forms
# -----------------------------------------------------------------------------


class SQLiteContactRepo(SQLiteRepoBase):
    """SQLite implementation of ContactRepoPort (write-once)."""

    def create(self, submission: ContactSubmission) -> ContactSubmission:
        with self._session() as conn:
            conn.execute(
                """
                INSERT INTO contact_submissions (
                    id, first_name, last_name, email, company, message, created_at
                ) VALUES (
                    :id, :first_name, :last_name, :email, :company, :message, :created_at
                )
                """,
                submission.to_row(),
            )
        return submission


class SQLiteNewsletterSignupRepo(SQLiteRepoBase):
    """SQLite implementation of NewsletterSignupRepoPort."""

    duplicate_message = "Email already subscribed"

    def get_by_email(self, email: str) -> NewsletterSignup | None:
        with self._session() as conn:
            row = conn.execute(
                "SELECT * FROM newsletter_signups WHERE email = ?", (email,)
            ).fetchone()
        return NewsletterSignup.from_row(row) if row else None

    def create(self, signup: NewsletterSignup) -> NewsletterSignup:
        with self._session() as conn:
            conn.execute(
                """
                INSERT INTO newsletter_signups (
                    id, email, first_name, last_name, year, college, created_at
                ) VALUES (
                    :id, :email, :first_name, :last_name, :year, :college, :created_at
                )
                """,
                signup.to_row(),
            )
        return signup

    def update(self, signup: NewsletterSignup) -> NewsletterSignup:
        with self._session() as conn:
            cursor = conn.execute(
                """
                UPDATE newsletter_signups SET
                    first_name = :first_name,
                    last_name = :last_name,
                    year = coalesce(:year, year),
                    college = coalesce(:college, college)
                WHERE email = :email
                """,
                signup.to_row(),
            )
            if cursor.rowcount == 0:
                raise NotFoundError("Newsletter signup not found")
            row = conn.execute(
                "SELECT * FROM newsletter_signups WHERE email = ?", (signup.email,)
            ).fetchone()
        return NewsletterSignup.from_row(row)


# -----------------------------------------------------------------------------
# Site config
# -----------------------------------------------------------------------------


class SQLiteSiteConfigRepo(SQLiteRepoBase):
    """SQLite implementation of SiteConfigRepoPort."""

    def get_many(self, keys: list[str]) -> list[SiteConfigEntry]:
        if not keys:
            return []
        placeholders = ", ".join("?" for _ in keys)
        with self._session() as conn:
            rows = conn.execute(
                f"SELECT key, value FROM site_config WHERE key IN ({placeholders}) ORDER BY key",
                keys,
            ).fetchall()
        return [SiteConfigEntry(**r) for r in rows]

    def set(self, key: str, value: str | None) -> SiteConfigEntry:
        with self._session() as conn:
            conn.execute(
                """
                INSERT INTO site_config (key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value
                """,
                (key, value),
            )
        return SiteConfigEntry(key=key, value=value)
