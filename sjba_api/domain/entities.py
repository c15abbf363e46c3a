from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Self
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def utc_now() -> datetime:
    return datetime.now(UTC)


def as_utc(value: datetime) -> datetime:
    """Naive datetimes are taken to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def to_storage_ts(value: datetime | None) -> str | None:
    """Canonical timestamp text used for every stored and compared value."""
    if value is None:
        return None
    return as_utc(value).isoformat(timespec="microseconds")


# --- Base ---


class Entity(BaseModel):
    """
    Row-backed record.

    Field names are the snake_case storage columns; the camelCase wire
    names are generated aliases. Rows and wire payloads both validate.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json(self) -> dict[str, Any]:
        """Wire representation (camelCase)."""
        return self.model_dump(mode="json", by_alias=True)

    def to_row(self) -> dict[str, Any]:
        """Storage representation (snake_case, text ids and timestamps)."""
        row: dict[str, Any] = {}
        for name, value in self.model_dump().items():
            if isinstance(value, UUID):
                value = str(value)
            elif isinstance(value, datetime):
                value = to_storage_ts(value)
            row[name] = value
        return row

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> Self:
        return cls.model_validate(row)


# --- Board ---


class BoardMember(Entity):
    id: UUID = Field(default_factory=uuid4)
    position: str
    full_name: str
    bio: str = ""
    major: str = ""
    year: str = ""
    hometown: str = ""
    linkedin_url: str | None = None
    email: str = ""
    headshot_file: str | None = None
    order_index: int = 0

    def to_json(self) -> dict[str, Any]:
        data = super().to_json()
        # Bios are authored in a spreadsheet and stored with literal "\n"
        data["bio"] = self.bio.replace("\\n", "\n")
        return data


# --- Events ---


class Event(Entity):
    id: UUID = Field(default_factory=uuid4)
    title: str
    description: str | None = None
    company: str | None = None
    start_time: datetime
    end_time: datetime | None = None
    location: str | None = None
    flyer_file: str | None = None
    rsvp_link: str | None = None
    semester: str | None = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


# --- Membership ---


class Semester(Entity):
    id: UUID = Field(default_factory=uuid4)
    semester_name: str


class Member(Entity):
    id: UUID = Field(default_factory=uuid4)
    first_name: str
    last_name: str
    semester: str
    email: str | None = None


# --- Inbound forms ---


class ContactSubmission(Entity):
    id: UUID = Field(default_factory=uuid4)
    first_name: str
    last_name: str
    email: str
    company: str | None = None
    message: str
    created_at: datetime = Field(default_factory=utc_now)


class NewsletterSignup(Entity):
    id: UUID = Field(default_factory=uuid4)
    email: str
    first_name: str
    last_name: str
    year: str | None = None
    college: str | None = None
    created_at: datetime = Field(default_factory=utc_now)


# --- Site config ---


class SiteConfigEntry(BaseModel):
    key: str
    value: str | None = None

    def to_json(self) -> dict[str, Any]:
        return self.model_dump()
