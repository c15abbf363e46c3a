from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel

from sjba_api.app_shell.security import sanitize_value


# --- Envelopes ---
def ok(data: Any = None, **extra: Any) -> dict[str, Any]:
    """Success envelope: {success: true, data, ...extra}."""
    body: dict[str, Any] = {"success": True}
    body.update({k: v for k, v in extra.items() if v is not None})
    body["data"] = data
    return body


def error_body(message: str, code: str, details: Any = None) -> dict[str, Any]:
    error: dict[str, Any] = {"message": message, "code": code}
    if details is not None:
        error["details"] = details
    return {"success": False, "error": error}


# --- Request Bodies ---
class RequestModel(BaseModel):
    """
    Base for JSON bodies.

    Accepts both camelCase and snake_case keys. Every string is trimmed and
    stripped of <script> blocks before field validation. Field checks are
    left to the domain parsers so messages stay consistent.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _sanitize(cls, data: Any) -> Any:
        return sanitize_value(data)

    def payload(self) -> dict[str, Any]:
        """snake_case field values, unset fields omitted."""
        return self.model_dump(exclude_unset=True)


class NewsletterSignupRequest(RequestModel):
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    year: str | None = None
    college: str | None = None


class ContactRequest(RequestModel):
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    company: str | None = None
    message: str | None = None


class MemberRequest(RequestModel):
    first_name: str | None = None
    last_name: str | None = None
    semester: str | None = None
    email: str | None = None


class SemesterRequest(RequestModel):
    semester_name: str | None = None
