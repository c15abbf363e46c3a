"""
Tagged error variants shared by the store, components and HTTP layer.

Every variant carries the HTTP status and the wire error code it maps to,
so the routing layer switches on the exception type and never on the
message text.
"""

from __future__ import annotations

from typing import Any


class ApiError(Exception):
    """Base error with an HTTP status and an envelope error code."""

    status_code: int = 500
    code: str = "INTERNAL_SERVER_ERROR"
    kind: str = "internal"

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        details: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.details = details


class ValidationFailed(ApiError):
    """User input is malformed. Carries every violation, not just the first."""

    status_code = 400
    code = "VALIDATION_ERROR"
    kind = "validation"

    def __init__(
        self,
        errors: list[str],
        *,
        code: str | None = None,
        message: str = "Validation failed",
    ) -> None:
        self.errors = list(errors)
        super().__init__(message, code=code, details=self.errors)


class NotFoundError(ApiError):
    """Referenced entity does not exist."""

    status_code = 404
    code = "NOT_FOUND"
    kind = "not_found"


class DuplicateError(ApiError):
    """A unique field collided with an existing row."""

    status_code = 409
    code = "CONFLICT"
    kind = "duplicate"


class UpstreamError(ApiError):
    """A third-party provider was unavailable or rejected the call."""

    status_code = 500
    code = "UPSTREAM_ERROR"
    kind = "upstream"

    def __init__(
        self,
        message: str,
        *,
        provider: str,
        code: str | None = None,
        status: int | None = None,
    ) -> None:
        super().__init__(message, code=code)
        self.provider = provider
        self.upstream_status = status


class MailingListError(UpstreamError):
    """Mailing-list provider call failed."""

    code = "MAILING_LIST_ERROR"

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message, provider="mailing_list", status=status)


class StoreError(ApiError):
    """The record store was unavailable or rejected the statement."""

    status_code = 500
    code = "DATABASE_ERROR"
    kind = "store"
