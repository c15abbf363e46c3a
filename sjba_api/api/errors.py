"""
Exception handlers.

Every error leaves the API as the error envelope
``{success: false, error: {message, code, details?}}``.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from sjba_api.api.schemas import error_body
from sjba_api.domain.errors import ApiError

logger = logging.getLogger(__name__)

GENERIC_SERVER_ERROR = "Internal server error"

_HTTP_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
    429: "RATE_LIMIT_EXCEEDED",
}


def error_response(
    status_code: int,
    message: str,
    code: str,
    details: object = None,
) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=error_body(message, code, details))


def _is_production(request: Request) -> bool:
    settings = getattr(request.app.state, "settings", None)
    return bool(settings is not None and settings.is_production)


def _validation_messages(exc: RequestValidationError) -> list[str]:
    messages = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        msg = err.get("msg", "Invalid value")
        messages.append(f"{loc}: {msg}" if loc else msg)
    return messages


def register_error_handlers(app: FastAPI) -> None:
    """Install the envelope handlers on ``app``."""

    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s failed: [%s] %s", request.method, request.url.path, exc.code, exc)
            if _is_production(request) and exc.kind in ("store", "internal"):
                return error_response(exc.status_code, GENERIC_SERVER_ERROR, exc.code)
        return error_response(exc.status_code, exc.message, exc.code, exc.details)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return error_response(
            status.HTTP_400_BAD_REQUEST,
            "Validation failed",
            "VALIDATION_ERROR",
            _validation_messages(exc),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            message = f"Not found - {request.url.path}"
        else:
            message = str(exc.detail)
        return error_response(
            exc.status_code,
            message,
            _HTTP_CODES.get(exc.status_code, "HTTP_ERROR"),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        message = GENERIC_SERVER_ERROR if _is_production(request) else str(exc)
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, message, "INTERNAL_SERVER_ERROR"
        )
