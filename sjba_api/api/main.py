import logging
import time
from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from fastapi import FastAPI, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware

from sjba_api import __version__
from sjba_api.adapters.sqlite.migrator import SQLiteMigrator
from sjba_api.adapters.sqlite_db import SQLiteStorePing
from sjba_api.api.deps import Settings, build_email_sender, build_mailing_list, get_settings
from sjba_api.api.errors import error_response, register_error_handlers
from sjba_api.api.routes import board_members, contact, events, newsletter, roster, site_config
from sjba_api.app_shell.config import validate_ops_rules
from sjba_api.app_shell.logging_setup import configure_logging
from sjba_api.app_shell.rate_limit import RateLimiter, TimePort
from sjba_api.app_shell.security import SECURITY_HEADERS, referer_allowed
from sjba_api.core.ports.email import EmailPort
from sjba_api.core.ports.mailing_list import MailingListPort
from sjba_api.rules.loader import load_rules
from sjba_api.rules.models import Rules
from sjba_api.shell.http.health import (
    HealthCheckRegistry,
    StartupCheck,
    StartupTracker,
    create_health_router,
    database_check,
    mailing_list_check,
)

logger = logging.getLogger(__name__)

API_PREFIX = "/v1"
RATE_LIMIT_MESSAGE = "Too many requests from this IP, please try again later."

CallNext = Callable[[Request], Awaitable[Response]]


def load_rules_or_default(path: Path) -> Rules:
    """Rules from ``path``; defaults when the file is absent. Invalid rules raise."""
    try:
        rules = load_rules(path)
    except FileNotFoundError:
        logger.warning("Rules file not found at %s - using defaults", path)
        return Rules()
    logger.info("Rules loaded from %s", path)
    return rules


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def cors_origins(settings: Settings, rules: Rules) -> list[str]:
    origins = list(rules.security.allowed_origins)
    if settings.frontend_url and settings.frontend_url not in origins:
        origins.append(settings.frontend_url)
    return origins


def create_app(
    settings: Settings | None = None,
    rules: Rules | None = None,
    *,
    mailing_list: MailingListPort | None = None,
    email_sender: EmailPort | None = None,
    time_port: TimePort | None = None,
) -> FastAPI:
    """
    Build the API.

    Adapters are constructed once here and shared by every request.
    Explicit arguments replace the ones built from settings (tests pass
    fakes this way).
    """
    settings = settings or get_settings()
    if rules is None:
        rules = load_rules_or_default(settings.rules_path)
    mailing_list = mailing_list if mailing_list is not None else build_mailing_list(settings)
    email_sender = email_sender if email_sender is not None else build_email_sender(settings)

    tracker = StartupTracker()
    registry = HealthCheckRegistry()
    registry.register(StartupCheck(tracker))
    registry.register(database_check(SQLiteStorePing(settings.db_path).ping))
    registry.register(mailing_list_check(mailing_list.ping))

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        configure_logging()
        try:
            validate_ops_rules(rules, settings.migrations_dir)
            if rules.ops.auto_migrate:
                Path(settings.db_path).parent.mkdir(parents=True, exist_ok=True)
                SQLiteMigrator(settings.db_path, str(settings.migrations_dir)).run_migrations()
        except Exception as e:
            logger.critical("Startup failed: %s", e)
            raise
        tracker.mark_started()
        logger.info(
            "SJBA API %s started (environment=%s, db=%s)",
            __version__,
            settings.environment,
            settings.db_path,
        )
        yield
        logger.info("SJBA API shutting down")

    app = FastAPI(
        title="SJBA API",
        version=__version__,
        description="Backend API for SJBA website",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = settings
    app.state.rules = rules
    app.state.mailing_list = mailing_list
    app.state.email_sender = email_sender
    app.state.rate_limiter = RateLimiter(rules.rate_limit, time_port)

    register_error_handlers(app)

    # --- Middleware (last added runs first) ---

    referer_domains = [settings.frontend_url] if settings.frontend_url else []

    @app.middleware("http")
    async def guard_api(request: Request, call_next: CallNext) -> Response:
        if not request.url.path.startswith(API_PREFIX):
            return await call_next(request)

        decision = None
        if rules.rate_limit.enabled:
            decision = app.state.rate_limiter.check_api(client_ip(request))
            if not decision.allowed:
                logger.warning("Rate limit exceeded for %s", client_ip(request))
                limited = error_response(
                    status.HTTP_429_TOO_MANY_REQUESTS, RATE_LIMIT_MESSAGE, "RATE_LIMIT_EXCEEDED"
                )
                limited.headers["Retry-After"] = str(decision.reset_seconds)
                return limited

        if rules.security.check_referer:
            referer = request.headers.get("referer") or request.headers.get("origin")
            if not referer_allowed(referer, referer_domains, environment=settings.environment):
                logger.warning("Blocked request with invalid referer: %s", referer)
                return error_response(
                    status.HTTP_403_FORBIDDEN, "Forbidden - Invalid referer", "INVALID_REFERER"
                )

        response = await call_next(request)
        if decision is not None:
            response.headers["RateLimit-Limit"] = str(decision.limit)
            response.headers["RateLimit-Remaining"] = str(decision.remaining)
            response.headers["RateLimit-Reset"] = str(decision.reset_seconds)
        return response

    @app.middleware("http")
    async def security_headers(request: Request, call_next: CallNext) -> Response:
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response

    @app.middleware("http")
    async def access_log(request: Request, call_next: CallNext) -> Response:
        start = time.perf_counter()
        response = await call_next(request)
        if not request.url.path.startswith("/health"):
            logger.info(
                "%s %s %d %.1fms",
                request.method,
                request.url.path,
                response.status_code,
                (time.perf_counter() - start) * 1000,
            )
        return response

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins(settings, rules),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
    )

    # --- Routers ---
    app.include_router(
        create_health_router(
            environment=settings.environment, tracker=tracker, registry=registry
        )
    )
    app.include_router(
        board_members.router, prefix=f"{API_PREFIX}/board-members", tags=["Board Members"]
    )
    app.include_router(events.router, prefix=f"{API_PREFIX}/events", tags=["Events"])
    app.include_router(
        newsletter.router, prefix=f"{API_PREFIX}/newsletter-sign-ups", tags=["Newsletter"]
    )
    app.include_router(contact.router, prefix=f"{API_PREFIX}/contact", tags=["Contact"])
    app.include_router(roster.members_router, prefix=f"{API_PREFIX}/members", tags=["Members"])
    app.include_router(
        roster.semesters_router, prefix=f"{API_PREFIX}/semesters", tags=["Semesters"]
    )
    app.include_router(
        site_config.router, prefix=f"{API_PREFIX}/site-config", tags=["Site Config"]
    )

    # --- Info ---

    @app.get("/")
    def root() -> dict[str, Any]:
        return {
            "name": "SJBA API",
            "version": __version__,
            "status": "running",
            "description": "Backend API for SJBA website",
            "endpoints": {"health": "/health", "api": API_PREFIX},
        }

    @app.get(API_PREFIX)
    def api_info() -> dict[str, Any]:
        return {
            "name": "SJBA API",
            "version": __version__,
            "description": "Backend API for SJBA website with secure public endpoints",
            "endpoints": {
                "GET /v1/board-members": "Get all board members",
                "GET /v1/board-members/{id}": "Get specific board member",
                "GET /v1/events": "List events (paginated, filterable)",
                "GET /v1/events/upcoming": "Get upcoming events",
                "GET /v1/events/{id}": "Get specific event",
                "POST /v1/newsletter-sign-ups": "Sign up for newsletter",
                "POST /v1/contact": "Submit contact form",
                "GET /v1/members": "List members",
                "POST /v1/members": "Register a member",
                "GET /v1/semesters": "List semesters",
                "POST /v1/semesters": "Create a semester",
                "GET /v1/site-config": "Get site config values by key",
            },
        }

    @app.get("/favicon.ico", include_in_schema=False)
    @app.get("/favicon.png", include_in_schema=False)
    def favicon() -> Response:
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return app


app = create_app()
