import logging
import os
from functools import lru_cache
from pathlib import Path

from fastapi import Depends, Request

from sjba_api.adapters.dev_email import DevEmailAdapter
from sjba_api.adapters.dev_mailing_list import InMemoryMailingList
from sjba_api.adapters.mailchimp import MailchimpAdapter
from sjba_api.adapters.smtp_email import SMTPConfig, SMTPEmailAdapter
from sjba_api.adapters.sqlite_db import (
    SQLiteBoardMemberRepo,
    SQLiteContactRepo,
    SQLiteEventRepo,
    SQLiteMemberRepo,
    SQLiteNewsletterSignupRepo,
    SQLiteSemesterRepo,
    SQLiteSiteConfigRepo,
)
from sjba_api.app_shell.rate_limit import RateLimiter
from sjba_api.components.events import LimitBounds
from sjba_api.components.newsletter import NewsletterConfig
from sjba_api.core.ports.email import EmailPort
from sjba_api.core.ports.mailing_list import MailingListPort
from sjba_api.rules.models import RangeRule, Rules

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parents[2]


# --- Settings ---
class Settings:
    """Process configuration read from the environment."""

    def __init__(self) -> None:
        self.base_dir = PROJECT_ROOT
        self.db_path = os.environ.get("SJBA_DB_PATH", "./data/sjba.db")
        self.rules_path = Path(os.environ.get("SJBA_RULES_PATH", str(PROJECT_ROOT / "rules.yaml")))
        self.migrations_dir = Path(
            os.environ.get("SJBA_MIGRATIONS_DIR", str(PROJECT_ROOT / "migrations"))
        )
        self.environment = os.environ.get("ENVIRONMENT", "development")
        self.frontend_url = os.environ.get("FRONTEND_URL", "")

        self.mailchimp_api_key = os.environ.get("MAILCHIMP_API_KEY", "")
        self.mailchimp_server_prefix = os.environ.get("MAILCHIMP_SERVER_PREFIX", "")
        self.mailchimp_list_id = os.environ.get("MAILCHIMP_LIST_ID", "")

        self.smtp_host = os.environ.get("SMTP_HOST", "")
        self.smtp_port = int(os.environ.get("SMTP_PORT", "587"))
        self.smtp_user = os.environ.get("SMTP_USER", "")
        self.smtp_pass = os.environ.get("SMTP_PASS", "")
        self.smtp_from = os.environ.get("SMTP_FROM", "") or self.smtp_user

        self.contact_notification_email = os.environ.get(
            "CONTACT_NOTIFICATION_EMAIL", "sjba@stern.nyu.edu"
        )

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def mailchimp_configured(self) -> bool:
        return all(
            (self.mailchimp_api_key, self.mailchimp_server_prefix, self.mailchimp_list_id)
        )

    @property
    def smtp_configured(self) -> bool:
        return all((self.smtp_host, self.smtp_user, self.smtp_pass))


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Adapter construction (once per app) ---
def build_mailing_list(settings: Settings) -> MailingListPort:
    if settings.mailchimp_configured:
        return MailchimpAdapter(
            settings.mailchimp_api_key,
            settings.mailchimp_server_prefix,
            settings.mailchimp_list_id,
        )
    logger.warning("Mailchimp not configured - using in-memory mailing list")
    return InMemoryMailingList()


def build_email_sender(settings: Settings) -> EmailPort:
    if settings.smtp_configured:
        return SMTPEmailAdapter(
            SMTPConfig(
                host=settings.smtp_host,
                port=settings.smtp_port,
                username=settings.smtp_user,
                password=settings.smtp_pass,
                sender=settings.smtp_from,
            )
        )
    logger.warning("SMTP not configured - contact notifications will be logged only")
    return DevEmailAdapter()


# --- App state ---
def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_rules(request: Request) -> Rules:
    return request.app.state.rules


def get_mailing_list(request: Request) -> MailingListPort:
    return request.app.state.mailing_list


def get_email_sender(request: Request) -> EmailPort:
    return request.app.state.email_sender


def get_rate_limiter(request: Request) -> RateLimiter:
    return request.app.state.rate_limiter


# --- Repos ---
def get_board_member_repo(settings: Settings = Depends(get_app_settings)) -> SQLiteBoardMemberRepo:
    return SQLiteBoardMemberRepo(settings.db_path)


def get_event_repo(settings: Settings = Depends(get_app_settings)) -> SQLiteEventRepo:
    return SQLiteEventRepo(settings.db_path)


def get_semester_repo(settings: Settings = Depends(get_app_settings)) -> SQLiteSemesterRepo:
    return SQLiteSemesterRepo(settings.db_path)


def get_member_repo(settings: Settings = Depends(get_app_settings)) -> SQLiteMemberRepo:
    return SQLiteMemberRepo(settings.db_path)


def get_contact_repo(settings: Settings = Depends(get_app_settings)) -> SQLiteContactRepo:
    return SQLiteContactRepo(settings.db_path)


def get_newsletter_repo(
    settings: Settings = Depends(get_app_settings),
) -> SQLiteNewsletterSignupRepo:
    return SQLiteNewsletterSignupRepo(settings.db_path)


def get_site_config_repo(settings: Settings = Depends(get_app_settings)) -> SQLiteSiteConfigRepo:
    return SQLiteSiteConfigRepo(settings.db_path)


# --- Component config ---
def get_newsletter_config(rules: Rules = Depends(get_rules)) -> NewsletterConfig:
    nl = rules.newsletter
    return NewsletterConfig(
        duplicate_policy=nl.duplicate_policy,
        allowed_email_domains=tuple(nl.allowed_email_domains),
        signup_tag=nl.signup_tag,
    )


def _bounds(rule: RangeRule) -> LimitBounds:
    return LimitBounds(default=rule.default, min=rule.min, max=rule.max)


def get_events_bounds(rules: Rules = Depends(get_rules)) -> LimitBounds:
    return _bounds(rules.pagination.events_limit)


def get_upcoming_bounds(rules: Rules = Depends(get_rules)) -> LimitBounds:
    return _bounds(rules.pagination.upcoming_limit)
