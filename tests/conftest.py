from collections.abc import Iterator
from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from sjba_api.adapters.dev_email import DevEmailAdapter
from sjba_api.adapters.dev_mailing_list import InMemoryMailingList
from sjba_api.adapters.sqlite.migrator import SQLiteMigrator
from sjba_api.api.deps import Settings
from sjba_api.api.main import create_app
from sjba_api.rules.models import Rules

PROJECT_ROOT = Path(__file__).resolve().parents[1]
MIGRATIONS_DIR = PROJECT_ROOT / "migrations"

_ENV_VARS = (
    "SJBA_DB_PATH",
    "SJBA_RULES_PATH",
    "SJBA_MIGRATIONS_DIR",
    "ENVIRONMENT",
    "FRONTEND_URL",
    "MAILCHIMP_API_KEY",
    "MAILCHIMP_SERVER_PREFIX",
    "MAILCHIMP_LIST_ID",
    "SMTP_HOST",
    "SMTP_PORT",
    "SMTP_USER",
    "SMTP_PASS",
    "SMTP_FROM",
    "CONTACT_NOTIFICATION_EMAIL",
)


@pytest.fixture
def db_path(tmp_path: Path) -> str:
    """Temporary SQLite database with every migration applied."""
    path = str(tmp_path / "sjba.db")
    SQLiteMigrator(path, str(MIGRATIONS_DIR)).run_migrations()
    return path


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    return monkeypatch


@pytest.fixture
def settings(db_path: str, clean_env: pytest.MonkeyPatch) -> Settings:
    clean_env.setenv("SJBA_DB_PATH", db_path)
    clean_env.setenv("ENVIRONMENT", "test")
    return Settings()


@pytest.fixture
def rules() -> Rules:
    return Rules()


@pytest.fixture
def mailing_list() -> InMemoryMailingList:
    return InMemoryMailingList()


@pytest.fixture
def email_sender() -> DevEmailAdapter:
    return DevEmailAdapter()


@pytest.fixture
def app(
    settings: Settings,
    rules: Rules,
    mailing_list: InMemoryMailingList,
    email_sender: DevEmailAdapter,
) -> FastAPI:
    return create_app(settings, rules, mailing_list=mailing_list, email_sender=email_sender)


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    """Client with the lifespan running (migrations, startup tracking)."""
    with TestClient(app) as c:
        yield c
