import argparse
import logging
import sys
from pathlib import Path
from typing import Any

import yaml

from sjba_api.adapters.sqlite.migrator import SQLiteMigrator
from sjba_api.adapters.sqlite_db import (
    SQLiteBoardMemberRepo,
    SQLiteEventRepo,
    SQLiteSemesterRepo,
    SQLiteSiteConfigRepo,
    SQLiteStorePing,
)
from sjba_api.api.deps import Settings, build_mailing_list, get_settings
from sjba_api.app_shell.logging_setup import configure_logging
from sjba_api.components.board_members import create_board_member
from sjba_api.components.events import create_event
from sjba_api.components.roster import create_semester
from sjba_api.components.site_config import set_config
from sjba_api.domain.errors import ApiError, DuplicateError

logger = logging.getLogger("cli")


def handle_migrate(settings: Settings, args: argparse.Namespace) -> int:
    Path(settings.db_path).parent.mkdir(parents=True, exist_ok=True)
    migrator = SQLiteMigrator(settings.db_path, str(settings.migrations_dir))
    if args.dry_run:
        pending = migrator.pending()
        print(f"{len(pending)} pending migration(s).")
        for name in pending:
            print(f" - {name}")
        return 0
    applied = migrator.run_migrations()
    print(f"Applied {len(applied)} migration(s).")
    return 0


def handle_check(settings: Settings, args: argparse.Namespace) -> int:
    """Ping the record store and the mailing list. Non-zero exit if either fails."""
    failures = 0

    try:
        SQLiteStorePing(settings.db_path).ping()
        print("database: ok")
    except ApiError as e:
        print(f"database: FAILED ({e})")
        failures += 1

    mailing_list = build_mailing_list(settings)
    try:
        mailing_list.ping()
        print("mailing list: ok")
    except ApiError as e:
        print(f"mailing list: FAILED ({e})")
        failures += 1

    return 1 if failures else 0


def handle_set_config(settings: Settings, args: argparse.Namespace) -> int:
    entry = set_config(args.key, args.value, repo=SQLiteSiteConfigRepo(settings.db_path))
    print(f"{entry.key} = {entry.value}")
    return 0


def handle_seed(settings: Settings, args: argparse.Namespace) -> int:
    """
    Load semesters, board members and events from a YAML file.

    Existing semesters are skipped. Any other invalid record stops the run.
    """
    path = Path(args.file)
    if not path.exists():
        logger.error("Seed file %s not found.", path)
        return 1

    with open(path) as f:
        data: dict[str, Any] = yaml.safe_load(f) or {}

    semesters = SQLiteSemesterRepo(settings.db_path)
    for name in data.get("semesters", []):
        try:
            create_semester({"semester_name": name}, repo=semesters)
        except DuplicateError:
            logger.info("Semester %s already exists, skipping", name)

    board = SQLiteBoardMemberRepo(settings.db_path)
    for record in data.get("board_members", []):
        create_board_member(record, repo=board)

    events = SQLiteEventRepo(settings.db_path)
    for record in data.get("events", []):
        create_event(record, repo=events)

    print(
        f"Seeded {len(data.get('semesters', []))} semester(s), "
        f"{len(data.get('board_members', []))} board member(s), "
        f"{len(data.get('events', []))} event(s)."
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="SJBA API CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # migrate
    migrate_parser = subparsers.add_parser("migrate", help="Apply pending SQL migrations")
    migrate_parser.add_argument(
        "--dry-run", action="store_true", help="List pending migrations without applying"
    )

    # check
    subparsers.add_parser("check", help="Test database and mailing-list connectivity")

    # set-config
    config_parser = subparsers.add_parser("set-config", help="Set a site config value")
    config_parser.add_argument("key")
    config_parser.add_argument("value")

    # seed
    seed_parser = subparsers.add_parser("seed", help="Load records from a YAML file")
    seed_parser.add_argument("file", help="Path to seed YAML")

    return parser


HANDLERS = {
    "migrate": handle_migrate,
    "check": handle_check,
    "set-config": handle_set_config,
    "seed": handle_seed,
}


def main(argv: list[str] | None = None, settings: Settings | None = None) -> int:
    configure_logging()
    args = build_parser().parse_args(argv)
    settings = settings or get_settings()
    try:
        return HANDLERS[args.command](settings, args)
    except ApiError as e:
        logger.error("%s failed: [%s] %s (%s)", args.command, e.code, e, e.details)
        return 1
    except RuntimeError as e:
        logger.error("%s failed: %s", args.command, e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
