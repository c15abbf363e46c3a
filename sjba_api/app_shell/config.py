import logging
import os
from pathlib import Path

from sjba_api.rules.models import Rules

logger = logging.getLogger(__name__)


class ConfigError(RuntimeError):
    """Startup configuration is unusable."""


def validate_ops_rules(rules: Rules, migrations_dir: Path) -> None:
    """
    Validate operational requirements before startup.
    Raises ConfigError listing every problem found.
    """
    ops = rules.ops
    problems: list[str] = []

    missing = [env_var for env_var in ops.required_env if not os.environ.get(env_var)]
    if missing:
        problems.append(f"Missing required environment variables: {', '.join(missing)}")

    if ops.auto_migrate and not migrations_dir.is_dir():
        problems.append(f"Migrations directory not found: {migrations_dir}")

    if problems:
        raise ConfigError("; ".join(problems))

    logger.info("Configuration validated")
