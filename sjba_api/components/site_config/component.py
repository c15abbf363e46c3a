"""
Site config component.

Key/value settings the frontend reads at runtime (banner text, feature
toggles). Lookups name their keys explicitly; there is no "list all".
"""

from __future__ import annotations

import logging

from sjba_api.components.site_config.ports import SiteConfigRepoPort
from sjba_api.domain import validators
from sjba_api.domain.entities import SiteConfigEntry
from sjba_api.domain.errors import ValidationFailed

logger = logging.getLogger(__name__)

MISSING_PARAM = "MISSING_PARAM"
MAX_KEY_LENGTH = 255


def parse_keys(raw: str | None) -> list[str]:
    """
    Split a comma-separated ``keys`` query value.

    Keys are trimmed, empties dropped and repeats collapsed (first
    occurrence wins).

    Raises:
        ValidationFailed: no keys left (code MISSING_PARAM)
    """
    keys: list[str] = []
    for part in (raw or "").split(","):
        key = part.strip()
        if key and key not in keys:
            keys.append(key)
    if not keys:
        message = "Missing required query parameter: keys"
        raise ValidationFailed([message], code=MISSING_PARAM, message=message)
    return keys


def get_config(raw_keys: str | None, *, repo: SiteConfigRepoPort) -> list[SiteConfigEntry]:
    """Entries for the requested keys. Unknown keys are simply absent."""
    return repo.get_many(parse_keys(raw_keys))


def set_config(key: str, value: str | None, *, repo: SiteConfigRepoPort) -> SiteConfigEntry:
    """Insert or replace one entry. Used by the CLI."""
    name = validators.clean_text(key)
    if not name:
        raise ValidationFailed(["Key is required"])
    if len(name) > MAX_KEY_LENGTH:
        raise ValidationFailed([f"Key cannot exceed {MAX_KEY_LENGTH} characters"])
    entry = repo.set(name, value)
    logger.info("Set site config %s", name)
    return entry
