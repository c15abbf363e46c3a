"""
Site config component ports.
"""

from __future__ import annotations

from typing import Protocol

from sjba_api.domain.entities import SiteConfigEntry


class SiteConfigRepoPort(Protocol):
    def get_many(self, keys: list[str]) -> list[SiteConfigEntry]:
        """Entries for the keys that exist, ordered by key."""
        ...

    def set(self, key: str, value: str | None) -> SiteConfigEntry:
        ...
