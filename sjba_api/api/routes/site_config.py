"""
Site config endpoint.

GET /v1/site-config?keys=a,b
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query

from sjba_api.adapters.sqlite_db import SQLiteSiteConfigRepo
from sjba_api.api.deps import get_site_config_repo
from sjba_api.api.schemas import ok
from sjba_api.components.site_config import get_config

router = APIRouter()


@router.get("")
def read_site_config(
    keys: str | None = Query(None),
    repo: SQLiteSiteConfigRepo = Depends(get_site_config_repo),
) -> dict[str, Any]:
    entries = get_config(keys, repo=repo)
    return ok([e.to_json() for e in entries])
