"""
Board member endpoints (read-only over HTTP).
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from sjba_api.adapters.sqlite_db import SQLiteBoardMemberRepo
from sjba_api.api.deps import get_board_member_repo
from sjba_api.api.schemas import ok
from sjba_api.components.board_members import get_board_member, list_board_members

router = APIRouter()


@router.get("")
def list_members(repo: SQLiteBoardMemberRepo = Depends(get_board_member_repo)) -> dict[str, Any]:
    members = list_board_members(repo=repo)
    return ok([m.to_json() for m in members], count=len(members))


@router.get("/{member_id}")
def read_member(
    member_id: str,
    repo: SQLiteBoardMemberRepo = Depends(get_board_member_repo),
) -> dict[str, Any]:
    return ok(get_board_member(member_id, repo=repo).to_json())
