"""
Member and semester endpoints.

- GET|POST /v1/members
- GET|POST /v1/semesters
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, status

from sjba_api.adapters.sqlite_db import SQLiteMemberRepo, SQLiteSemesterRepo
from sjba_api.api.deps import get_member_repo, get_semester_repo
from sjba_api.api.schemas import MemberRequest, SemesterRequest, ok
from sjba_api.components.roster import (
    create_member,
    create_semester,
    list_members,
    list_semesters,
)

members_router = APIRouter()
semesters_router = APIRouter()


# --- Members ---


@members_router.get("")
def read_members(repo: SQLiteMemberRepo = Depends(get_member_repo)) -> dict[str, Any]:
    members = list_members(repo=repo)
    return ok([m.to_json() for m in members], count=len(members))


@members_router.post("", status_code=status.HTTP_201_CREATED)
def add_member(
    body: MemberRequest,
    repo: SQLiteMemberRepo = Depends(get_member_repo),
    semesters: SQLiteSemesterRepo = Depends(get_semester_repo),
) -> dict[str, Any]:
    member = create_member(body.payload(), repo=repo, semesters=semesters)
    return ok(member.to_json())


# --- Semesters ---


@semesters_router.get("")
def read_semesters(repo: SQLiteSemesterRepo = Depends(get_semester_repo)) -> dict[str, Any]:
    semesters = list_semesters(repo=repo)
    return ok([s.to_json() for s in semesters], count=len(semesters))


@semesters_router.post("", status_code=status.HTTP_201_CREATED)
def add_semester(
    body: SemesterRequest,
    repo: SQLiteSemesterRepo = Depends(get_semester_repo),
) -> dict[str, Any]:
    semester = create_semester(body.payload(), repo=repo)
    return ok(semester.to_json())
