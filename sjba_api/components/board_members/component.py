"""
Board members component.

Read-mostly roster of the organization's board. Writes are validated
through the domain parsers and go straight to the repository.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any
from uuid import UUID

from sjba_api.components.board_members.ports import BoardMemberRepoPort
from sjba_api.domain import validators
from sjba_api.domain.entities import BoardMember
from sjba_api.domain.errors import NotFoundError

logger = logging.getLogger(__name__)

NOT_FOUND_CODE = "BOARD_MEMBER_NOT_FOUND"


def list_board_members(*, repo: BoardMemberRepoPort) -> list[BoardMember]:
    return repo.list_all()


def get_board_member(member_id: str | UUID, *, repo: BoardMemberRepoPort) -> BoardMember:
    """
    Look up one board member.

    Raises:
        ValidationFailed: ``member_id`` is not a UUID
        NotFoundError: no such member (code BOARD_MEMBER_NOT_FOUND)
    """
    uid = validators.parse_uuid(member_id, "Invalid board member ID")
    member = repo.get_by_id(uid)
    if member is None:
        raise NotFoundError("Board member not found", code=NOT_FOUND_CODE)
    return member


def create_board_member(data: Mapping[str, Any], *, repo: BoardMemberRepoPort) -> BoardMember:
    member = validators.parse_board_member(data)
    created = repo.create(member)
    logger.info("Created board member %s (%s)", created.id, created.position)
    return created


def update_board_member(
    member_id: str | UUID,
    data: Mapping[str, Any],
    *,
    repo: BoardMemberRepoPort,
) -> BoardMember:
    current = get_board_member(member_id, repo=repo)
    member = validators.parse_board_member({**data, "id": current.id})
    return repo.update(member)


def delete_board_member(member_id: str | UUID, *, repo: BoardMemberRepoPort) -> None:
    uid = validators.parse_uuid(member_id, "Invalid board member ID")
    if not repo.delete(uid):
        raise NotFoundError("Board member not found", code=NOT_FOUND_CODE)
    logger.info("Deleted board member %s", uid)
