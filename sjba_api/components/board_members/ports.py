"""
Board members component ports.
"""

from __future__ import annotations

from typing import Protocol
from uuid import UUID

from sjba_api.domain.entities import BoardMember


class BoardMemberRepoPort(Protocol):
    """Listing order: order_index, then full_name."""

    def list_all(self) -> list[BoardMember]:
        ...

    def get_by_id(self, member_id: UUID) -> BoardMember | None:
        ...

    def create(self, member: BoardMember) -> BoardMember:
        ...

    def update(self, member: BoardMember) -> BoardMember:
        ...

    def delete(self, member_id: UUID) -> bool:
        ...
