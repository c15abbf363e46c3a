"""
Board members component.
"""

from sjba_api.components.board_members.component import (
    NOT_FOUND_CODE,
    create_board_member,
    delete_board_member,
    get_board_member,
    list_board_members,
    update_board_member,
)
from sjba_api.components.board_members.ports import BoardMemberRepoPort

__all__ = [
    "list_board_members",
    "get_board_member",
    "create_board_member",
    "update_board_member",
    "delete_board_member",
    "NOT_FOUND_CODE",
    "BoardMemberRepoPort",
]
