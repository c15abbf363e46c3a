"""
Roster component (members and semesters).
"""

from sjba_api.components.roster.component import (
    INVALID_SEMESTER,
    SEMESTER_EXISTS,
    create_member,
    create_semester,
    list_members,
    list_semesters,
)
from sjba_api.components.roster.ports import MemberRepoPort, SemesterRepoPort

__all__ = [
    "list_semesters",
    "create_semester",
    "list_members",
    "create_member",
    "SEMESTER_EXISTS",
    "INVALID_SEMESTER",
    "MemberRepoPort",
    "SemesterRepoPort",
]
