"""
Roster component.

Semesters and the members registered for them. A member must name an
existing semester; semester names are unique.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from sjba_api.components.roster.ports import MemberRepoPort, SemesterRepoPort
from sjba_api.domain import validators
from sjba_api.domain.entities import Member, Semester
from sjba_api.domain.errors import DuplicateError, ValidationFailed

logger = logging.getLogger(__name__)

SEMESTER_EXISTS = "SEMESTER_EXISTS"
INVALID_SEMESTER = "INVALID_SEMESTER"


# --- Semesters ---


def list_semesters(*, repo: SemesterRepoPort) -> list[Semester]:
    return repo.list_all()


def create_semester(data: Mapping[str, Any], *, repo: SemesterRepoPort) -> Semester:
    """
    Create a semester.

    Raises:
        ValidationFailed: name missing or too long
        DuplicateError: name already exists (code SEMESTER_EXISTS), whether
            caught by the lookup or by the unique constraint
    """
    semester = validators.parse_semester(data)
    if repo.get_by_name(semester.semester_name) is not None:
        raise DuplicateError("Semester already exists", code=SEMESTER_EXISTS)
    try:
        created = repo.create(semester)
    except DuplicateError as e:
        raise DuplicateError("Semester already exists", code=SEMESTER_EXISTS) from e
    logger.info("Created semester %s", created.semester_name)
    return created


# --- Members ---


def list_members(*, repo: MemberRepoPort) -> list[Member]:
    return repo.list_all()


def create_member(
    data: Mapping[str, Any],
    *,
    repo: MemberRepoPort,
    semesters: SemesterRepoPort,
) -> Member:
    """
    Register a member for a semester.

    Raises:
        ValidationFailed: bad fields (VALIDATION_ERROR) or unknown semester
            (INVALID_SEMESTER)
    """
    member = validators.parse_member(data)
    if semesters.get_by_name(member.semester) is None:
        raise ValidationFailed(
            [f"Semester '{member.semester}' does not exist"],
            code=INVALID_SEMESTER,
            message="Invalid semester",
        )
    created = repo.create(member)
    logger.info("Registered member %s for %s", created.id, created.semester)
    return created
