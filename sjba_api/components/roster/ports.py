"""
Roster component ports.
"""

from __future__ import annotations

from typing import Protocol

from sjba_api.domain.entities import Member, Semester


class SemesterRepoPort(Protocol):
    def list_all(self) -> list[Semester]:
        ...

    def get_by_name(self, name: str) -> Semester | None:
        ...

    def create(self, semester: Semester) -> Semester:
        """Raises DuplicateError when the name is taken."""
        ...


class MemberRepoPort(Protocol):
    def list_all(self) -> list[Member]:
        ...

    def create(self, member: Member) -> Member:
        ...
