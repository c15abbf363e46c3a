"""
Contact component ports.
"""

from __future__ import annotations

from typing import Protocol

from sjba_api.domain.entities import ContactSubmission


class ContactRepoPort(Protocol):
    def create(self, submission: ContactSubmission) -> ContactSubmission:
        """Raises StoreError when the row cannot be written."""
        ...
