from __future__ import annotations

from typing import Mapping, Optional, Protocol, Sequence

from ..core.enums import AssignmentStatus
from .model import Assignment, StatusEntry


class AssignmentRepository(Protocol):
    def get(self, assignment_id: str) -> Optional[Assignment]:
        raise NotImplementedError

    def list(self, *, descending: bool = False, limit: Optional[int] = None) -> Sequence[Assignment]:
        raise NotImplementedError

    def list_by_student_status(
        self,
        student_id: str,
        statuses: Sequence[AssignmentStatus],
        *,
        limit: Optional[int] = None,
    ) -> Sequence[Assignment]:
        raise NotImplementedError

    def create(
        self,
        *,
        title: str,
        due_date: str,
        description: str,
        resource_url: str,
        created_at: str,
        status_map: Mapping[str, StatusEntry],
    ) -> str:
        raise NotImplementedError

    def update_details(
        self,
        assignment_id: str,
        *,
        title: str,
        due_date: str,
        description: str,
        resource_url: str,
    ) -> None:
        raise NotImplementedError

    def add_entries(self, assignment_id: str, entries: Mapping[str, StatusEntry]) -> None:
        """Add status map entries without touching the existing ones."""

        raise NotImplementedError

    def replace_status_map(self, assignment_id: str, status_map: Mapping[str, StatusEntry]) -> None:
        raise NotImplementedError

    def delete(self, assignment_id: str) -> None:
        raise NotImplementedError
