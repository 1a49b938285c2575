from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import Assignment, AssignmentDetail


class AssignmentRepository(Protocol):
    """Storage for batch-course-faculty assignments.

    Implementations must enforce uniqueness of (batch_id, course_id) and raise
    DuplicateKeyError from `create` when it is violated.
    """

    def get_by_id(self, assignment_id: int) -> Optional[Assignment]:
        raise NotImplementedError

    def get_by_pair(self, *, batch_id: int, course_id: int) -> Optional[Assignment]:
        raise NotImplementedError

    def create(self, *, batch_id: int, course_id: int, faculty_id: int, created_at: datetime) -> int:
        raise NotImplementedError

    def update_faculty(self, *, assignment_id: int, faculty_id: int, updated_at: datetime) -> bool:
        raise NotImplementedError

    def delete(self, assignment_id: int) -> bool:
        raise NotImplementedError

    def get_detail(self, assignment_id: int) -> Optional[AssignmentDetail]:
        raise NotImplementedError

    def list_for_faculty(self, faculty_id: int) -> Sequence[AssignmentDetail]:
        """Ordered by batch name, then course name."""

        raise NotImplementedError

    def list_details(
        self,
        *,
        batch_id: Optional[int] = None,
        course_id: Optional[int] = None,
        faculty_id: Optional[int] = None,
    ) -> Sequence[AssignmentDetail]:
        """Newest first."""

        raise NotImplementedError
