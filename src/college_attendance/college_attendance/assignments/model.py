from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..academics.model import Batch, Course
from ..users.model import User


@dataclass(frozen=True)
class Assignment:
    """Domain entity: the one faculty allowed to act on a (batch, course) pair."""

    assignment_id: int
    batch_id: int
    course_id: int
    faculty_id: int
    created_at: datetime
    updated_at: datetime

    def conflict_summary(self) -> dict:
        return {
            "id": self.assignment_id,
            "facultyId": self.faculty_id,
            "createdAt": self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class AssignmentDetail:
    """Read-model: an assignment populated with batch/course/faculty summaries."""

    assignment: Assignment
    batch: Optional[Batch]
    course: Optional[Course]
    faculty: Optional[User]

    def to_dict(self) -> dict:
        a = self.assignment
        return {
            "id": a.assignment_id,
            "batchId": a.batch_id,
            "courseId": a.course_id,
            "facultyId": a.faculty_id,
            "batch": self.batch.summary() if self.batch else None,
            "course": self.course.summary() if self.course else None,
            "faculty": self.faculty.summary() if self.faculty else None,
            "createdAt": a.created_at.isoformat(),
            "updatedAt": a.updated_at.isoformat(),
        }
