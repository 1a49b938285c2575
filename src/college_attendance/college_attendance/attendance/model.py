from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..academics.model import Batch, Course
from ..core.enums import AttendanceStatus
from ..users.model import User


@dataclass(frozen=True)
class AttendanceEntry:
    """One student's status inside a ledger entry."""

    student_id: int
    status: AttendanceStatus
    remark: Optional[str] = None
    student: Optional[User] = None

    def to_dict(self) -> dict:
        return {
            "studentId": self.student_id,
            "student": self.student.summary() if self.student else None,
            "status": self.status.value,
            "remark": self.remark or "",
        }


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one day's attendance for one batch-course pair.

    `faculty_id` is whoever recorded it and is never rewritten on reassignment.
    batch/course/faculty are only filled by list queries.
    """

    attendance_id: int
    batch_id: int
    course_id: int
    faculty_id: int
    attendance_date: date
    entries: tuple[AttendanceEntry, ...]
    created_at: datetime
    updated_at: datetime
    batch: Optional[Batch] = None
    course: Optional[Course] = None
    faculty: Optional[User] = None

    def conflict_summary(self) -> dict:
        return {
            "id": self.attendance_id,
            "date": self.attendance_date.isoformat(),
            "recordCount": len(self.entries),
        }

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "batchId": self.batch_id,
            "courseId": self.course_id,
            "facultyId": self.faculty_id,
            "batch": self.batch.summary() if self.batch else None,
            "course": self.course.summary() if self.course else None,
            "faculty": self.faculty.summary() if self.faculty else None,
            "date": self.attendance_date.isoformat(),
            "records": [e.to_dict() for e in self.entries],
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }


@dataclass(frozen=True)
class StudentAttendanceRow:
    """Read-model for the student view: the caller's own entry only."""

    attendance_id: int
    attendance_date: date
    status: AttendanceStatus
    remark: Optional[str]
    batch: Optional[Batch]
    course: Optional[Course]
    faculty: Optional[User]
    created_at: datetime

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "date": self.attendance_date.isoformat(),
            "status": self.status.value,
            "remark": self.remark or "",
            "batch": self.batch.summary() if self.batch else None,
            "course": self.course.summary() if self.course else None,
            "faculty": self.faculty.summary() if self.faculty else None,
            "createdAt": self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class MarkResult:
    record: AttendanceRecord
    created: bool
