from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from .model import AttendanceEntry, AttendanceRecord, StudentAttendanceRow


class AttendanceRepository(Protocol):
    """Storage for the attendance ledger.

    Implementations must enforce uniqueness of (batch_id, course_id,
    attendance_date) and raise DuplicateKeyError from `create` when it is
    violated. Header and entries are written atomically.
    """

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_by_key(self, *, batch_id: int, course_id: int, attendance_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create(
        self,
        *,
        batch_id: int,
        course_id: int,
        faculty_id: int,
        attendance_date: date,
        entries: Sequence[AttendanceEntry],
        created_at: datetime,
    ) -> int:
        raise NotImplementedError

    def replace_entries(
        self,
        *,
        attendance_id: int,
        entries: Sequence[AttendanceEntry],
        updated_at: datetime,
    ) -> bool:
        raise NotImplementedError

    def delete(self, attendance_id: int) -> bool:
        raise NotImplementedError

    def list_records(
        self,
        *,
        batch_id: Optional[int] = None,
        course_id: Optional[int] = None,
        faculty_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        """Populated records, newest date first."""

        raise NotImplementedError

    def list_for_student(
        self,
        *,
        student_id: int,
        course_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[StudentAttendanceRow]:
        """Only the given student's entries, newest date first."""

        raise NotImplementedError
