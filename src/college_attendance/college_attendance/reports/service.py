from __future__ import annotations

import csv
import io
from dataclasses import dataclass, field
from typing import Any, Optional

from ..assignments.service import AssignmentService
from ..attendance.repository import AttendanceRepository
from ..common.validators import require_ids
from ..core.constants import CSV_ENCODING, PERCENTAGE_DIGITS
from ..core.enums import AttendanceStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError
from ..users.model import User


@dataclass
class StudentStatistics:
    student_id: int
    student: Optional[User] = None
    total_days: int = 0
    present_count: int = 0
    absent_count: int = 0
    late_count: int = 0

    @property
    def percentage(self) -> float:
        if not self.total_days:
            return 0.0
        return round(self.present_count / self.total_days * 100, PERCENTAGE_DIGITS)

    @property
    def roll_number(self) -> Optional[str]:
        return self.student.roll_number if self.student else None

    def to_dict(self) -> dict:
        return {
            "studentId": self.student_id,
            "student": self.student.summary() if self.student else None,
            "totalDays": self.total_days,
            "presentCount": self.present_count,
            "absentCount": self.absent_count,
            "lateCount": self.late_count,
            "percentage": self.percentage,
        }


@dataclass(frozen=True)
class StatisticsReport:
    batch_id: int
    course_id: int
    total_days: int
    rows: list[StudentStatistics] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "batchId": self.batch_id,
            "courseId": self.course_id,
            "totalDays": self.total_days,
            "students": [r.to_dict() for r in self.rows],
        }


CSV_FIELDS = [
    "student_id",
    "roll_number",
    "full_name",
    "total_days",
    "present",
    "absent",
    "late",
    "percentage",
]


class AttendanceReportService:
    """Per-student aggregates over the ledger of one batch-course pair."""

    def __init__(self, attendance: AttendanceRepository, assignments: AssignmentService):
        self._attendance = attendance
        self._assignments = assignments

    def compute_statistics(
        self,
        *,
        batch_id: Any,
        course_id: Any,
        current_user_id: int,
        current_role: Role,
    ) -> StatisticsReport:
        ids = require_ids(batchId=batch_id, courseId=course_id)
        batch_id, course_id = ids["batchId"], ids["courseId"]

        if current_role == Role.TEACHER:
            self._assignments.require_assigned(batch_id=batch_id, course_id=course_id, faculty_id=current_user_id)
        elif current_role != Role.ADMIN:
            raise AuthorizationError("Access denied")

        records = self._attendance.list_records(batch_id=batch_id, course_id=course_id)
        if not records:
            raise NotFoundError("No attendance records found for this batch-course")

        by_student: dict[int, StudentStatistics] = {}
        for record in records:
            for entry in record.entries:
                stats = by_student.get(entry.student_id)
                if stats is None:
                    stats = StudentStatistics(student_id=entry.student_id, student=entry.student)
                    by_student[entry.student_id] = stats
                stats.total_days += 1
                if entry.status == AttendanceStatus.PRESENT:
                    stats.present_count += 1
                elif entry.status == AttendanceStatus.ABSENT:
                    stats.absent_count += 1
                elif entry.status == AttendanceStatus.LATE:
                    stats.late_count += 1

        # Students without a roll number go last.
        rows = sorted(
            by_student.values(),
            key=lambda s: (s.roll_number is None, s.roll_number or "", s.student_id),
        )
        return StatisticsReport(batch_id=batch_id, course_id=course_id, total_days=len(records), rows=rows)

    def export_statistics_csv(self, report: StatisticsReport) -> bytes:
        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=CSV_FIELDS)
        writer.writeheader()
        for s in report.rows:
            writer.writerow(
                {
                    "student_id": s.student_id,
                    "roll_number": s.roll_number or "",
                    "full_name": s.student.full_name if s.student else "",
                    "total_days": s.total_days,
                    "present": s.present_count,
                    "absent": s.absent_count,
                    "late": s.late_count,
                    "percentage": f"{s.percentage:.2f}",
                }
            )
        return out.getvalue().encode(CSV_ENCODING)
