from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Sequence

from ..assignments.service import AssignmentService
from ..common.datetime_utils import DateLike, format_date, normalize_date, normalize_range, now_local
from ..common.validators import id_error, optional_text, parse_id, parse_optional_id, require_ids
from ..core.constants import DEFAULT_ALLOW_ATTENDANCE_UPDATE, REMARK_MAX_LENGTH
from ..core.enums import AttendanceStatus, Role
from ..core.exceptions import ConflictError, DuplicateKeyError, NotFoundError, ValidationError
from ..users.repository import UserRepository
from .model import AttendanceEntry, AttendanceRecord, MarkResult, StudentAttendanceRow
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

_STATUSES = {s.value for s in AttendanceStatus}


def parse_entries(records: Any) -> list[AttendanceEntry]:
    """Validate the submitted `records` list, collecting every problem.

    Raises ValidationError listing one message per offending row so a client
    can fix the whole sheet in one round trip.
    """

    if not isinstance(records, list):
        raise ValidationError(["Records must be an array"], message="Invalid attendance records")
    if not records:
        raise ValidationError(["Records array cannot be empty"], message="Invalid attendance records")

    errors: list[str] = []
    entries: list[AttendanceEntry] = []
    seen: set[int] = set()

    for index, row in enumerate(records):
        if not isinstance(row, dict):
            errors.append(f"Record {index}: must be an object")
            continue

        student_id = row.get("studentId")
        status = row.get("status")
        row_ok = True

        err = id_error(student_id, "studentId")
        if err:
            errors.append(f"Record {index}: {err[0].lower() + err[1:]}")
            row_ok = False
        elif int(student_id) in seen:
            errors.append(f"Record {index}: duplicate studentId {int(student_id)}")
            row_ok = False

        if status is None or status == "":
            errors.append(f"Record {index}: status is required")
            row_ok = False
        elif not isinstance(status, str) or status not in _STATUSES:
            errors.append(f"Record {index}: invalid status value")
            row_ok = False

        remark = optional_text(row.get("remark"))
        if remark is not None and len(remark) > REMARK_MAX_LENGTH:
            errors.append(f"Record {index}: remark is too long")
            row_ok = False

        if row_ok:
            seen.add(int(student_id))
            entries.append(
                AttendanceEntry(
                    student_id=int(student_id),
                    status=AttendanceStatus(status),
                    remark=remark,
                )
            )

    if errors:
        raise ValidationError(errors, message="Invalid attendance records")
    return entries


class AttendanceService:
    """Use cases of the attendance ledger (one record per batch-course-day)."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        assignments: AssignmentService,
        users: UserRepository,
        *,
        allow_update: bool = DEFAULT_ALLOW_ATTENDANCE_UPDATE,
        clock: Callable = now_local,
    ):
        self._attendance = attendance
        self._assignments = assignments
        self._users = users
        self._allow_update = bool(allow_update)
        self._clock = clock

    @property
    def allow_update(self) -> bool:
        return self._allow_update

    def _check_students(self, entries: Sequence[AttendanceEntry]) -> None:
        found = {u.user_id for u in self._users.get_many(e.student_id for e in entries) if u.role == Role.STUDENT}
        errors = [
            f"Record {index}: student {e.student_id} not found"
            for index, e in enumerate(entries)
            if e.student_id not in found
        ]
        if errors:
            raise ValidationError(errors, message="Invalid attendance records")

    def _conflict(self, existing: AttendanceRecord) -> ConflictError:
        return ConflictError(
            "Attendance already exists for this batch-course-date combination",
            existing={"existingAttendance": existing.conflict_summary()},
        )

    def mark_attendance(
        self,
        *,
        batch_id: Any,
        course_id: Any,
        date: Any,
        records: Any,
        faculty_id: int,
    ) -> MarkResult:
        errors: list[str] = []
        ids: dict[str, int] = {}
        try:
            ids = require_ids(batchId=batch_id, courseId=course_id)
        except ValidationError as e:
            errors.extend(e.errors)
        attendance_date = None
        try:
            attendance_date = normalize_date(date)
        except ValidationError as e:
            errors.extend(e.errors)
        entries: list[AttendanceEntry] = []
        try:
            entries = parse_entries(records)
        except ValidationError as e:
            errors.extend(e.errors)
        if errors:
            raise ValidationError(errors)

        self._check_students(entries)

        batch_id, course_id = ids["batchId"], ids["courseId"]
        self._assignments.require_assigned(batch_id=batch_id, course_id=course_id, faculty_id=faculty_id)

        existing = self._attendance.get_by_key(batch_id=batch_id, course_id=course_id, attendance_date=attendance_date)
        if existing is None:
            try:
                attendance_id = self._attendance.create(
                    batch_id=batch_id,
                    course_id=course_id,
                    faculty_id=int(faculty_id),
                    attendance_date=attendance_date,
                    entries=entries,
                    created_at=self._clock(),
                )
            except DuplicateKeyError:
                # Lost a race against a concurrent submission for the same day.
                existing = self._attendance.get_by_key(
                    batch_id=batch_id, course_id=course_id, attendance_date=attendance_date
                )
                if existing is None:
                    raise
            else:
                logger.info(
                    "Attendance %s created for batch %s course %s on %s (%d students)",
                    attendance_id,
                    batch_id,
                    course_id,
                    format_date(attendance_date),
                    len(entries),
                )
                return MarkResult(record=self._get_or_404(attendance_id), created=True)

        if not self._allow_update:
            raise self._conflict(existing)

        self._attendance.replace_entries(
            attendance_id=existing.attendance_id,
            entries=entries,
            updated_at=self._clock(),
        )
        logger.info("Attendance %s updated in place", existing.attendance_id)
        return MarkResult(record=self._get_or_404(existing.attendance_id), created=False)

    def list_for_batch_course(
        self,
        *,
        batch_id: Any,
        course_id: Any,
        faculty_id: int,
        start: Optional[DateLike] = None,
        end: Optional[DateLike] = None,
    ) -> Sequence[AttendanceRecord]:
        ids = require_ids(batchId=batch_id, courseId=course_id)
        start_d, end_d = normalize_range(start, end)
        self._assignments.require_assigned(batch_id=ids["batchId"], course_id=ids["courseId"], faculty_id=faculty_id)
        return self._attendance.list_records(
            batch_id=ids["batchId"],
            course_id=ids["courseId"],
            start_date=start_d,
            end_date=end_d,
        )

    def list_for_student(
        self,
        *,
        student_id: int,
        start: Optional[DateLike] = None,
        end: Optional[DateLike] = None,
        course_id: Any = None,
    ) -> Sequence[StudentAttendanceRow]:
        start_d, end_d = normalize_range(start, end)
        return self._attendance.list_for_student(
            student_id=int(student_id),
            course_id=parse_optional_id(course_id, "courseId"),
            start_date=start_d,
            end_date=end_d,
        )

    def list_all(
        self,
        *,
        batch_id: Any = None,
        course_id: Any = None,
        faculty_id: Any = None,
        start: Optional[DateLike] = None,
        end: Optional[DateLike] = None,
    ) -> Sequence[AttendanceRecord]:
        start_d, end_d = normalize_range(start, end)
        return self._attendance.list_records(
            batch_id=parse_optional_id(batch_id, "batchId"),
            course_id=parse_optional_id(course_id, "courseId"),
            faculty_id=parse_optional_id(faculty_id, "facultyId"),
            start_date=start_d,
            end_date=end_d,
        )

    def delete_attendance(self, *, attendance_id: Any) -> None:
        attendance_id = parse_id(attendance_id, "attendanceId")
        if not self._attendance.delete(attendance_id):
            raise NotFoundError("Attendance record not found")
        logger.info("Attendance %s deleted", attendance_id)

    def _get_or_404(self, attendance_id: int) -> AttendanceRecord:
        record = self._attendance.get_by_id(attendance_id)
        if not record:
            raise NotFoundError("Attendance record not found")
        return record
