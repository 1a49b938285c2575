from __future__ import annotations

from dataclasses import dataclass

from .academics.mysql_academics_repository import MySQLBatchRepository, MySQLCourseRepository
from .academics.repository import BatchRepository, CourseRepository
from .assignments.mysql_assignment_repository import MySQLAssignmentRepository
from .assignments.repository import AssignmentRepository
from .assignments.service import AssignmentService
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .database.connection import DatabaseConnection
from .reports.service import AttendanceReportService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    batches_repo: BatchRepository
    courses_repo: CourseRepository
    assignments_repo: AssignmentRepository
    attendance_repo: AttendanceRepository

    assignment_service: AssignmentService
    attendance_service: AttendanceService
    report_service: AttendanceReportService


def wire(
    *,
    users_repo: UserRepository,
    batches_repo: BatchRepository,
    courses_repo: CourseRepository,
    assignments_repo: AssignmentRepository,
    attendance_repo: AttendanceRepository,
    allow_attendance_update: bool = False,
) -> Container:
    """Build services on top of any set of repositories (MySQL or in-memory)."""

    assignment_service = AssignmentService(assignments_repo, users_repo, batches_repo, courses_repo)
    attendance_service = AttendanceService(
        attendance_repo,
        assignment_service,
        users_repo,
        allow_update=allow_attendance_update,
    )
    report_service = AttendanceReportService(attendance_repo, assignment_service)

    return Container(
        users_repo=users_repo,
        batches_repo=batches_repo,
        courses_repo=courses_repo,
        assignments_repo=assignments_repo,
        attendance_repo=attendance_repo,
        assignment_service=assignment_service,
        attendance_service=attendance_service,
        report_service=report_service,
    )


def build_container(*, db_config: dict, allow_attendance_update: bool = False) -> Container:
    conn = DatabaseConnection.from_settings(db_config)

    return wire(
        users_repo=MySQLUserRepository(conn),
        batches_repo=MySQLBatchRepository(conn),
        courses_repo=MySQLCourseRepository(conn),
        assignments_repo=MySQLAssignmentRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        allow_attendance_update=allow_attendance_update,
    )
