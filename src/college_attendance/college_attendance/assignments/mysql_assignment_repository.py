from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..academics.model import Batch, Course
from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_where, db_cursor, fetchall, fetchone
from ..users.model import User
from .model import Assignment, AssignmentDetail
from .repository import AssignmentRepository

_DETAIL_SELECT = """
    SELECT
        a.assignment_id, a.batch_id, a.course_id, a.faculty_id, a.created_at, a.updated_at,
        b.name AS batch_name, b.year AS batch_year, b.department AS batch_department, b.semester AS batch_semester,
        c.name AS course_name, c.code AS course_code, c.credits AS course_credits,
        u.full_name AS faculty_name, u.email AS faculty_email, u.role AS faculty_role
    FROM batch_course_assignments a
    LEFT JOIN batches b ON b.batch_id = a.batch_id
    LEFT JOIN courses c ON c.course_id = a.course_id
    LEFT JOIN users u ON u.user_id = a.faculty_id
"""


def _to_assignment(r: dict) -> Assignment:
    return Assignment(
        assignment_id=int(r["assignment_id"]),
        batch_id=int(r["batch_id"]),
        course_id=int(r["course_id"]),
        faculty_id=int(r["faculty_id"]),
        created_at=r["created_at"],
        updated_at=r["updated_at"],
    )


def _to_detail(r: dict) -> AssignmentDetail:
    batch = None
    if r.get("batch_name") is not None:
        batch = Batch(
            batch_id=int(r["batch_id"]),
            name=r["batch_name"],
            year=r.get("batch_year"),
            department=r.get("batch_department"),
            semester=r.get("batch_semester"),
        )
    course = None
    if r.get("course_name") is not None:
        course = Course(
            course_id=int(r["course_id"]),
            name=r["course_name"],
            code=r["course_code"],
            credits=r.get("course_credits"),
        )
    faculty = None
    if r.get("faculty_name") is not None:
        faculty = User(
            user_id=int(r["faculty_id"]),
            full_name=r["faculty_name"],
            email=r["faculty_email"],
            role=Role(r["faculty_role"]),
        )
    return AssignmentDetail(assignment=_to_assignment(r), batch=batch, course=course, faculty=faculty)


class MySQLAssignmentRepository(AssignmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, assignment_id: int) -> Optional[Assignment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT assignment_id, batch_id, course_id, faculty_id, created_at, updated_at
                FROM batch_course_assignments
                WHERE assignment_id=%s
                """,
                (int(assignment_id),),
            )
            r = fetchone(cur)
            return _to_assignment(r) if r else None

    def get_by_pair(self, *, batch_id: int, course_id: int) -> Optional[Assignment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT assignment_id, batch_id, course_id, faculty_id, created_at, updated_at
                FROM batch_course_assignments
                WHERE batch_id=%s AND course_id=%s
                """,
                (int(batch_id), int(course_id)),
            )
            r = fetchone(cur)
            return _to_assignment(r) if r else None

    def create(self, *, batch_id: int, course_id: int, faculty_id: int, created_at: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO batch_course_assignments(batch_id, course_id, faculty_id, created_at, updated_at)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(batch_id), int(course_id), int(faculty_id), created_at, created_at),
            )
            return int(cur.lastrowid)

    def update_faculty(self, *, assignment_id: int, faculty_id: int, updated_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE batch_course_assignments SET faculty_id=%s, updated_at=%s WHERE assignment_id=%s",
                (int(faculty_id), updated_at, int(assignment_id)),
            )
            return cur.rowcount > 0

    def delete(self, assignment_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM batch_course_assignments WHERE assignment_id=%s", (int(assignment_id),))
            return cur.rowcount > 0

    def get_detail(self, assignment_id: int) -> Optional[AssignmentDetail]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_DETAIL_SELECT + " WHERE a.assignment_id=%s", (int(assignment_id),))
            r = fetchone(cur)
            return _to_detail(r) if r else None

    def list_for_faculty(self, faculty_id: int) -> Sequence[AssignmentDetail]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _DETAIL_SELECT + " WHERE a.faculty_id=%s ORDER BY b.name ASC, c.name ASC, a.assignment_id ASC",
                (int(faculty_id),),
            )
            return [_to_detail(r) for r in fetchall(cur)]

    def list_details(
        self,
        *,
        batch_id: Optional[int] = None,
        course_id: Optional[int] = None,
        faculty_id: Optional[int] = None,
    ) -> Sequence[AssignmentDetail]:
        where, params = build_where(
            {
                "a.batch_id =": batch_id,
                "a.course_id =": course_id,
                "a.faculty_id =": faculty_id,
            }
        )
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _DETAIL_SELECT + f" WHERE {where} ORDER BY a.created_at DESC, a.assignment_id DESC",
                tuple(params),
            )
            return [_to_detail(r) for r in fetchall(cur)]
