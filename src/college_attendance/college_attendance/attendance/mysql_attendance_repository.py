from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..academics.model import Batch, Course
from ..core.enums import AttendanceStatus, Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_where, db_cursor, fetchall, fetchone
from ..users.model import User
from .model import AttendanceEntry, AttendanceRecord, StudentAttendanceRow
from .repository import AttendanceRepository

_HEADER_COLUMNS = "ar.attendance_id, ar.batch_id, ar.course_id, ar.faculty_id, ar.attendance_date, ar.created_at, ar.updated_at"

_POPULATED_JOINS = """
    LEFT JOIN batches b ON b.batch_id = ar.batch_id
    LEFT JOIN courses c ON c.course_id = ar.course_id
    LEFT JOIN users f ON f.user_id = ar.faculty_id
"""

_POPULATED_COLUMNS = """
    b.name AS batch_name, b.year AS batch_year, b.department AS batch_department, b.semester AS batch_semester,
    c.name AS course_name, c.code AS course_code, c.credits AS course_credits,
    f.full_name AS faculty_name, f.email AS faculty_email
"""


def _batch(r: dict) -> Optional[Batch]:
    if r.get("batch_name") is None:
        return None
    return Batch(
        batch_id=int(r["batch_id"]),
        name=r["batch_name"],
        year=r.get("batch_year"),
        department=r.get("batch_department"),
        semester=r.get("batch_semester"),
    )


def _course(r: dict) -> Optional[Course]:
    if r.get("course_name") is None:
        return None
    return Course(course_id=int(r["course_id"]), name=r["course_name"], code=r["course_code"], credits=r.get("course_credits"))


def _faculty(r: dict) -> Optional[User]:
    if r.get("faculty_name") is None:
        return None
    return User(user_id=int(r["faculty_id"]), full_name=r["faculty_name"], email=r["faculty_email"], role=Role.TEACHER)


def _entry(r: dict) -> AttendanceEntry:
    student = None
    if r.get("student_name") is not None:
        student = User(
            user_id=int(r["student_id"]),
            full_name=r["student_name"],
            email=r["student_email"],
            role=Role.STUDENT,
            roll_number=r.get("roll_number"),
        )
    return AttendanceEntry(
        student_id=int(r["student_id"]),
        status=AttendanceStatus(r["status"]),
        remark=r.get("remark"),
        student=student,
    )


def _record(r: dict, entries: Sequence[AttendanceEntry], *, populated: bool = False) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        batch_id=int(r["batch_id"]),
        course_id=int(r["course_id"]),
        faculty_id=int(r["faculty_id"]),
        attendance_date=r["attendance_date"],
        entries=tuple(entries),
        created_at=r["created_at"],
        updated_at=r["updated_at"],
        batch=_batch(r) if populated else None,
        course=_course(r) if populated else None,
        faculty=_faculty(r) if populated else None,
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _load_entries(self, cur, attendance_ids: Sequence[int]) -> dict[int, list[AttendanceEntry]]:
        out: dict[int, list[AttendanceEntry]] = {int(i): [] for i in attendance_ids}
        if not out:
            return out
        placeholders = ",".join(["%s"] * len(out))
        cur.execute(
            f"""
            SELECT e.attendance_id, e.student_id, e.status, e.remark,
                   u.full_name AS student_name, u.email AS student_email, u.roll_number
            FROM attendance_entries e
            LEFT JOIN users u ON u.user_id = e.student_id
            WHERE e.attendance_id IN ({placeholders})
            ORDER BY e.attendance_id ASC, e.position ASC
            """,
            tuple(out),
        )
        for r in fetchall(cur):
            out[int(r["attendance_id"])].append(_entry(r))
        return out

    def _insert_entries(self, cur, attendance_id: int, entries: Sequence[AttendanceEntry]) -> None:
        cur.executemany(
            """
            INSERT INTO attendance_entries(attendance_id, student_id, position, status, remark)
            VALUES(%s,%s,%s,%s,%s)
            """,
            [
                (int(attendance_id), int(e.student_id), pos, e.status.value, e.remark)
                for pos, e in enumerate(entries)
            ],
        )

    def _get_one(self, where: str, params: tuple) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_HEADER_COLUMNS} FROM attendance_records ar WHERE {where}", params)
            r = fetchone(cur)
            if not r:
                return None
            entries = self._load_entries(cur, [int(r["attendance_id"])])
            return _record(r, entries[int(r["attendance_id"])])

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        return self._get_one("ar.attendance_id=%s", (int(attendance_id),))

    def get_by_key(self, *, batch_id: int, course_id: int, attendance_date: date) -> Optional[AttendanceRecord]:
        return self._get_one(
            "ar.batch_id=%s AND ar.course_id=%s AND ar.attendance_date=%s",
            (int(batch_id), int(course_id), attendance_date),
        )

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(batch_id, course_id, faculty_id, attendance_date, created_at, updated_at)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(batch_id), int(course_id), int(faculty_id), attendance_date, created_at, created_at),
            )
            attendance_id = int(cur.lastrowid)
            self._insert_entries(cur, attendance_id, entries)
            return attendance_id

    def replace_entries(
        self,
        *,
        attendance_id: int,
        entries: Sequence[AttendanceEntry],
        updated_at: datetime,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE attendance_records SET updated_at=%s WHERE attendance_id=%s",
                (updated_at, int(attendance_id)),
            )
            if cur.rowcount == 0:
                return False
            cur.execute("DELETE FROM attendance_entries WHERE attendance_id=%s", (int(attendance_id),))
            self._insert_entries(cur, attendance_id, entries)
            return True

    def delete(self, attendance_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_records WHERE attendance_id=%s", (int(attendance_id),))
            return cur.rowcount > 0

    def list_records(
        self,
        *,
        batch_id: Optional[int] = None,
        course_id: Optional[int] = None,
        faculty_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        where, params = build_where(
            {
                "ar.batch_id =": batch_id,
                "ar.course_id =": course_id,
                "ar.faculty_id =": faculty_id,
                "ar.attendance_date >=": start_date,
                "ar.attendance_date <=": end_date,
            }
        )
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_HEADER_COLUMNS}, {_POPULATED_COLUMNS}
                FROM attendance_records ar
                {_POPULATED_JOINS}
                WHERE {where}
                ORDER BY ar.attendance_date DESC, ar.attendance_id DESC
                """,
                tuple(params),
            )
            rows = fetchall(cur)
            entries = self._load_entries(cur, [int(r["attendance_id"]) for r in rows])
            return [_record(r, entries[int(r["attendance_id"])], populated=True) for r in rows]

    def list_for_student(
        self,
        *,
        student_id: int,
        course_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[StudentAttendanceRow]:
        where, params = build_where(
            {
                "e.student_id =": int(student_id),
                "ar.course_id =": course_id,
                "ar.attendance_date >=": start_date,
                "ar.attendance_date <=": end_date,
            }
        )
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_HEADER_COLUMNS}, {_POPULATED_COLUMNS}, e.status, e.remark
                FROM attendance_entries e
                JOIN attendance_records ar ON ar.attendance_id = e.attendance_id
                {_POPULATED_JOINS}
                WHERE {where}
                ORDER BY ar.attendance_date DESC, ar.attendance_id DESC
                """,
                tuple(params),
            )
            return [
                StudentAttendanceRow(
                    attendance_id=int(r["attendance_id"]),
                    attendance_date=r["attendance_date"],
                    status=AttendanceStatus(r["status"]),
                    remark=r.get("remark"),
                    batch=_batch(r),
                    course=_course(r),
                    faculty=_faculty(r),
                    created_at=r["created_at"],
                )
                for r in fetchall(cur)
            ]
