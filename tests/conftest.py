from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from types import SimpleNamespace
from typing import Iterable, Optional

import pytest

from src.college_attendance.college_attendance.academics.model import Batch, Course
from src.college_attendance.college_attendance.assignments.model import Assignment, AssignmentDetail
from src.college_attendance.college_attendance.attendance.model import (
    AttendanceRecord,
    StudentAttendanceRow,
)
from src.college_attendance.college_attendance.container import wire
from src.college_attendance.college_attendance.core.enums import Role
from src.college_attendance.college_attendance.core.exceptions import DuplicateKeyError
from src.college_attendance.college_attendance.users.model import User

ADMIN_ID = 1
F1_ID = 2
F2_ID = 3
S1_ID = 4
S2_ID = 5
S3_ID = 6
B1_ID = 10
B2_ID = 11
C1_ID = 20
C2_ID = 21


class InMemoryUsers:
    def __init__(self, users: Iterable[User]):
        self._by_id = {u.user_id: u for u in users}

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._by_id.get(int(user_id))

    def get_many(self, user_ids):
        ids = {int(i) for i in user_ids}
        return [u for uid, u in self._by_id.items() if uid in ids]


class InMemoryLookup:
    def __init__(self, items: dict):
        self._items = items

    def get_by_id(self, item_id: int):
        return self._items.get(int(item_id))


class InMemoryAssignments:
    """Mimics batch_course_assignments, including UNIQUE(batch_id, course_id)."""

    def __init__(self, users: InMemoryUsers, batches: InMemoryLookup, courses: InMemoryLookup):
        self._users = users
        self._batches = batches
        self._courses = courses
        self.rows: dict[int, Assignment] = {}
        self._next_id = 1

    def get_by_id(self, assignment_id):
        return self.rows.get(int(assignment_id))

    def get_by_pair(self, *, batch_id, course_id):
        for a in self.rows.values():
            if a.batch_id == batch_id and a.course_id == course_id:
                return a
        return None

    def create(self, *, batch_id, course_id, faculty_id, created_at):
        if self.get_by_pair(batch_id=batch_id, course_id=course_id):
            raise DuplicateKeyError("Duplicate entry for key 'uq_assignment_batch_course'")
        aid = self._next_id
        self._next_id += 1
        self.rows[aid] = Assignment(
            assignment_id=aid,
            batch_id=batch_id,
            course_id=course_id,
            faculty_id=faculty_id,
            created_at=created_at,
            updated_at=created_at,
        )
        return aid

    def update_faculty(self, *, assignment_id, faculty_id, updated_at):
        a = self.rows.get(int(assignment_id))
        if not a:
            return False
        self.rows[a.assignment_id] = replace(a, faculty_id=faculty_id, updated_at=updated_at)
        return True

    def delete(self, assignment_id):
        return self.rows.pop(int(assignment_id), None) is not None

    def _detail(self, a: Assignment) -> AssignmentDetail:
        return AssignmentDetail(
            assignment=a,
            batch=self._batches.get_by_id(a.batch_id),
            course=self._courses.get_by_id(a.course_id),
            faculty=self._users.get_by_id(a.faculty_id),
        )

    def get_detail(self, assignment_id):
        a = self.rows.get(int(assignment_id))
        return self._detail(a) if a else None

    def list_for_faculty(self, faculty_id):
        items = [self._detail(a) for a in self.rows.values() if a.faculty_id == faculty_id]
        items.sort(key=lambda d: (d.batch.name, d.course.name))
        return items

    def list_details(self, *, batch_id=None, course_id=None, faculty_id=None):
        items = [
            a
            for a in self.rows.values()
            if (batch_id is None or a.batch_id == batch_id)
            and (course_id is None or a.course_id == course_id)
            and (faculty_id is None or a.faculty_id == faculty_id)
        ]
        items.sort(key=lambda a: (a.created_at, a.assignment_id), reverse=True)
        return [self._detail(a) for a in items]


class InMemoryAttendance:
    """Mimics attendance_records + attendance_entries, including
    UNIQUE(batch_id, course_id, attendance_date)."""

    def __init__(self, users: InMemoryUsers, batches: InMemoryLookup, courses: InMemoryLookup):
        self._users = users
        self._batches = batches
        self._courses = courses
        self.rows: dict[int, AttendanceRecord] = {}
        self._next_id = 1

    def _with_students(self, entries):
        return tuple(replace(e, student=self._users.get_by_id(e.student_id)) for e in entries)

    def get_by_id(self, attendance_id):
        return self.rows.get(int(attendance_id))

    def get_by_key(self, *, batch_id, course_id, attendance_date):
        for r in self.rows.values():
            if (r.batch_id, r.course_id, r.attendance_date) == (batch_id, course_id, attendance_date):
                return r
        return None

    def create(self, *, batch_id, course_id, faculty_id, attendance_date, entries, created_at):
        if self.get_by_key(batch_id=batch_id, course_id=course_id, attendance_date=attendance_date):
            raise DuplicateKeyError("Duplicate entry for key 'uq_attendance_batch_course_date'")
        rid = self._next_id
        self._next_id += 1
        self.rows[rid] = AttendanceRecord(
            attendance_id=rid,
            batch_id=batch_id,
            course_id=course_id,
            faculty_id=faculty_id,
            attendance_date=attendance_date,
            entries=self._with_students(entries),
            created_at=created_at,
            updated_at=created_at,
        )
        return rid

    def replace_entries(self, *, attendance_id, entries, updated_at):
        r = self.rows.get(int(attendance_id))
        if not r:
            return False
        self.rows[r.attendance_id] = replace(r, entries=self._with_students(entries), updated_at=updated_at)
        return True

    def delete(self, attendance_id):
        return self.rows.pop(int(attendance_id), None) is not None

    def _matches(self, r, batch_id, course_id, faculty_id, start_date, end_date):
        return (
            (batch_id is None or r.batch_id == batch_id)
            and (course_id is None or r.course_id == course_id)
            and (faculty_id is None or r.faculty_id == faculty_id)
            and (start_date is None or r.attendance_date >= start_date)
            and (end_date is None or r.attendance_date <= end_date)
        )

    def _sorted(self, rows):
        return sorted(rows, key=lambda r: (r.attendance_date, r.attendance_id), reverse=True)

    def list_records(self, *, batch_id=None, course_id=None, faculty_id=None, start_date=None, end_date=None):
        rows = [r for r in self.rows.values() if self._matches(r, batch_id, course_id, faculty_id, start_date, end_date)]
        return [
            replace(
                r,
                batch=self._batches.get_by_id(r.batch_id),
                course=self._courses.get_by_id(r.course_id),
                faculty=self._users.get_by_id(r.faculty_id),
            )
            for r in self._sorted(rows)
        ]

    def list_for_student(self, *, student_id, course_id=None, start_date=None, end_date=None):
        out = []
        for r in self._sorted(self.rows.values()):
            if not self._matches(r, None, course_id, None, start_date, end_date):
                continue
            own = [e for e in r.entries if e.student_id == student_id]
            if not own:
                continue
            out.append(
                StudentAttendanceRow(
                    attendance_id=r.attendance_id,
                    attendance_date=r.attendance_date,
                    status=own[0].status,
                    remark=own[0].remark,
                    batch=self._batches.get_by_id(r.batch_id),
                    course=self._courses.get_by_id(r.course_id),
                    faculty=self._users.get_by_id(r.faculty_id),
                    created_at=r.created_at,
                )
            )
        return out


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2025, 11, 9, 10, 30, 0)


@pytest.fixture
def repos():
    users = InMemoryUsers(
        [
            User(user_id=ADMIN_ID, full_name="Admin User", email="admin@test.com", role=Role.ADMIN),
            User(user_id=F1_ID, full_name="Faculty One", email="faculty1@test.com", role=Role.TEACHER),
            User(user_id=F2_ID, full_name="Faculty Two", email="faculty2@test.com", role=Role.TEACHER),
            User(user_id=S1_ID, full_name="Student One", email="s1@test.com", role=Role.STUDENT, roll_number="E0324001"),
            User(user_id=S2_ID, full_name="Student Two", email="s2@test.com", role=Role.STUDENT, roll_number="E0324002"),
            User(user_id=S3_ID, full_name="Student Three", email="s3@test.com", role=Role.STUDENT),
        ]
    )
    batches = InMemoryLookup(
        {
            B1_ID: Batch(batch_id=B1_ID, name="CSE 2024 A", year=2024, department="CSE", semester=3),
            B2_ID: Batch(batch_id=B2_ID, name="AIDS 2024 B", year=2024, department="AIDS", semester=3),
        }
    )
    courses = InMemoryLookup(
        {
            C1_ID: Course(course_id=C1_ID, name="Operating Systems", code="CS301", credits=4),
            C2_ID: Course(course_id=C2_ID, name="Data Structures", code="CS201", credits=3),
        }
    )
    return SimpleNamespace(
        users=users,
        batches=batches,
        courses=courses,
        assignments=InMemoryAssignments(users, batches, courses),
        attendance=InMemoryAttendance(users, batches, courses),
    )


def _build(repos, *, allow_update: bool = False):
    return wire(
        users_repo=repos.users,
        batches_repo=repos.batches,
        courses_repo=repos.courses,
        assignments_repo=repos.assignments,
        attendance_repo=repos.attendance,
        allow_attendance_update=allow_update,
    )


@pytest.fixture
def container(repos):
    return _build(repos)


@pytest.fixture
def updating_container(repos):
    return _build(repos, allow_update=True)


@pytest.fixture
def assigned(repos, fixed_now):
    """F1 owns (B1, C1)."""

    repos.assignments.create(batch_id=B1_ID, course_id=C1_ID, faculty_id=F1_ID, created_at=fixed_now)
    return repos


@pytest.fixture
def app(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    from src.college_attendance.college_attendance.main import create_app

    return create_app(container=container)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login_as(client):
    def _login(user_id: int, role: Role) -> None:
        with client.session_transaction() as sess:
            sess["user_id"] = user_id
            sess["role"] = role.value

    return _login
