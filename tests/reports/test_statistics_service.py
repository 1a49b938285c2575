from __future__ import annotations

import csv
import io

import pytest

from src.college_attendance.college_attendance.core.enums import Role
from src.college_attendance.college_attendance.core.exceptions import AuthorizationError, NotFoundError

ADMIN, F1, F2, S1, S2, S3 = 1, 2, 3, 4, 5, 6
B1, C1, C2 = 10, 20, 21


@pytest.fixture
def four_days(container, assigned):
    """S1: P P P A, S2: L A P P, S3 (no roll number): P on the last day only."""

    sheets = {
        "2025-11-03": ("present", "late"),
        "2025-11-04": ("present", "absent"),
        "2025-11-05": ("present", "present"),
        "2025-11-06": ("absent", "present"),
    }
    for day, (s1, s2) in sheets.items():
        records = [{"studentId": S1, "status": s1}, {"studentId": S2, "status": s2}]
        if day == "2025-11-06":
            records.append({"studentId": S3, "status": "present"})
        container.attendance_service.mark_attendance(
            batch_id=B1, course_id=C1, date=day, records=records, faculty_id=F1
        )
    return container


def stats(container, *, user_id=F1, role=Role.TEACHER, course_id=C1):
    return container.report_service.compute_statistics(
        batch_id=B1, course_id=course_id, current_user_id=user_id, current_role=role
    )


def test_counts_and_percentages(four_days):
    report = stats(four_days)

    assert report.total_days == 4
    by_id = {r.student_id: r for r in report.rows}
    s1, s2, s3 = by_id[S1], by_id[S2], by_id[S3]
    assert (s1.total_days, s1.present_count, s1.absent_count, s1.late_count) == (4, 3, 1, 0)
    assert s1.percentage == 75.0
    assert (s2.present_count, s2.absent_count, s2.late_count) == (2, 1, 1)
    assert s2.percentage == 50.0
    assert (s3.total_days, s3.percentage) == (1, 100.0)


def test_rows_sorted_by_roll_number_missing_last(four_days):
    report = stats(four_days, user_id=ADMIN, role=Role.ADMIN)
    assert [r.student_id for r in report.rows] == [S1, S2, S3]


def test_percentage_is_rounded_to_two_decimals(container, assigned):
    for day, status in (("2025-11-03", "present"), ("2025-11-04", "absent"), ("2025-11-05", "late")):
        container.attendance_service.mark_attendance(
            batch_id=B1, course_id=C1, date=day, records=[{"studentId": S1, "status": status}], faculty_id=F1
        )
    assert stats(container).rows[0].percentage == 33.33


def test_to_dict_shape(four_days):
    data = stats(four_days).to_dict()

    assert data["batchId"] == B1
    assert data["totalDays"] == 4
    first = data["students"][0]
    assert first["student"] == {"id": S1, "name": "Student One", "email": "s1@test.com", "rollNumber": "E0324001"}
    assert first["percentage"] == 75.0


def test_other_teacher_and_students_are_denied(four_days):
    with pytest.raises(AuthorizationError):
        stats(four_days, user_id=F2)
    with pytest.raises(AuthorizationError):
        stats(four_days, user_id=S1, role=Role.STUDENT)


def test_pair_without_records_is_not_found(container, assigned):
    with pytest.raises(NotFoundError) as exc:
        stats(container)
    assert exc.value.message == "No attendance records found for this batch-course"


def test_csv_export(four_days):
    svc = four_days.report_service
    payload = svc.export_statistics_csv(stats(four_days))

    assert payload.startswith(b"\xef\xbb\xbf")
    rows = list(csv.DictReader(io.StringIO(payload.decode("utf-8-sig"))))
    assert [r["roll_number"] for r in rows] == ["E0324001", "E0324002", ""]
    assert rows[0]["percentage"] == "75.00"
    assert rows[2]["full_name"] == "Student Three"
