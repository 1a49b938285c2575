from __future__ import annotations

import logging

from flask import Flask, request

from ..common.http import current_user_id, error_response, fail, ok, roles_required
from ..core.enums import Role
from ..core.exceptions import DomainError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.route("/api/faculty/attendance", methods=["POST"], endpoint="mark_attendance")
    @roles_required(Role.TEACHER)
    def mark_attendance():
        body = request.get_json(silent=True) or {}
        try:
            result = service.mark_attendance(
                batch_id=body.get("batchId"),
                course_id=body.get("courseId"),
                date=body.get("date"),
                records=body.get("records"),
                faculty_id=current_user_id(),
            )
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Error marking attendance")
            return fail("Server error marking attendance", 500)

        if result.created:
            return ok(result.record.to_dict(), message="Attendance marked successfully", status=201)
        return ok(result.record.to_dict(), message="Attendance updated successfully")

    @app.route("/api/faculty/attendance/<batch_id>/<course_id>", methods=["GET"], endpoint="faculty_attendance")
    @roles_required(Role.TEACHER)
    def faculty_attendance(batch_id: str, course_id: str):
        try:
            items = service.list_for_batch_course(
                batch_id=batch_id,
                course_id=course_id,
                faculty_id=current_user_id(),
                start=request.args.get("startDate"),
                end=request.args.get("endDate"),
            )
            return ok([r.to_dict() for r in items], count=len(items))
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Error fetching faculty attendance")
            return fail("Server error fetching attendance", 500)

    @app.route("/api/student/attendance", methods=["GET"], endpoint="student_attendance")
    @roles_required(Role.STUDENT)
    def student_attendance():
        try:
            items = service.list_for_student(
                student_id=current_user_id(),
                start=request.args.get("startDate"),
                end=request.args.get("endDate"),
                course_id=request.args.get("courseId"),
            )
            return ok([r.to_dict() for r in items], count=len(items))
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Error fetching student attendance")
            return fail("Server error fetching your attendance", 500)

    @app.route("/api/attendance", methods=["GET"], endpoint="all_attendance")
    @roles_required(Role.ADMIN)
    def all_attendance():
        try:
            items = service.list_all(
                batch_id=request.args.get("batchId"),
                course_id=request.args.get("courseId"),
                faculty_id=request.args.get("facultyId"),
                start=request.args.get("startDate"),
                end=request.args.get("endDate"),
            )
            return ok([r.to_dict() for r in items], count=len(items))
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Error fetching all attendance")
            return fail("Server error fetching attendance", 500)

    @app.route("/api/attendance/<attendance_id>", methods=["DELETE"], endpoint="delete_attendance")
    @roles_required(Role.ADMIN)
    def delete_attendance(attendance_id: str):
        try:
            service.delete_attendance(attendance_id=attendance_id)
            return ok({}, message="Attendance record deleted successfully")
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Error deleting attendance %s", attendance_id)
            return fail("Server error deleting attendance", 500)
