from __future__ import annotations

import logging

from flask import Flask, request

from ..common.http import current_user_id, error_response, fail, ok, roles_required
from ..core.enums import Role
from ..core.exceptions import DomainError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    service = container.assignment_service

    @app.route("/api/admin/assign-course", methods=["POST"], endpoint="create_assignment")
    @roles_required(Role.ADMIN)
    def create_assignment():
        body = request.get_json(silent=True) or {}
        try:
            detail = service.create_assignment(
                batch_id=body.get("batchId"),
                course_id=body.get("courseId"),
                faculty_id=body.get("facultyId"),
            )
            return ok(detail.to_dict(), message="Assignment created successfully", status=201)
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Error creating assignment")
            return fail("Server error creating assignment", 500)

    @app.route("/api/admin/assign-course", methods=["GET"], endpoint="list_assignments")
    @roles_required(Role.ADMIN)
    def list_assignments():
        try:
            items = service.list_all(
                batch_id=request.args.get("batchId"),
                course_id=request.args.get("courseId"),
                faculty_id=request.args.get("facultyId"),
            )
            return ok([d.to_dict() for d in items], count=len(items))
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Error fetching assignments")
            return fail("Server error fetching assignments", 500)

    @app.route("/api/admin/assign-course/<assignment_id>", methods=["GET"], endpoint="get_assignment")
    @roles_required(Role.ADMIN)
    def get_assignment(assignment_id: str):
        try:
            return ok(service.get_assignment(assignment_id=assignment_id).to_dict())
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Error fetching assignment %s", assignment_id)
            return fail("Server error fetching assignment", 500)

    @app.route("/api/admin/assign-course/<assignment_id>", methods=["PUT"], endpoint="reassign_faculty")
    @roles_required(Role.ADMIN)
    def reassign_faculty(assignment_id: str):
        body = request.get_json(silent=True) or {}
        try:
            detail = service.reassign_faculty(assignment_id=assignment_id, faculty_id=body.get("facultyId"))
            return ok(detail.to_dict(), message="Assignment updated successfully")
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Error updating assignment %s", assignment_id)
            return fail("Server error updating assignment", 500)

    @app.route("/api/admin/assign-course/<assignment_id>", methods=["DELETE"], endpoint="delete_assignment")
    @roles_required(Role.ADMIN)
    def delete_assignment(assignment_id: str):
        try:
            service.delete_assignment(assignment_id=assignment_id)
            return ok({}, message="Assignment deleted successfully")
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Error deleting assignment %s", assignment_id)
            return fail("Server error deleting assignment", 500)

    @app.route("/api/faculty/assignments", methods=["GET"], endpoint="faculty_assignments")
    @roles_required(Role.TEACHER)
    def faculty_assignments():
        try:
            items = service.list_for_faculty(faculty_id=current_user_id())
            return ok([d.to_dict() for d in items], count=len(items))
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Error fetching faculty assignments")
            return fail("Server error fetching your assignments", 500)
