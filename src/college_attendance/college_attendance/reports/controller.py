from __future__ import annotations

import logging

from flask import Flask

from ..common.http import current_role, current_user_id, error_response, fail, ok, roles_required
from ..core.enums import Role
from ..core.exceptions import DomainError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    service = container.report_service

    def _compute(batch_id: str, course_id: str):
        return service.compute_statistics(
            batch_id=batch_id,
            course_id=course_id,
            current_user_id=current_user_id(),
            current_role=current_role(),
        )

    @app.route("/api/attendance/stats/<batch_id>/<course_id>", methods=["GET"], endpoint="attendance_stats")
    @roles_required(Role.TEACHER, Role.ADMIN)
    def attendance_stats(batch_id: str, course_id: str):
        try:
            report = _compute(batch_id, course_id)
            return ok(report.to_dict(), count=len(report.rows))
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Error calculating attendance statistics")
            return fail("Server error calculating attendance statistics", 500)

    @app.route("/api/attendance/stats/<batch_id>/<course_id>/export", methods=["GET"], endpoint="attendance_stats_csv")
    @roles_required(Role.TEACHER, Role.ADMIN)
    def attendance_stats_csv(batch_id: str, course_id: str):
        try:
            report = _compute(batch_id, course_id)
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Error exporting attendance statistics")
            return fail("Server error exporting attendance statistics", 500)

        filename = f"attendance_stats_{report.batch_id}_{report.course_id}.csv"
        return app.response_class(
            service.export_statistics_csv(report),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )
