from __future__ import annotations

import logging
from typing import Any, Callable, Sequence

from ..academics.repository import BatchRepository, CourseRepository
from ..common.datetime_utils import now_local
from ..common.validators import parse_id, parse_optional_id, require_ids
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ConflictError, DuplicateKeyError, NotFoundError, ValidationError
from ..users.model import User
from ..users.repository import UserRepository
from .model import Assignment, AssignmentDetail
from .repository import AssignmentRepository

logger = logging.getLogger(__name__)


class AssignmentService:
    """Use cases of the assignment registry: who may mark attendance where."""

    def __init__(
        self,
        assignments: AssignmentRepository,
        users: UserRepository,
        batches: BatchRepository,
        courses: CourseRepository,
        *,
        clock: Callable = now_local,
    ):
        self._assignments = assignments
        self._users = users
        self._batches = batches
        self._courses = courses
        self._clock = clock

    def _require_teacher(self, faculty_id: int, *, message: str) -> User:
        faculty = self._users.get_by_id(faculty_id)
        if not faculty:
            raise NotFoundError("Faculty not found")
        if faculty.role != Role.TEACHER:
            raise ValidationError(message)
        return faculty

    def _duplicate_pair(self, batch_id: int, course_id: int) -> ConflictError:
        existing = self._assignments.get_by_pair(batch_id=batch_id, course_id=course_id)
        return ConflictError(
            "An assignment already exists for this batch-course combination",
            existing={"existingAssignment": existing.conflict_summary() if existing else None},
        )

    def create_assignment(self, *, batch_id: Any, course_id: Any, faculty_id: Any) -> AssignmentDetail:
        ids = require_ids(batchId=batch_id, courseId=course_id, facultyId=faculty_id)
        batch_id, course_id, faculty_id = ids["batchId"], ids["courseId"], ids["facultyId"]

        batch = self._batches.get_by_id(batch_id)
        if not batch:
            raise NotFoundError("Batch not found")
        course = self._courses.get_by_id(course_id)
        if not course:
            raise NotFoundError("Course not found")
        faculty = self._require_teacher(faculty_id, message="Assigned user must have teacher role")

        if self._assignments.get_by_pair(batch_id=batch_id, course_id=course_id):
            raise self._duplicate_pair(batch_id, course_id)

        try:
            assignment_id = self._assignments.create(
                batch_id=batch_id,
                course_id=course_id,
                faculty_id=faculty_id,
                created_at=self._clock(),
            )
        except DuplicateKeyError:
            # Another request created the pair between the pre-check and the insert.
            raise self._duplicate_pair(batch_id, course_id)

        logger.info(
            "Assignment created: batch %s - course %s -> faculty %s",
            batch.name,
            course.code,
            faculty.full_name,
        )
        return self._detail_or_404(assignment_id)

    def get_assignment(self, *, assignment_id: Any) -> AssignmentDetail:
        return self._detail_or_404(parse_id(assignment_id, "assignmentId"))

    def reassign_faculty(self, *, assignment_id: Any, faculty_id: Any) -> AssignmentDetail:
        """Point an existing pair at another teacher.

        Attendance already recorded keeps the faculty id it was written with.
        """

        ids = require_ids(assignmentId=assignment_id, facultyId=faculty_id)
        assignment_id, faculty_id = ids["assignmentId"], ids["facultyId"]

        self._require_teacher(faculty_id, message="New faculty must have teacher role")

        current = self._assignments.get_by_id(assignment_id)
        if not current:
            raise NotFoundError("Assignment not found")

        self._assignments.update_faculty(
            assignment_id=assignment_id,
            faculty_id=faculty_id,
            updated_at=self._clock(),
        )
        logger.info(
            "Assignment %s: faculty changed from %s to %s",
            assignment_id,
            current.faculty_id,
            faculty_id,
        )
        return self._detail_or_404(assignment_id)

    def list_for_faculty(self, *, faculty_id: int) -> Sequence[AssignmentDetail]:
        return self._assignments.list_for_faculty(int(faculty_id))

    def list_all(
        self,
        *,
        batch_id: Any = None,
        course_id: Any = None,
        faculty_id: Any = None,
    ) -> Sequence[AssignmentDetail]:
        return self._assignments.list_details(
            batch_id=parse_optional_id(batch_id, "batchId"),
            course_id=parse_optional_id(course_id, "courseId"),
            faculty_id=parse_optional_id(faculty_id, "facultyId"),
        )

    def delete_assignment(self, *, assignment_id: Any) -> None:
        assignment_id = parse_id(assignment_id, "assignmentId")
        if not self._assignments.delete(assignment_id):
            raise NotFoundError("Assignment not found")
        logger.info("Assignment %s deleted", assignment_id)

    def require_assigned(self, *, batch_id: int, course_id: int, faculty_id: int) -> Assignment:
        """Return the assignment if `faculty_id` owns the pair, else AuthorizationError.

        The message is the same whether the pair is unassigned or assigned to
        someone else.
        """

        assignment = self._assignments.get_by_pair(batch_id=int(batch_id), course_id=int(course_id))
        if not assignment or assignment.faculty_id != int(faculty_id):
            logger.warning(
                "Faculty %s is not assigned to batch %s course %s",
                faculty_id,
                batch_id,
                course_id,
            )
            raise AuthorizationError("Access denied: You are not assigned to teach this course for this batch")
        return assignment

    def _detail_or_404(self, assignment_id: int) -> AssignmentDetail:
        detail = self._assignments.get_detail(assignment_id)
        if not detail:
            raise NotFoundError("Assignment not found")
        return detail
