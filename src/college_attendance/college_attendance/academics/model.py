from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Batch:
    """A cohort of students sharing year, department and semester."""

    batch_id: int
    name: str
    year: Optional[int] = None
    department: Optional[str] = None
    semester: Optional[int] = None

    def summary(self) -> dict:
        return {
            "id": self.batch_id,
            "name": self.name,
            "year": self.year,
            "department": self.department,
            "semester": self.semester,
        }


@dataclass(frozen=True)
class Course:
    course_id: int
    name: str
    code: str
    credits: Optional[int] = None

    def summary(self) -> dict:
        return {"id": self.course_id, "name": self.name, "code": self.code, "credits": self.credits}
