from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for route-level permission checks."""

    ADMIN = "admin"
    TEACHER = "teacher"
    STUDENT = "student"


class AttendanceStatus(str, Enum):
    """Per-student status stored on a ledger entry."""

    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"
