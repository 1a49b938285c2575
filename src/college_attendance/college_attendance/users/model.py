from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: a directory user (admin, teacher or student).

    Note: Plain data object; accounts are managed by the directory service.
    """

    user_id: int
    full_name: str
    email: str
    role: Role
    roll_number: Optional[str] = None
    is_active: bool = True

    def summary(self) -> dict:
        out = {"id": self.user_id, "name": self.full_name, "email": self.email}
        if self.role == Role.STUDENT:
            out["rollNumber"] = self.roll_number
        return out
