from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Batch, Course
from .repository import BatchRepository, CourseRepository


class MySQLBatchRepository(BatchRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, batch_id: int) -> Optional[Batch]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT batch_id, name, year, department, semester FROM batches WHERE batch_id=%s",
                (int(batch_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Batch(
                batch_id=int(r["batch_id"]),
                name=r["name"],
                year=r.get("year"),
                department=r.get("department"),
                semester=r.get("semester"),
            )


class MySQLCourseRepository(CourseRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, course_id: int) -> Optional[Course]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT course_id, name, code, credits FROM courses WHERE course_id=%s",
                (int(course_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Course(
                course_id=int(r["course_id"]),
                name=r["name"],
                code=r["code"],
                credits=r.get("credits"),
            )
