from __future__ import annotations

from typing import Any

import mysql.connector


class DatabaseConnection:
    """Opens one short-lived MySQL connection per repository operation.

    Transactions are explicit: `db_cursor` commits or rolls back.
    """

    def __init__(self, **connect_args: Any):
        self._connect_args = dict(connect_args, autocommit=False)

    @classmethod
    def from_settings(cls, db_config: dict) -> "DatabaseConnection":
        return cls(
            host=str(db_config["host"]),
            port=int(db_config.get("port", 3306)),
            user=str(db_config["user"]),
            password=str(db_config["password"]),
            database=str(db_config["database"]),
        )

    def connect(self):
        return mysql.connector.connect(**self._connect_args)
