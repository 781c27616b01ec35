from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

import mysql.connector


@dataclass(frozen=True)
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str
    connect_timeout: int = 10

    @classmethod
    def from_settings(cls, db_config: Mapping[str, Any]) -> "DBConfig":
        """Build from a settings DB_CONFIG dict; missing keys fall back to local defaults."""

        return cls(
            host=str(db_config.get("host", "localhost")),
            port=int(db_config.get("port", 3306)),
            user=str(db_config.get("user", "root")),
            password=str(db_config.get("password", "")),
            database=str(db_config.get("database", "hr_backoffice")),
        )

    def describe(self) -> str:
        return f"{self.user}@{self.host}:{self.port}/{self.database}"


class DatabaseConnection:
    """Connection factory.

    Every repository call opens a short-lived connection through db_cursor,
    so there is no pool to size and nothing to share between requests.
    """

    def __init__(self, config: DBConfig):
        self.config = config

    def connect(self, *, with_database: bool = True):
        kwargs = dict(
            host=self.config.host,
            port=self.config.port,
            user=self.config.user,
            password=self.config.password,
            charset="utf8mb4",
            connection_timeout=self.config.connect_timeout,
        )
        if with_database:
            kwargs["database"] = self.config.database
        return mysql.connector.connect(**kwargs)
