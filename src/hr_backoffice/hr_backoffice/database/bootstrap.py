"""Create the database and apply database/schema.sql.

Every statement in the schema is CREATE ... IF NOT EXISTS, so applying it
on each start (AUTO_INIT_DB) is harmless.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Mapping, Optional

from .connection import DatabaseConnection, DBConfig

logger = logging.getLogger(__name__)

_DB_LINES = re.compile(r"(?im)^\s*(?:CREATE\s+DATABASE|USE)\b.*?;\s*$")
_LINE_COMMENTS = re.compile(r"(?m)^\s*--.*$")


def prepare_schema(sql: str) -> str:
    """Drop CREATE DATABASE / USE lines and line comments; the database name comes from settings."""

    return _LINE_COMMENTS.sub("", _DB_LINES.sub("", sql))


def split_statements(sql: str) -> list[str]:
    """Split a script on ';' outside quoted strings and identifiers."""

    statements: list[str] = []
    buf: list[str] = []
    quote: Optional[str] = None
    escaped = False

    for ch in sql:
        if escaped:
            escaped = False
        elif ch == "\\":
            escaped = True
        elif quote:
            if ch == quote:
                quote = None
        elif ch in ("'", '"', "`"):
            quote = ch
        elif ch == ";":
            stmt = "".join(buf).strip()
            if stmt:
                statements.append(stmt)
            buf = []
            continue
        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        statements.append(tail)
    return statements


def _run(conn_factory: DatabaseConnection, statements: list[str], *, with_database: bool = True) -> None:
    conn = conn_factory.connect(with_database=with_database)
    try:
        cur = conn.cursor()
        for stmt in statements:
            cur.execute(stmt)
        conn.commit()
        cur.close()
    finally:
        conn.close()


def ensure_database_exists(db_config: Mapping[str, Any]) -> None:
    config = DBConfig.from_settings(db_config)
    _run(
        DatabaseConnection(config),
        [f"CREATE DATABASE IF NOT EXISTS `{config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"],
        with_database=False,
    )


def apply_schema(db_config: Mapping[str, Any], *, schema_path: str | Path) -> None:
    config = DBConfig.from_settings(db_config)
    ensure_database_exists(db_config)

    statements = split_statements(prepare_schema(Path(schema_path).read_text(encoding="utf-8")))
    _run(DatabaseConnection(config), statements)
    logger.info("Applied %d schema statements to %s", len(statements), config.describe())


def list_tables(db_config: Mapping[str, Any]) -> list[str]:
    conn = DatabaseConnection(DBConfig.from_settings(db_config)).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        tables = [row[0] for row in cur.fetchall()]
        cur.close()
        return tables
    finally:
        conn.close()
