from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_where, db_cursor, fetchall, fetchone, unique_violation
from .model import AMOUNT_FIELDS, SalaryStructure
from .repository import SalaryStructureRepository

_COLUMNS = ", ".join(
    ("structure_id", "employee_id") + AMOUNT_FIELDS + ("effective_from", "is_active", "created_at", "updated_at")
)
_DUPLICATE = "An active salary structure already exists for this employee"


def _to_structure(r: dict) -> SalaryStructure:
    amounts = {f: r[f] for f in AMOUNT_FIELDS}
    return SalaryStructure(
        structure_id=int(r["structure_id"]),
        employee_id=str(r["employee_id"]),
        effective_from=r["effective_from"],
        is_active=bool(r["is_active"]),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
        **amounts,
    )


class MySQLSalaryStructureRepository(SalaryStructureRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _filters(*, is_active: Optional[bool], search: Optional[str]) -> tuple[str, list[object]]:
        clauses: list[str] = []
        params: list[object] = []
        if is_active is not None:
            clauses.append("is_active=%s")
            params.append(1 if is_active else 0)
        if search:
            clauses.append("employee_id LIKE %s")
            params.append(f"%{search}%")
        return build_where(clauses), params

    def list(
        self,
        *,
        is_active: Optional[bool] = None,
        search: Optional[str] = None,
        offset: int = 0,
        limit: int = 100,
    ) -> Sequence[SalaryStructure]:
        where, params = self._filters(is_active=is_active, search=search)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM salary_structures
                {where}
                ORDER BY updated_at DESC, structure_id DESC
                LIMIT %s OFFSET %s
                """,
                tuple(params + [int(limit), int(offset)]),
            )
            return [_to_structure(r) for r in fetchall(cur)]

    def count(self, *, is_active: Optional[bool] = None, search: Optional[str] = None) -> int:
        where, params = self._filters(is_active=is_active, search=search)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM salary_structures {where}", tuple(params))
            row = fetchone(cur)
            return int(row["total"]) if row else 0

    def get(self, structure_id: int) -> Optional[SalaryStructure]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM salary_structures WHERE structure_id=%s", (int(structure_id),))
            r = fetchone(cur)
            return _to_structure(r) if r else None

    def get_active_for_employee(self, employee_id: str) -> Optional[SalaryStructure]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM salary_structures WHERE employee_id=%s AND is_active=1",
                (employee_id,),
            )
            r = fetchone(cur)
            return _to_structure(r) if r else None

    def list_for_employee(self, employee_id: str) -> Sequence[SalaryStructure]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM salary_structures
                WHERE employee_id=%s
                ORDER BY effective_from DESC, structure_id DESC
                """,
                (employee_id,),
            )
            return [_to_structure(r) for r in fetchall(cur)]

    def active_employee_ids(self) -> Sequence[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT employee_id FROM salary_structures WHERE is_active=1 ORDER BY employee_id")
            return [str(r["employee_id"]) for r in fetchall(cur)]

    def create(self, structure: SalaryStructure) -> int:
        columns = ("employee_id",) + AMOUNT_FIELDS + ("effective_from", "is_active")
        values = (
            [structure.employee_id]
            + [getattr(structure, f) for f in AMOUNT_FIELDS]
            + [structure.effective_from, 1 if structure.is_active else 0]
        )
        placeholders = ",".join(["%s"] * len(columns))
        with unique_violation(_DUPLICATE):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"INSERT INTO salary_structures({', '.join(columns)}) VALUES({placeholders})",
                    tuple(values),
                )
                return int(cur.lastrowid)

    def update(self, structure_id: int, fields: Mapping[str, Any]) -> bool:
        allowed = set(AMOUNT_FIELDS) | {"effective_from"}
        items = [(k, v) for k, v in fields.items() if k in allowed]
        if not items:
            return self.get(structure_id) is not None

        assignments = ", ".join(f"{k}=%s" for k, _ in items)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE salary_structures SET {assignments} WHERE structure_id=%s",
                tuple([v for _, v in items] + [int(structure_id)]),
            )
            return cur.rowcount > 0 or self._exists(cur, structure_id)

    def set_active(self, structure_id: int, is_active: bool) -> bool:
        with unique_violation(_DUPLICATE):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    "UPDATE salary_structures SET is_active=%s WHERE structure_id=%s",
                    (1 if is_active else 0, int(structure_id)),
                )
                return cur.rowcount > 0 or self._exists(cur, structure_id)

    def delete(self, structure_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM salary_structures WHERE structure_id=%s", (int(structure_id),))
            return cur.rowcount > 0

    @staticmethod
    def _exists(cur, structure_id: int) -> bool:
        # MySQL reports 0 affected rows when values are unchanged.
        cur.execute("SELECT 1 AS found FROM salary_structures WHERE structure_id=%s", (int(structure_id),))
        return fetchone(cur) is not None
