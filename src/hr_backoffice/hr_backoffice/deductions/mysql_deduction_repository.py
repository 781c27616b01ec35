from __future__ import annotations

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Mapping, Optional, Sequence

from ..core.enums import DeductionStatus, DeductionType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_where, db_cursor, fetchall, fetchone
from .model import Deduction, DeductionStats
from .repository import DeductionRepository

_FIELDS = (
    "employee_id",
    "employee_name",
    "type",
    "amount",
    "description",
    "deduction_date",
    "status",
    "repayment_months",
    "installment_amount",
    "fine_amount",
    "applied_month",
)
_SELECT = ", ".join(("deduction_id",) + _FIELDS + ("created_at", "updated_at"))


def _to_deduction(r: dict) -> Deduction:
    return Deduction(
        deduction_id=int(r["deduction_id"]),
        employee_id=str(r["employee_id"]),
        employee_name=r.get("employee_name"),
        type=DeductionType(r["type"]),
        amount=r["amount"],
        description=r.get("description") or "",
        deduction_date=r["deduction_date"],
        status=DeductionStatus(r["status"]),
        repayment_months=int(r.get("repayment_months") or 0),
        installment_amount=r["installment_amount"],
        fine_amount=r["fine_amount"],
        applied_month=str(r["applied_month"]),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


def _db_value(v: Any) -> Any:
    return v.value if isinstance(v, Enum) else v


class MySQLDeductionRepository(DeductionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _filters(
        *,
        status: Optional[DeductionStatus],
        type: Optional[DeductionType],
        employee_id: Optional[str],
        start_date: Optional[date],
        end_date: Optional[date],
        search: Optional[str],
    ) -> tuple[str, list[object]]:
        clauses: list[str] = []
        params: list[object] = []
        if status:
            clauses.append("status=%s")
            params.append(status.value)
        if type:
            clauses.append("type=%s")
            params.append(type.value)
        if employee_id:
            clauses.append("employee_id=%s")
            params.append(employee_id)
        if start_date:
            clauses.append("deduction_date>=%s")
            params.append(start_date)
        if end_date:
            clauses.append("deduction_date<=%s")
            params.append(end_date)
        if search:
            clauses.append("(employee_id LIKE %s OR employee_name LIKE %s OR description LIKE %s)")
            like = f"%{search}%"
            params.extend([like, like, like])
        return build_where(clauses), params

    def list(
        self,
        *,
        status: Optional[DeductionStatus] = None,
        type: Optional[DeductionType] = None,
        employee_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        search: Optional[str] = None,
        offset: int = 0,
        limit: int = 10,
    ) -> Sequence[Deduction]:
        where, params = self._filters(
            status=status, type=type, employee_id=employee_id, start_date=start_date, end_date=end_date, search=search
        )
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_SELECT}
                FROM deductions
                {where}
                ORDER BY created_at DESC, deduction_id DESC
                LIMIT %s OFFSET %s
                """,
                tuple(params + [int(limit), int(offset)]),
            )
            return [_to_deduction(r) for r in fetchall(cur)]

    def count(
        self,
        *,
        status: Optional[DeductionStatus] = None,
        type: Optional[DeductionType] = None,
        employee_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        search: Optional[str] = None,
    ) -> int:
        where, params = self._filters(
            status=status, type=type, employee_id=employee_id, start_date=start_date, end_date=end_date, search=search
        )
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM deductions {where}", tuple(params))
            row = fetchone(cur)
            return int(row["total"]) if row else 0

    def get(self, deduction_id: int) -> Optional[Deduction]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_SELECT} FROM deductions WHERE deduction_id=%s", (int(deduction_id),))
            r = fetchone(cur)
            return _to_deduction(r) if r else None

    def list_for_employee(self, employee_id: str) -> Sequence[Deduction]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_SELECT} FROM deductions WHERE employee_id=%s ORDER BY deduction_date DESC, deduction_id DESC",
                (employee_id,),
            )
            return [_to_deduction(r) for r in fetchall(cur)]

    def list_for_month(self, applied_month: str) -> Sequence[Deduction]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_SELECT} FROM deductions WHERE applied_month=%s ORDER BY created_at DESC, deduction_id DESC",
                (applied_month,),
            )
            return [_to_deduction(r) for r in fetchall(cur)]

    def stats(self) -> DeductionStats:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT
                    COALESCE(SUM(amount), 0) AS total_deductions,
                    COALESCE(SUM(CASE WHEN type='advance' THEN amount ELSE 0 END), 0) AS total_advances,
                    COALESCE(SUM(CASE WHEN type='fine' THEN amount ELSE 0 END), 0) AS total_fines,
                    COALESCE(SUM(status='pending'), 0) AS pending_count,
                    COALESCE(SUM(status='approved'), 0) AS approved_count,
                    COALESCE(SUM(status='rejected'), 0) AS rejected_count,
                    COALESCE(SUM(status='completed'), 0) AS completed_count,
                    COUNT(*) AS total_count
                FROM deductions
                """
            )
            r = fetchone(cur)
        if not r:
            return DeductionStats()
        return DeductionStats(
            total_deductions=Decimal(r["total_deductions"]),
            total_advances=Decimal(r["total_advances"]),
            total_fines=Decimal(r["total_fines"]),
            pending_count=int(r["pending_count"]),
            approved_count=int(r["approved_count"]),
            rejected_count=int(r["rejected_count"]),
            completed_count=int(r["completed_count"]),
            total_count=int(r["total_count"]),
        )

    def create(self, deduction: Deduction) -> int:
        placeholders = ",".join(["%s"] * len(_FIELDS))
        values = tuple(_db_value(getattr(deduction, f)) for f in _FIELDS)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"INSERT INTO deductions({', '.join(_FIELDS)}) VALUES({placeholders})", values)
            return int(cur.lastrowid)

    def update(self, deduction_id: int, fields: Mapping[str, Any]) -> bool:
        items = [(k, _db_value(v)) for k, v in fields.items() if k in _FIELDS]
        with db_cursor(self._conn_factory) as (_, cur):
            if items:
                cur.execute(
                    f"UPDATE deductions SET {', '.join(f'{k}=%s' for k, _ in items)} WHERE deduction_id=%s",
                    tuple([v for _, v in items] + [int(deduction_id)]),
                )
                if cur.rowcount > 0:
                    return True
            cur.execute("SELECT 1 AS found FROM deductions WHERE deduction_id=%s", (int(deduction_id),))
            return fetchone(cur) is not None

    def delete(self, deduction_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM deductions WHERE deduction_id=%s", (int(deduction_id),))
            return cur.rowcount > 0
