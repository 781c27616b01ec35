from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_where, db_cursor, fetchall, fetchone, unique_violation
from .model import SalarySlip
from .repository import SalarySlipRepository

_FIELDS = (
    "payroll_id",
    "employee_id",
    "month",
    "slip_number",
    "basic_salary",
    "allowances",
    "deductions",
    "net_salary",
    "present_days",
    "absent_days",
    "half_days",
    "leaves",
    "generated_at",
    "email_sent",
    "email_sent_at",
)
_SELECT = ", ".join(("slip_id",) + _FIELDS)


def _count(value) -> float:
    n = float(value or 0)
    return int(n) if n.is_integer() else n


def _to_slip(r: dict) -> SalarySlip:
    return SalarySlip(
        slip_id=int(r["slip_id"]),
        payroll_id=int(r["payroll_id"]),
        employee_id=str(r["employee_id"]),
        month=str(r["month"]),
        slip_number=str(r["slip_number"]),
        basic_salary=r["basic_salary"],
        allowances=r["allowances"],
        deductions=r["deductions"],
        net_salary=r["net_salary"],
        present_days=_count(r["present_days"]),
        absent_days=_count(r["absent_days"]),
        half_days=_count(r["half_days"]),
        leaves=_count(r["leaves"]),
        generated_at=r["generated_at"],
        email_sent=bool(r["email_sent"]),
        email_sent_at=r.get("email_sent_at"),
    )


class MySQLSalarySlipRepository(SalarySlipRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list(self, *, month: Optional[str] = None, employee_id: Optional[str] = None) -> Sequence[SalarySlip]:
        clauses: list[str] = []
        params: list[object] = []
        if month:
            clauses.append("month=%s")
            params.append(month)
        if employee_id:
            clauses.append("employee_id=%s")
            params.append(employee_id)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_SELECT} FROM salary_slips {build_where(clauses)} ORDER BY generated_at DESC, slip_id DESC",
                tuple(params),
            )
            return [_to_slip(r) for r in fetchall(cur)]

    def get(self, slip_id: int) -> Optional[SalarySlip]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_SELECT} FROM salary_slips WHERE slip_id=%s", (int(slip_id),))
            r = fetchone(cur)
            return _to_slip(r) if r else None

    def latest_for_payroll(self, payroll_id: int) -> Optional[SalarySlip]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_SELECT} FROM salary_slips WHERE payroll_id=%s ORDER BY slip_id DESC LIMIT 1",
                (int(payroll_id),),
            )
            r = fetchone(cur)
            return _to_slip(r) if r else None

    def latest_for_employee_month(self, employee_id: str, month: str) -> Optional[SalarySlip]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_SELECT} FROM salary_slips
                WHERE employee_id=%s AND month=%s
                ORDER BY slip_id DESC LIMIT 1
                """,
                (employee_id, month),
            )
            r = fetchone(cur)
            return _to_slip(r) if r else None

    def exists_for_payroll(self, payroll_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT 1 AS found FROM salary_slips WHERE payroll_id=%s LIMIT 1", (int(payroll_id),))
            return fetchone(cur) is not None

    def last_slip_number(self, prefix: str) -> Optional[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT slip_number FROM salary_slips
                WHERE slip_number LIKE %s
                ORDER BY CAST(SUBSTRING_INDEX(slip_number, '/', -1) AS UNSIGNED) DESC, slip_id DESC
                LIMIT 1
                """,
                (prefix + "%",),
            )
            r = fetchone(cur)
            return str(r["slip_number"]) if r else None

    def create(self, slip: SalarySlip) -> int:
        placeholders = ",".join(["%s"] * len(_FIELDS))
        values = tuple(getattr(slip, f) for f in _FIELDS)
        with unique_violation(f"Slip number {slip.slip_number} already exists"):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(f"INSERT INTO salary_slips({', '.join(_FIELDS)}) VALUES({placeholders})", values)
                return int(cur.lastrowid)

    def mark_emailed(self, slip_id: int, sent_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE salary_slips SET email_sent=1, email_sent_at=%s WHERE slip_id=%s",
                (sent_at, int(slip_id)),
            )
            return cur.rowcount > 0

    def delete(self, slip_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM salary_slips WHERE slip_id=%s", (int(slip_id),))
            return cur.rowcount > 0
