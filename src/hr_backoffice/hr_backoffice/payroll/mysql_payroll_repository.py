from __future__ import annotations

from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import PaymentStatus, PayrollStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_where, db_cursor, fetchall, fetchone, unique_violation
from ..salary_structures.model import DEDUCTION_FIELDS, EARNING_FIELDS
from .model import PaymentUpdate, PayrollRecord
from .repository import PayrollRepository

_LINE_ITEMS = EARNING_FIELDS + DEDUCTION_FIELDS
_FIELDS = (
    "employee_id",
    "month",
    "basic_salary",
    "allowances",
    "deductions",
    "net_salary",
    "present_days",
    "absent_days",
    "half_days",
    "leaves",
    "total_working_days",
    "daily_rate",
    "earned_basic",
    "salary_loss",
    "net_basic",
    "paid_amount",
    "status",
    "payment_status",
    "payment_date",
    "notes",
)
_SELECT = ", ".join(("payroll_id",) + _FIELDS + _LINE_ITEMS + ("created_at", "updated_at"))


def _count(value) -> float:
    n = float(value or 0)
    return int(n) if n.is_integer() else n


def _to_record(r: dict) -> PayrollRecord:
    return PayrollRecord(
        payroll_id=int(r["payroll_id"]),
        employee_id=str(r["employee_id"]),
        month=str(r["month"]),
        basic_salary=r["basic_salary"],
        allowances=r["allowances"],
        deductions=r["deductions"],
        net_salary=r["net_salary"],
        present_days=_count(r["present_days"]),
        absent_days=_count(r["absent_days"]),
        half_days=_count(r["half_days"]),
        leaves=_count(r["leaves"]),
        total_working_days=int(r["total_working_days"]),
        daily_rate=r["daily_rate"],
        earned_basic=r["earned_basic"],
        salary_loss=r["salary_loss"],
        net_basic=r["net_basic"],
        line_items={k: r[k] for k in _LINE_ITEMS},
        paid_amount=r["paid_amount"],
        status=PayrollStatus(r["status"]),
        payment_status=PaymentStatus(r["payment_status"]),
        payment_date=r.get("payment_date"),
        notes=r.get("notes"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLPayrollRepository(PayrollRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _filters(
        *,
        month: Optional[str],
        status: Optional[PayrollStatus],
        payment_status: Optional[PaymentStatus],
        search: Optional[str],
    ) -> tuple[str, list[object]]:
        clauses: list[str] = []
        params: list[object] = []
        if month:
            clauses.append("month=%s")
            params.append(month)
        if status:
            clauses.append("status=%s")
            params.append(status.value)
        if payment_status:
            clauses.append("payment_status=%s")
            params.append(payment_status.value)
        if search:
            clauses.append("employee_id LIKE %s")
            params.append(f"%{search}%")
        return build_where(clauses), params

    def list(
        self,
        *,
        month: Optional[str] = None,
        status: Optional[PayrollStatus] = None,
        payment_status: Optional[PaymentStatus] = None,
        search: Optional[str] = None,
        offset: int = 0,
        limit: int = 100,
    ) -> Sequence[PayrollRecord]:
        where, params = self._filters(month=month, status=status, payment_status=payment_status, search=search)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_SELECT}
                FROM payroll_records
                {where}
                ORDER BY month DESC, employee_id ASC
                LIMIT %s OFFSET %s
                """,
                tuple(params + [int(limit), int(offset)]),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def count(
        self,
        *,
        month: Optional[str] = None,
        status: Optional[PayrollStatus] = None,
        payment_status: Optional[PaymentStatus] = None,
        search: Optional[str] = None,
    ) -> int:
        where, params = self._filters(month=month, status=status, payment_status=payment_status, search=search)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM payroll_records {where}", tuple(params))
            row = fetchone(cur)
            return int(row["total"]) if row else 0

    def list_all(self, *, month: Optional[str] = None) -> Sequence[PayrollRecord]:
        where, params = self._filters(month=month, status=None, payment_status=None, search=None)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_SELECT} FROM payroll_records {where} ORDER BY month ASC, employee_id ASC",
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def get(self, payroll_id: int) -> Optional[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_SELECT} FROM payroll_records WHERE payroll_id=%s", (int(payroll_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_for_employee_month(self, employee_id: str, month: str) -> Optional[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_SELECT} FROM payroll_records WHERE employee_id=%s AND month=%s",
                (employee_id, month),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def create(self, record: PayrollRecord) -> int:
        columns = _FIELDS + _LINE_ITEMS
        values: list[object] = []
        for name in _FIELDS:
            v = getattr(record, name)
            values.append(v.value if isinstance(v, (PayrollStatus, PaymentStatus)) else v)
        values.extend(record.line_items.get(k, Decimal("0.00")) for k in _LINE_ITEMS)

        placeholders = ",".join(["%s"] * len(columns))
        with unique_violation(f"Payroll already processed for {record.employee_id} in {record.month}"):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"INSERT INTO payroll_records({', '.join(columns)}) VALUES({placeholders})",
                    tuple(values),
                )
                return int(cur.lastrowid)

    def update_payment(self, payroll_id: int, update: PaymentUpdate) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE payroll_records
                SET status=%s, payment_status=%s, paid_amount=%s, payment_date=%s, notes=%s
                WHERE payroll_id=%s
                """,
                (
                    update.record_status.value,
                    update.status.value,
                    update.paid_amount,
                    update.payment_date,
                    update.notes,
                    int(payroll_id),
                ),
            )
            if cur.rowcount > 0:
                return True
            cur.execute("SELECT 1 AS found FROM payroll_records WHERE payroll_id=%s", (int(payroll_id),))
            return fetchone(cur) is not None

    def delete(self, payroll_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM payroll_records WHERE payroll_id=%s", (int(payroll_id),))
            return cur.rowcount > 0
