from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Mapping, Optional, Sequence

from ..core.enums import LedgerPaymentStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_where, db_cursor, fetchall, fetchone
from .model import MethodShare, Payment, PeriodTotal
from .repository import PaymentRepository

_FIELDS = ("invoice_id", "client", "amount", "payment_date", "method", "status")
_SELECT = ", ".join(("payment_id",) + _FIELDS + ("created_at", "updated_at"))


def _to_payment(r: dict) -> Payment:
    return Payment(
        payment_id=int(r["payment_id"]),
        invoice_id=str(r["invoice_id"]),
        client=str(r["client"]),
        amount=r["amount"],
        payment_date=r["payment_date"],
        method=str(r["method"]),
        status=LedgerPaymentStatus(r["status"]),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLPaymentRepository(PaymentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _filters(
        *,
        status: Optional[LedgerPaymentStatus],
        method: Optional[str],
        start: Optional[datetime],
        end: Optional[datetime],
    ) -> tuple[str, list[object]]:
        clauses: list[str] = []
        params: list[object] = []
        if status:
            clauses.append("status=%s")
            params.append(status.value)
        if method:
            clauses.append("method=%s")
            params.append(method)
        if start:
            clauses.append("payment_date>=%s")
            params.append(start)
        if end:
            clauses.append("payment_date<=%s")
            params.append(end)
        return build_where(clauses), params

    def list(
        self,
        *,
        status: Optional[LedgerPaymentStatus] = None,
        method: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        offset: int = 0,
        limit: int = 50,
    ) -> Sequence[Payment]:
        where, params = self._filters(status=status, method=method, start=start, end=end)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_SELECT} FROM payments {where} ORDER BY payment_date DESC, payment_id DESC LIMIT %s OFFSET %s",
                tuple(params + [int(limit), int(offset)]),
            )
            return [_to_payment(r) for r in fetchall(cur)]

    def count(
        self,
        *,
        status: Optional[LedgerPaymentStatus] = None,
        method: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> int:
        where, params = self._filters(status=status, method=method, start=start, end=end)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM payments {where}", tuple(params))
            row = fetchone(cur)
            return int(row["total"]) if row else 0

    def get(self, payment_id: int) -> Optional[Payment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_SELECT} FROM payments WHERE payment_id=%s", (int(payment_id),))
            r = fetchone(cur)
            return _to_payment(r) if r else None

    def create(self, payment: Payment) -> int:
        values = (
            payment.invoice_id,
            payment.client,
            payment.amount,
            payment.payment_date,
            payment.method,
            payment.status.value,
        )
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO payments({', '.join(_FIELDS)}) VALUES({','.join(['%s'] * len(_FIELDS))})",
                values,
            )
            return int(cur.lastrowid)

    def update(self, payment_id: int, fields: Mapping[str, Any]) -> bool:
        items = [
            (k, v.value if isinstance(v, LedgerPaymentStatus) else v) for k, v in fields.items() if k in _FIELDS
        ]
        with db_cursor(self._conn_factory) as (_, cur):
            if items:
                cur.execute(
                    f"UPDATE payments SET {', '.join(f'{k}=%s' for k, _ in items)} WHERE payment_id=%s",
                    tuple([v for _, v in items] + [int(payment_id)]),
                )
                if cur.rowcount > 0:
                    return True
            cur.execute("SELECT 1 AS found FROM payments WHERE payment_id=%s", (int(payment_id),))
            return fetchone(cur) is not None

    def delete(self, payment_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM payments WHERE payment_id=%s", (int(payment_id),))
            return cur.rowcount > 0

    def method_distribution(self) -> Sequence[MethodShare]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT method, SUM(amount) AS amount, COUNT(*) AS cnt
                FROM payments
                GROUP BY method
                ORDER BY amount DESC
                """
            )
            return [
                MethodShare(method=str(r["method"]), amount=Decimal(r["amount"]), count=int(r["cnt"]))
                for r in fetchall(cur)
            ]

    def totals_by_period(self, date_format: str) -> Sequence[PeriodTotal]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT DATE_FORMAT(payment_date, %s) AS period, SUM(amount) AS total_amount, COUNT(*) AS cnt
                FROM payments
                GROUP BY period
                ORDER BY period ASC
                """,
                (date_format,),
            )
            return [
                PeriodTotal(period=str(r["period"]), total_amount=Decimal(r["total_amount"]), count=int(r["cnt"]))
                for r in fetchall(cur)
            ]
