from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_where, db_cursor, fetchall, fetchone
from .model import AttendanceRecord
from .normalize import parse_status
from .repository import AttendanceRepository

_COLUMNS = "attendance_id, employee_id, employee_name, work_date, status, site_id, site_name, department"


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        employee_id=str(r["employee_id"]),
        employee_name=r.get("employee_name"),
        work_date=r["work_date"],
        status=parse_status(r["status"]),
        site_id=r.get("site_id"),
        site_name=r.get("site_name"),
        department=r.get("department"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _filters(
        *,
        start_date: Optional[date],
        end_date: Optional[date],
        employee_id: Optional[str],
        site_name: Optional[str],
        department: Optional[str],
    ) -> tuple[str, list[object]]:
        clauses: list[str] = []
        params: list[object] = []
        if start_date is not None:
            clauses.append("work_date >= %s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("work_date <= %s")
            params.append(end_date)
        if employee_id:
            clauses.append("employee_id=%s")
            params.append(employee_id)
        if site_name:
            clauses.append("site_name=%s")
            params.append(site_name)
        if department:
            clauses.append("department=%s")
            params.append(department)
        return build_where(clauses), params

    def list_records(
        self,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        employee_id: Optional[str] = None,
        site_name: Optional[str] = None,
        department: Optional[str] = None,
        offset: int = 0,
        limit: int = 100,
    ) -> Sequence[AttendanceRecord]:
        where, params = self._filters(
            start_date=start_date, end_date=end_date, employee_id=employee_id, site_name=site_name, department=department
        )
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                {where}
                ORDER BY work_date DESC, attendance_id DESC
                LIMIT %s OFFSET %s
                """,
                tuple(params + [int(limit), int(offset)]),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def count_records(
        self,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        employee_id: Optional[str] = None,
        site_name: Optional[str] = None,
        department: Optional[str] = None,
    ) -> int:
        where, params = self._filters(
            start_date=start_date, end_date=end_date, employee_id=employee_id, site_name=site_name, department=department
        )
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM attendance_records {where}", tuple(params))
            row = fetchone(cur)
            return int(row["total"]) if row else 0

    def records_between(
        self,
        *,
        start_date: date,
        end_date: date,
        employee_ids: Optional[Sequence[str]] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["work_date BETWEEN %s AND %s"]
        params: list[object] = [start_date, end_date]
        if employee_ids:
            placeholders = ", ".join(["%s"] * len(employee_ids))
            clauses.append(f"employee_id IN ({placeholders})")
            params.extend(employee_ids)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                {build_where(clauses)}
                ORDER BY attendance_id ASC
                """,
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def create(self, record: AttendanceRecord) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(employee_id, employee_name, work_date, status, site_id, site_name, department)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    record.employee_id,
                    record.employee_name,
                    record.work_date,
                    record.status.value,
                    record.site_id,
                    record.site_name,
                    record.department,
                ),
            )
            return int(cur.lastrowid)
