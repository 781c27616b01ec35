from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from datetime import date
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import month_bounds
from ..core.constants import DEFAULT_TOTAL_WORKING_DAYS
from ..core.exceptions import ValidationError
from .aggregator import aggregate_attendance
from .model import AttendanceAggregate, AttendanceRecord
from .normalize import normalize_record
from .repository import AttendanceRepository


@dataclass(frozen=True)
class AttendancePage:
    records: list[AttendanceRecord]
    total: int


class AttendanceService:
    def __init__(self, attendance: AttendanceRepository, *, total_working_days: int = DEFAULT_TOTAL_WORKING_DAYS):
        self._attendance = attendance
        self._total_working_days = int(total_working_days)

    @property
    def total_working_days(self) -> int:
        return self._total_working_days

    def list_records(
        self,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        employee_id: Optional[str] = None,
        site_name: Optional[str] = None,
        department: Optional[str] = None,
        page: int = 1,
        limit: int = 100,
    ) -> AttendancePage:
        if start_date and end_date and end_date < start_date:
            raise ValidationError("endDate must be on or after startDate")

        filters = dict(
            start_date=start_date,
            end_date=end_date,
            employee_id=employee_id,
            site_name=site_name,
            department=department,
        )
        rows = self._attendance.list_records(**filters, offset=(page - 1) * limit, limit=limit)
        total = self._attendance.count_records(**filters)
        return AttendancePage(records=list(rows), total=total)

    def record(self, payload: Mapping[str, Any]) -> AttendanceRecord:
        rec = normalize_record(payload)
        if rec is None:
            raise ValidationError("employeeId and a valid date are required")
        new_id = self._attendance.create(rec)
        return dataclasses.replace(rec, attendance_id=new_id)

    def records_between(self, *, start_date: date, end_date: date) -> list[AttendanceRecord]:
        return list(self._attendance.records_between(start_date=start_date, end_date=end_date))

    def monthly_aggregates(
        self,
        month: str,
        *,
        employee_ids: Optional[Sequence[str]] = None,
        total_working_days: Optional[int] = None,
    ) -> dict[str, AttendanceAggregate]:
        start, end = month_bounds(month)
        rows = self._attendance.records_between(start_date=start, end_date=end, employee_ids=employee_ids)
        return aggregate_attendance(
            rows,
            total_working_days=self._total_working_days if total_working_days is None else total_working_days,
            employee_ids=employee_ids,
        )

    def aggregate_for_employee(
        self, employee_id: str, month: str, *, total_working_days: Optional[int] = None
    ) -> AttendanceAggregate:
        return self.monthly_aggregates(month, employee_ids=[employee_id], total_working_days=total_working_days)[employee_id]
