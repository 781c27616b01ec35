from __future__ import annotations

from datetime import date
from typing import Optional

from ..attendance.service import AttendanceService
from ..core.exceptions import ValidationError
from ..payroll.repository import PayrollRepository
from . import rollups
from .model import (
    DepartmentAttendanceRow,
    MonthlyPayrollRow,
    ShortageReport,
    Site,
    SiteAttendanceReport,
    SiteAttendanceRow,
)
from .repository import SiteRepository

SITE_CSV_COLUMNS = [
    "Site ID",
    "Site Name",
    "Client",
    "Location",
    "Manager",
    "Total Employees",
    "Present",
    "Absent",
    "Half Days",
    "Leaves",
    "Shortage",
    "Attendance Rate (%)",
]


def _period_days(start: date, end: date) -> int:
    if end < start:
        raise ValidationError("endDate must be on or after startDate")
    return (end - start).days + 1


class ReportService:
    def __init__(self, attendance: AttendanceService, payroll: PayrollRepository, sites: SiteRepository):
        self._attendance = attendance
        self._payroll = payroll
        self._sites = sites

    def sites(self) -> list[Site]:
        return list(self._sites.list_sites())

    def site_attendance(self, start: date, end: date) -> SiteAttendanceReport:
        total_days = _period_days(start, end)
        records = self._attendance.records_between(start_date=start, end_date=end)
        rows = rollups.site_rollup(records, self.sites(), total_days=total_days)
        overall = rollups.overall_tally(records)
        return SiteAttendanceReport(
            start_date=start.isoformat(),
            end_date=end.isoformat(),
            total_days=total_days,
            total_sites=len(rows),
            total_employees=len(overall.employees),
            total_present=overall.present,
            total_absent=overall.absent,
            total_half_days=overall.half_days,
            total_leaves=overall.leaves,
            overall_attendance_rate=overall.rate(total_days),
            sites=rows,
        )

    def department_attendance(self, start: date, end: date) -> list[DepartmentAttendanceRow]:
        total_days = _period_days(start, end)
        records = self._attendance.records_between(start_date=start, end_date=end)
        return rollups.department_rollup(records, total_days=total_days)

    def shortage(self, start: date, end: date) -> ShortageReport:
        _period_days(start, end)
        return rollups.shortage_by_month(self._attendance.records_between(start_date=start, end_date=end))

    def payroll_monthly(self, month: Optional[str] = None) -> list[MonthlyPayrollRow]:
        return rollups.payroll_by_month(self._payroll.list_all(month=month))

    @staticmethod
    def site_csv_rows(rows: list[SiteAttendanceRow]) -> list[dict]:
        return [
            {
                "Site ID": r.site_id,
                "Site Name": r.site_name,
                "Client": r.client_name,
                "Location": r.location,
                "Manager": r.manager_name,
                "Total Employees": r.total_employees,
                "Present": r.present,
                "Absent": r.absent,
                "Half Days": r.half_days,
                "Leaves": r.leaves,
                "Shortage": r.shortage,
                "Attendance Rate (%)": r.attendance_rate,
            }
            for r in rows
        ]
