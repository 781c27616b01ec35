"""Read-only rollups over attendance and payroll for dashboards and exports.

Missing site or department metadata never fails a view: blanks fall back to
"Not assigned" / "General" / "Unknown Site".
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence

from ..attendance.aggregator import attendance_rate, dedupe_by_day, shortage
from ..attendance.model import AttendanceRecord
from ..attendance.normalize import site_key
from ..common.datetime_utils import month_of
from ..core.constants import GENERAL_DEPARTMENT, UNASSIGNED, UNKNOWN_SITE
from ..core.enums import AttendanceStatus, PaymentStatus
from ..payroll.model import ZERO, PayrollRecord
from .model import (
    DepartmentAttendanceRow,
    EmployeeShortage,
    MonthlyPayrollRow,
    ShortageReport,
    Site,
    SiteAttendanceRow,
    SiteShortage,
)


@dataclass
class _Tally:
    employees: set = field(default_factory=set)
    present: int = 0
    absent: int = 0
    half_days: int = 0
    leaves: int = 0

    def add(self, r: AttendanceRecord) -> None:
        self.employees.add(r.employee_id)
        if r.status is AttendanceStatus.PRESENT:
            self.present += 1
        elif r.status is AttendanceStatus.HALF_DAY:
            self.half_days += 1
        elif r.status is AttendanceStatus.LEAVE:
            self.leaves += 1
        else:
            self.absent += 1

    @property
    def shortage(self) -> float:
        return shortage(absent=self.absent, half_days=self.half_days)

    def rate(self, total_days: int) -> int:
        return attendance_rate(
            present=self.present,
            half_days=self.half_days,
            employee_count=len(self.employees),
            total_days=total_days,
        )


def record_site_id(r: AttendanceRecord) -> str:
    return r.site_id or site_key(r.site_name or UNKNOWN_SITE)


def site_rollup(
    records: Iterable[AttendanceRecord],
    sites: Sequence[Site],
    *,
    total_days: int,
) -> list[SiteAttendanceRow]:
    """One row per reference site plus any site seen only in attendance."""

    tallies: dict[str, _Tally] = {s.site_id: _Tally() for s in sites}
    names: dict[str, str] = {s.site_id: s.site_name for s in sites}

    for r in dedupe_by_day(records):
        sid = record_site_id(r)
        tallies.setdefault(sid, _Tally()).add(r)
        names.setdefault(sid, r.site_name or UNKNOWN_SITE)

    by_id = {s.site_id: s for s in sites}
    rows = []
    for sid, t in tallies.items():
        ref: Optional[Site] = by_id.get(sid)
        rows.append(
            SiteAttendanceRow(
                site_id=sid,
                site_name=names[sid],
                client_name=(ref.client_name if ref else None) or UNASSIGNED,
                location=(ref.location if ref else None) or UNASSIGNED,
                manager_name=(ref.manager_name if ref else None) or UNASSIGNED,
                total_employees=len(t.employees),
                present=t.present,
                absent=t.absent,
                half_days=t.half_days,
                leaves=t.leaves,
                shortage=t.shortage,
                attendance_rate=t.rate(total_days),
                total_days=total_days,
            )
        )
    rows.sort(key=lambda row: row.site_name.lower())
    return rows


def overall_tally(records: Iterable[AttendanceRecord]) -> _Tally:
    t = _Tally()
    for r in dedupe_by_day(records):
        t.add(r)
    return t


def department_rollup(records: Iterable[AttendanceRecord], *, total_days: int) -> list[DepartmentAttendanceRow]:
    tallies: dict[str, _Tally] = {}
    for r in dedupe_by_day(records):
        tallies.setdefault(r.department or GENERAL_DEPARTMENT, _Tally()).add(r)

    return [
        DepartmentAttendanceRow(
            department=name,
            total_employees=len(t.employees),
            present=t.present,
            absent=t.absent,
            half_days=t.half_days,
            leaves=t.leaves,
            shortage=t.shortage,
            attendance_rate=t.rate(total_days),
        )
        for name, t in sorted(tallies.items(), key=lambda kv: kv[0].lower())
    ]


def shortage_by_month(records: Iterable[AttendanceRecord]) -> ShortageReport:
    """absent + 0.5 * half days, per month per site and per month per employee."""

    sites: dict[tuple[str, str], _Tally] = {}
    site_names: dict[str, str] = {}
    employees: dict[tuple[str, str], _Tally] = {}
    employee_info: dict[str, tuple[str, str]] = {}

    for r in dedupe_by_day(records):
        month = month_of(r.work_date)
        sid = record_site_id(r)
        sites.setdefault((month, sid), _Tally()).add(r)
        site_names.setdefault(sid, r.site_name or UNKNOWN_SITE)
        employees.setdefault((month, r.employee_id), _Tally()).add(r)
        employee_info.setdefault(r.employee_id, (r.employee_name or r.employee_id, r.site_name or UNKNOWN_SITE))

    by_site = [
        SiteShortage(
            month=month,
            site_id=sid,
            site_name=site_names[sid],
            absent=t.absent,
            half_days=t.half_days,
            shortage=t.shortage,
        )
        for (month, sid), t in sites.items()
    ]
    by_site.sort(key=lambda s: (s.month, s.site_name.lower()))

    by_employee = [
        EmployeeShortage(
            month=month,
            employee_id=eid,
            employee_name=employee_info[eid][0],
            site_name=employee_info[eid][1],
            absent=t.absent,
            half_days=t.half_days,
            shortage=t.shortage,
        )
        for (month, eid), t in employees.items()
    ]
    by_employee.sort(key=lambda e: (e.month, e.employee_id))
    return ShortageReport(by_site=by_site, by_employee=by_employee)


def payroll_by_month(records: Iterable[PayrollRecord]) -> list[MonthlyPayrollRow]:
    groups: dict[str, list[PayrollRecord]] = {}
    for r in records:
        groups.setdefault(r.month, []).append(r)

    rows = []
    for month in sorted(groups):
        items = groups[month]
        status_counts = {s: 0 for s in PaymentStatus}
        for r in items:
            status_counts[r.payment_status] += 1
        rows.append(
            MonthlyPayrollRow(
                month=month,
                employee_count=len({r.employee_id for r in items}),
                total_basic=sum((r.basic_salary for r in items), ZERO),
                total_allowances=sum((r.allowances for r in items), ZERO),
                total_deductions=sum((r.deductions for r in items), ZERO),
                total_net=sum((r.net_salary for r in items), ZERO),
                total_paid=sum((r.paid_amount for r in items), ZERO),
                paid_count=status_counts[PaymentStatus.PAID],
                pending_count=status_counts[PaymentStatus.PENDING],
                hold_count=status_counts[PaymentStatus.HOLD],
                part_paid_count=status_counts[PaymentStatus.PART_PAID],
            )
        )
    return rows
