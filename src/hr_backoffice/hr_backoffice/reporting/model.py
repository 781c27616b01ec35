from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class Site:
    """Reference entry for a work site. Optional fields may be blank."""

    site_id: str
    site_name: str
    client_name: Optional[str] = None
    location: Optional[str] = None
    manager_name: Optional[str] = None
    is_active: bool = True


@dataclass(frozen=True)
class SiteAttendanceRow:
    site_id: str
    site_name: str
    client_name: str
    location: str
    manager_name: str
    total_employees: int
    present: int
    absent: int
    half_days: int
    leaves: int
    shortage: float
    attendance_rate: int
    total_days: int


@dataclass(frozen=True)
class SiteAttendanceReport:
    start_date: str
    end_date: str
    total_days: int
    total_sites: int
    total_employees: int
    total_present: int
    total_absent: int
    total_half_days: int
    total_leaves: int
    overall_attendance_rate: int
    sites: list[SiteAttendanceRow] = field(default_factory=list)


@dataclass(frozen=True)
class DepartmentAttendanceRow:
    department: str
    total_employees: int
    present: int
    absent: int
    half_days: int
    leaves: int
    shortage: float
    attendance_rate: int


@dataclass(frozen=True)
class SiteShortage:
    month: str
    site_id: str
    site_name: str
    absent: int
    half_days: int
    shortage: float


@dataclass(frozen=True)
class EmployeeShortage:
    month: str
    employee_id: str
    employee_name: str
    site_name: str
    absent: int
    half_days: int
    shortage: float


@dataclass(frozen=True)
class ShortageReport:
    by_site: list[SiteShortage]
    by_employee: list[EmployeeShortage]


@dataclass(frozen=True)
class MonthlyPayrollRow:
    month: str
    employee_count: int
    total_basic: Decimal
    total_allowances: Decimal
    total_deductions: Decimal
    total_net: Decimal
    total_paid: Decimal
    paid_count: int
    pending_count: int
    hold_count: int
    part_paid_count: int
