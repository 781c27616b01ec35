from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one employee's status on one calendar day."""

    employee_id: str
    work_date: date
    status: AttendanceStatus
    site_id: Optional[str] = None
    site_name: Optional[str] = None
    department: Optional[str] = None
    employee_name: Optional[str] = None
    attendance_id: Optional[int] = None


@dataclass(frozen=True)
class AttendanceAggregate:
    """Derived per-employee counts for a period. Never persisted."""

    employee_id: str
    present_days: int = 0
    absent_days: int = 0
    half_days: int = 0
    leave_days: int = 0
    total_working_days: int = 0

    @property
    def recorded_days(self) -> int:
        return self.present_days + self.absent_days + self.half_days + self.leave_days
