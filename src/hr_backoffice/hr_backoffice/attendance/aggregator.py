"""Reduce daily attendance records into per-employee counts."""

from __future__ import annotations

import math
from typing import Iterable, Optional, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceAggregate, AttendanceRecord


def dedupe_by_day(records: Iterable[AttendanceRecord]) -> list[AttendanceRecord]:
    """Keep the first record seen for each (employee, date)."""

    seen: set[tuple[str, object]] = set()
    out: list[AttendanceRecord] = []
    for r in records:
        key = (r.employee_id, r.work_date)
        if key in seen:
            continue
        seen.add(key)
        out.append(r)
    return out


def aggregate_attendance(
    records: Iterable[AttendanceRecord],
    *,
    total_working_days: int,
    employee_ids: Optional[Sequence[str]] = None,
) -> dict[str, AttendanceAggregate]:
    """Count present/absent/half-day/leave days per employee.

    total_working_days comes from policy (or the caller's calendar); holidays
    and weekly-offs are not known here. Employees listed in employee_ids but
    without records get all-zero counts.
    """

    counts: dict[str, dict[AttendanceStatus, int]] = {}
    for eid in employee_ids or ():
        counts.setdefault(str(eid), {s: 0 for s in AttendanceStatus})

    for r in dedupe_by_day(records):
        bucket = counts.setdefault(r.employee_id, {s: 0 for s in AttendanceStatus})
        bucket[r.status] += 1

    return {
        eid: AttendanceAggregate(
            employee_id=eid,
            present_days=c[AttendanceStatus.PRESENT],
            absent_days=c[AttendanceStatus.ABSENT],
            half_days=c[AttendanceStatus.HALF_DAY],
            leave_days=c[AttendanceStatus.LEAVE],
            total_working_days=int(total_working_days),
        )
        for eid, c in counts.items()
    }


def attendance_rate(*, present: float, half_days: float, employee_count: int, total_days: int) -> int:
    """Percentage of required attendance met, half days weighted 0.5.

    Returns 0 when there is nothing to divide by.
    """

    denominator = employee_count * total_days
    if denominator <= 0:
        return 0
    return int(math.floor(100 * (present + 0.5 * half_days) / denominator + 0.5))


def shortage(*, absent: float, half_days: float) -> float:
    return absent + 0.5 * half_days
