from datetime import date

from src.hr_backoffice.hr_backoffice.attendance.aggregator import (
    aggregate_attendance,
    attendance_rate,
    dedupe_by_day,
    shortage,
)
from src.hr_backoffice.hr_backoffice.attendance.service import AttendanceService
from tests.fakes import InMemoryAttendance, att


def test_first_record_for_a_day_wins():
    first = att("E1", date(2025, 3, 1), "present")
    second = att("E1", date(2025, 3, 1), "absent")

    assert dedupe_by_day([first, second]) == [first]


def test_aggregate_counts_each_status():
    records = [
        att("E1", date(2025, 3, 1), "present"),
        att("E1", date(2025, 3, 2), "half-day"),
        att("E1", date(2025, 3, 3), "absent"),
        att("E1", date(2025, 3, 4), "leave"),
        att("E1", date(2025, 3, 4), "present"),
        att("E2", date(2025, 3, 1), "present"),
    ]

    agg = aggregate_attendance(records, total_working_days=22, employee_ids=["E1", "E2", "E3"])

    assert agg["E1"].present_days == 1
    assert agg["E1"].half_days == 1
    assert agg["E1"].absent_days == 1
    assert agg["E1"].leave_days == 1
    assert agg["E1"].total_working_days == 22
    assert agg["E2"].present_days == 1
    assert agg["E3"].recorded_days == 0


def test_attendance_rate_weights_half_days_and_rounds():
    # (10 + 0.5) / 14 = 75%
    assert attendance_rate(present=10, half_days=1, employee_count=2, total_days=7) == 75
    # 2.5 / 3 = 83.33 -> 83
    assert attendance_rate(present=2, half_days=1, employee_count=1, total_days=3) == 83


def test_attendance_rate_is_zero_without_a_denominator():
    assert attendance_rate(present=3, half_days=0, employee_count=0, total_days=7) == 0
    assert attendance_rate(present=3, half_days=0, employee_count=2, total_days=0) == 0


def test_shortage_counts_half_days_as_half():
    assert shortage(absent=2, half_days=3) == 3.5


def test_monthly_aggregates_respect_zero_working_days():
    repo = InMemoryAttendance([att("E1", date(2025, 3, 1), "present"), att("E1", date(2025, 4, 1), "present")])
    svc = AttendanceService(repo, total_working_days=22)

    march = svc.monthly_aggregates("2025-03", employee_ids=["E1"], total_working_days=0)

    assert march["E1"].present_days == 1
    assert march["E1"].total_working_days == 0
    assert svc.aggregate_for_employee("E1", "2025-04").total_working_days == 22
