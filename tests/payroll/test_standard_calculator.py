from decimal import Decimal

import pytest

from src.hr_backoffice.hr_backoffice.attendance.model import AttendanceAggregate
from src.hr_backoffice.hr_backoffice.core.exceptions import ValidationError
from src.hr_backoffice.hr_backoffice.payroll.calculator.standard_calculator import StandardPayrollCalculator
from tests.fakes import make_structure


def _agg(present=0, absent=0, half=0, total=22):
    return AttendanceAggregate(
        employee_id="EMP001",
        present_days=present,
        absent_days=absent,
        half_days=half,
        total_working_days=total,
    )


def test_absences_reduce_basic_twice():
    structure = make_structure(basic=22000, hra=2000)

    b = StandardPayrollCalculator().calculate(structure, _agg(present=20, absent=2))

    assert b.daily_rate == Decimal("1000.00")
    assert b.earned_basic == Decimal("20000.00")
    assert b.salary_loss == Decimal("2000.00")
    assert b.net_basic == Decimal("18000.00")
    assert b.total_allowances == Decimal("2000.00")
    assert b.net_salary == Decimal("20000.00")


def test_full_attendance_pays_full_basic_plus_allowances():
    structure = make_structure(basic=22000, hra=2000)

    b = StandardPayrollCalculator().calculate(structure, _agg(present=22))

    assert b.net_salary == Decimal("24000.00")


def test_half_days_earn_half_a_day():
    structure = make_structure(basic=22000)

    b = StandardPayrollCalculator().calculate(structure, _agg(present=20, half=2))

    assert b.earned_basic == Decimal("21000.00")
    assert b.net_salary == Decimal("21000.00")


def test_leave_count_is_treated_as_loss():
    structure = make_structure(basic=22000)

    b = StandardPayrollCalculator().calculate(structure, _agg(present=20), leave_count=2)

    assert b.salary_loss == Decimal("2000.00")
    assert b.net_basic == Decimal("18000.00")


def test_net_salary_never_negative():
    structure = make_structure(basic=22000, provident_fund=5000, income_tax=5000)

    b = StandardPayrollCalculator().calculate(structure, _agg(present=2, absent=20))

    assert b.net_basic == Decimal("0.00")
    assert b.net_salary == Decimal("0.00")
    assert b.total_deductions == Decimal("10000.00")


def test_zero_working_days_yields_zero_pay():
    structure = make_structure(basic=22000, hra=2000)

    b = StandardPayrollCalculator().calculate(structure, _agg(present=5, total=0))

    assert b.daily_rate == Decimal("0.00")
    assert b.net_salary == Decimal("0.00")
    assert b.total_allowances == Decimal("2000.00")


def test_amounts_are_rounded_to_cents_and_repeatable():
    structure = make_structure(basic=10000, hra=333.33)
    calc = StandardPayrollCalculator()

    first = calc.calculate(structure, _agg(present=21, absent=1, total=23))
    second = calc.calculate(structure, _agg(present=21, absent=1, total=23))

    assert first == second
    assert first.daily_rate == Decimal("434.78")
    assert first.net_salary.as_tuple().exponent == -2


def test_non_positive_basic_is_rejected():
    with pytest.raises(ValidationError):
        StandardPayrollCalculator().calculate(make_structure(basic=0), _agg(present=22))
