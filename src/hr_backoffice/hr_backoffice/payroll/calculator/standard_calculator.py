from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from ...attendance.model import AttendanceAggregate
from ...core.exceptions import ValidationError
from ...salary_structures.model import SalaryStructure
from ..model import ZERO, PayrollBreakdown
from .base import PayrollCalculator

CENT = Decimal("0.01")


def _days(value) -> Decimal:
    return Decimal(str(value or 0))


def _cents(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


class StandardPayrollCalculator(PayrollCalculator):
    """Prorate basic salary by attendance, then add allowances and subtract deductions.

    dailyRate   = basic / totalWorkingDays
    earnedBasic = present * dailyRate + halfDays * dailyRate / 2
    salaryLoss  = (absent + leaveCount) * dailyRate
    netBasic    = max(0, earnedBasic - salaryLoss)
    netSalary   = max(0, netBasic + allowances - deductions)

    Approved leave (leave_count) is supplied separately from the aggregate's
    own leave bucket, which does not affect pay.
    """

    def calculate(
        self,
        structure: SalaryStructure,
        aggregate: AttendanceAggregate,
        *,
        leave_count: float = 0,
    ) -> PayrollBreakdown:
        if structure.basic_salary <= 0:
            raise ValidationError("basicSalary must be greater than 0")

        total_allowances = _cents(structure.total_allowances)
        total_deductions = _cents(structure.total_deductions)

        total_days = _days(aggregate.total_working_days)
        if total_days <= 0:
            return PayrollBreakdown(
                daily_rate=ZERO,
                earned_basic=ZERO,
                salary_loss=ZERO,
                net_basic=ZERO,
                total_allowances=total_allowances,
                total_deductions=total_deductions,
                net_salary=ZERO,
            )

        daily_rate = structure.basic_salary / total_days
        earned = _days(aggregate.present_days) * daily_rate + _days(aggregate.half_days) * (daily_rate / 2)
        loss = (_days(aggregate.absent_days) + _days(leave_count)) * daily_rate
        net_basic = max(ZERO, earned - loss)
        net_salary = max(ZERO, net_basic + total_allowances - total_deductions)

        return PayrollBreakdown(
            daily_rate=_cents(daily_rate),
            earned_basic=_cents(earned),
            salary_loss=_cents(loss),
            net_basic=_cents(net_basic),
            total_allowances=total_allowances,
            total_deductions=total_deductions,
            net_salary=_cents(net_salary),
        )
