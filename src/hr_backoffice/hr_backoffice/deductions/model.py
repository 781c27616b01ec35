from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from ..core.enums import DeductionStatus, DeductionType

ZERO = Decimal("0.00")
CENT = Decimal("0.01")


def installment_amount(amount: Decimal, repayment_months: int) -> Decimal:
    """amount / months rounded to cents; the whole amount when months is 0."""

    amount = Decimal(amount)
    if repayment_months <= 0:
        return amount.quantize(CENT, rounding=ROUND_HALF_UP)
    return (amount / Decimal(repayment_months)).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class Deduction:
    """Advance, fine or other deduction raised against an employee.

    Kept apart from payroll: a deduction never changes a payroll record.
    """

    employee_id: str
    type: DeductionType
    amount: Decimal
    applied_month: str
    deduction_date: date
    description: str = ""
    status: DeductionStatus = DeductionStatus.PENDING
    repayment_months: int = 0
    installment_amount: Decimal = ZERO
    fine_amount: Decimal = ZERO
    employee_name: Optional[str] = None
    deduction_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class DeductionStats:
    total_deductions: Decimal = ZERO
    total_advances: Decimal = ZERO
    total_fines: Decimal = ZERO
    pending_count: int = 0
    approved_count: int = 0
    rejected_count: int = 0
    completed_count: int = 0
    total_count: int = 0


@dataclass(frozen=True)
class EmployeeDeductions:
    employee_id: str
    employee_name: Optional[str]
    total_deductions: Decimal
    deductions: list[Deduction] = field(default_factory=list)
