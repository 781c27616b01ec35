from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import PaymentStatus, PayrollStatus

ZERO = Decimal("0.00")


@dataclass(frozen=True)
class PayrollBreakdown:
    """Result of one payroll calculation. All amounts are rounded to cents."""

    daily_rate: Decimal
    earned_basic: Decimal
    salary_loss: Decimal
    net_basic: Decimal
    total_allowances: Decimal
    total_deductions: Decimal
    net_salary: Decimal


@dataclass(frozen=True)
class PayrollRecord:
    """One processed payroll run for (employee_id, month).

    Amounts and attendance counts are a snapshot taken when the record was
    processed; later attendance or structure changes never alter it.
    """

    employee_id: str
    month: str
    basic_salary: Decimal
    allowances: Decimal
    deductions: Decimal
    net_salary: Decimal
    total_working_days: int
    present_days: float = 0
    absent_days: float = 0
    half_days: float = 0
    leaves: float = 0
    daily_rate: Decimal = ZERO
    earned_basic: Decimal = ZERO
    salary_loss: Decimal = ZERO
    net_basic: Decimal = ZERO
    line_items: dict = field(default_factory=dict)
    paid_amount: Decimal = ZERO
    status: PayrollStatus = PayrollStatus.PROCESSED
    payment_status: PaymentStatus = PaymentStatus.PENDING
    payment_date: Optional[date] = None
    notes: Optional[str] = None
    payroll_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class PaymentUpdate:
    """Fields written by a payment-status change."""

    status: PaymentStatus
    paid_amount: Decimal
    payment_date: Optional[date]
    notes: Optional[str]

    @property
    def record_status(self) -> PayrollStatus:
        # a processed record never goes back to pending
        if self.status is PaymentStatus.PENDING:
            return PayrollStatus.PROCESSED
        return PayrollStatus(self.status.value)


@dataclass(frozen=True)
class BulkError:
    employee_id: str
    error: str


@dataclass(frozen=True)
class BulkOutcome:
    month: str
    results: list[PayrollRecord]
    errors: list[BulkError]

    @property
    def summary(self) -> dict:
        processed = len(self.results)
        failed = len(self.errors)
        return {"processed": processed, "failed": failed, "total": processed + failed}


@dataclass(frozen=True)
class PayrollSummary:
    month: Optional[str]
    total_records: int
    total_amount: Decimal
    paid_amount: Decimal
    pending_amount: Decimal
    hold_amount: Decimal
    part_paid_amount: Decimal
    processed_count: int
    paid_count: int
    pending_count: int
    hold_count: int
    part_paid_count: int
