from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class SalarySlip:
    """Printable snapshot of a payroll record at generation time."""

    payroll_id: int
    employee_id: str
    month: str
    slip_number: str
    basic_salary: Decimal
    allowances: Decimal
    deductions: Decimal
    net_salary: Decimal
    generated_at: datetime
    present_days: float = 0
    absent_days: float = 0
    half_days: float = 0
    leaves: float = 0
    email_sent: bool = False
    email_sent_at: Optional[datetime] = None
    slip_id: Optional[int] = None
