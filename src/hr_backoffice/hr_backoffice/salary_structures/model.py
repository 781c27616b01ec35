from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

ZERO = Decimal("0.00")

EARNING_FIELDS = (
    "hra",
    "da",
    "special_allowance",
    "conveyance",
    "medical_allowance",
    "other_allowances",
    "leave_encashment",
    "arrears",
)

DEDUCTION_FIELDS = (
    "provident_fund",
    "professional_tax",
    "income_tax",
    "other_deductions",
    "esic",
    "advance",
    "mlwf",
)

AMOUNT_FIELDS = ("basic_salary",) + EARNING_FIELDS + DEDUCTION_FIELDS


@dataclass(frozen=True)
class SalaryStructure:
    """Fixed monthly compensation template for one employee."""

    employee_id: str
    basic_salary: Decimal
    hra: Decimal = ZERO
    da: Decimal = ZERO
    special_allowance: Decimal = ZERO
    conveyance: Decimal = ZERO
    medical_allowance: Decimal = ZERO
    other_allowances: Decimal = ZERO
    leave_encashment: Decimal = ZERO
    arrears: Decimal = ZERO
    provident_fund: Decimal = ZERO
    professional_tax: Decimal = ZERO
    income_tax: Decimal = ZERO
    other_deductions: Decimal = ZERO
    esic: Decimal = ZERO
    advance: Decimal = ZERO
    mlwf: Decimal = ZERO
    effective_from: date = field(default_factory=date.today)
    is_active: bool = True
    structure_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def total_allowances(self) -> Decimal:
        return sum((getattr(self, f) for f in EARNING_FIELDS), ZERO)

    @property
    def total_deductions(self) -> Decimal:
        return sum((getattr(self, f) for f in DEDUCTION_FIELDS), ZERO)


@dataclass(frozen=True)
class StructureBreakdown:
    employee_id: str
    earnings: dict
    deductions: dict
    gross_salary: Decimal
    total_deductions: Decimal
    net_salary: Decimal
    basic_percentage: str
    allowances_percentage: str
    deductions_percentage: str


@dataclass(frozen=True)
class StructureSummary:
    active_structures: int
    avg_basic_salary: int
    total_basic: Decimal
    total_hra: Decimal
    total_da: Decimal
    total_allowances: Decimal
    total_deductions: Decimal
    total_ctc: int
