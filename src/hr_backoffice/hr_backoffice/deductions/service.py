from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Mapping, Optional

from ..common.datetime_utils import coerce_date, require_month
from ..common.validators import require_amount, require_non_empty
from ..core.enums import DeductionStatus, DeductionType
from ..core.exceptions import NotFoundError, ValidationError
from .model import ZERO, Deduction, DeductionStats, EmployeeDeductions, installment_amount
from .repository import DeductionRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeductionPage:
    deductions: list[Deduction]
    total: int


def parse_enum(enum_cls, value: Any, field_name: str):
    try:
        return enum_cls(str(value or "").strip().lower())
    except ValueError:
        allowed = ", ".join(e.value for e in enum_cls)
        raise ValidationError(f"{field_name} must be one of: {allowed}")


def _repayment_months(value: Any) -> int:
    if value in (None, ""):
        return 0
    try:
        months = int(value)
    except (TypeError, ValueError):
        raise ValidationError("repaymentMonths must be a whole number")
    if months < 0:
        raise ValidationError("repaymentMonths cannot be negative")
    return months


def derive_amounts(d: Deduction) -> Deduction:
    """Fines carry their amount as fineAmount; advances get an installment."""

    if d.type is DeductionType.FINE:
        d = dataclasses.replace(d, fine_amount=d.amount)
    if d.type is DeductionType.ADVANCE:
        d = dataclasses.replace(d, installment_amount=installment_amount(d.amount, d.repayment_months))
    else:
        d = dataclasses.replace(d, installment_amount=ZERO)
    return d


class DeductionService:
    def __init__(self, deductions: DeductionRepository):
        self._deductions = deductions

    def list(
        self,
        *,
        status: Optional[DeductionStatus] = None,
        type: Optional[DeductionType] = None,
        employee_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> DeductionPage:
        filters = dict(
            status=status,
            type=type,
            employee_id=employee_id,
            start_date=start_date,
            end_date=end_date,
            search=search,
        )
        rows = self._deductions.list(**filters, offset=(page - 1) * limit, limit=limit)
        return DeductionPage(deductions=list(rows), total=self._deductions.count(**filters))

    def get(self, deduction_id: int) -> Deduction:
        d = self._deductions.get(deduction_id)
        if not d:
            raise NotFoundError("Deduction not found")
        return d

    def create(self, payload: Mapping[str, Any]) -> Deduction:
        employee_id = require_non_empty(payload.get("employeeId"), "employeeId")
        d_type = parse_enum(DeductionType, payload.get("type"), "type")
        amount = require_amount(payload.get("amount"), "amount", allow_zero=False)
        applied_month = require_month(payload.get("appliedMonth"), "appliedMonth")

        deduction_date = coerce_date(payload.get("deductionDate")) or date.today()
        status = (
            parse_enum(DeductionStatus, payload.get("status"), "status")
            if payload.get("status")
            else DeductionStatus.PENDING
        )

        d = Deduction(
            employee_id=employee_id,
            employee_name=payload.get("employeeName") or None,
            type=d_type,
            amount=amount,
            applied_month=applied_month,
            deduction_date=deduction_date,
            description=str(payload.get("description") or "").strip(),
            status=status,
            repayment_months=_repayment_months(payload.get("repaymentMonths")),
            fine_amount=require_amount(payload.get("fineAmount"), "fineAmount"),
        )
        d = derive_amounts(d)
        new_id = self._deductions.create(d)
        logger.info("Created %s deduction %s for employee %s", d.type.value, new_id, employee_id)
        return self.get(new_id)

    def update(self, deduction_id: int, payload: Mapping[str, Any]) -> Deduction:
        current = self.get(deduction_id)

        changes: dict[str, Any] = {}
        if "type" in payload:
            changes["type"] = parse_enum(DeductionType, payload.get("type"), "type")
        if "amount" in payload:
            changes["amount"] = require_amount(payload.get("amount"), "amount", allow_zero=False)
        if "appliedMonth" in payload:
            changes["applied_month"] = require_month(payload.get("appliedMonth"), "appliedMonth")
        if "status" in payload:
            changes["status"] = parse_enum(DeductionStatus, payload.get("status"), "status")
        if "description" in payload:
            changes["description"] = str(payload.get("description") or "").strip()
        if "repaymentMonths" in payload:
            changes["repayment_months"] = _repayment_months(payload.get("repaymentMonths"))
        if "fineAmount" in payload:
            changes["fine_amount"] = require_amount(payload.get("fineAmount"), "fineAmount")
        if "deductionDate" in payload:
            d = coerce_date(payload.get("deductionDate"))
            if d is None:
                raise ValidationError("deductionDate must be YYYY-MM-DD")
            changes["deduction_date"] = d

        updated = derive_amounts(dataclasses.replace(current, **changes))
        changes["installment_amount"] = updated.installment_amount
        changes["fine_amount"] = updated.fine_amount

        if not self._deductions.update(deduction_id, changes):
            raise NotFoundError("Deduction not found")
        return self.get(deduction_id)

    def delete(self, deduction_id: int) -> None:
        if not self._deductions.delete(deduction_id):
            raise NotFoundError("Deduction not found")
        logger.info("Deleted deduction %s", deduction_id)

    def stats(self) -> DeductionStats:
        return self._deductions.stats()

    def for_employee(self, employee_id: str) -> list[Deduction]:
        return list(self._deductions.list_for_employee(employee_id))

    def by_month(self, year: str, month: str) -> tuple[str, list[EmployeeDeductions]]:
        applied_month = require_month(f"{year}-{str(month).zfill(2)}")

        groups: dict[str, list[Deduction]] = {}
        for d in self._deductions.list_for_month(applied_month):
            groups.setdefault(d.employee_id, []).append(d)

        out = [
            EmployeeDeductions(
                employee_id=eid,
                employee_name=next((d.employee_name for d in items if d.employee_name), None),
                total_deductions=sum((d.amount for d in items), ZERO),
                deductions=items,
            )
            for eid, items in groups.items()
        ]
        out.sort(key=lambda g: ((g.employee_name or "").lower(), g.employee_id))
        return applied_month, out
