from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Mapping, Optional

from ..common.datetime_utils import coerce_date
from ..common.serializers import camel
from ..common.validators import CENT, require_amount, require_non_empty
from ..core.exceptions import NotFoundError, ValidationError
from .model import (
    AMOUNT_FIELDS,
    DEDUCTION_FIELDS,
    EARNING_FIELDS,
    ZERO,
    SalaryStructure,
    StructureBreakdown,
    StructureSummary,
)
from .repository import SalaryStructureRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StructurePage:
    structures: list[SalaryStructure]
    total: int


def _percent(part: Decimal, whole: Decimal) -> str:
    if whole <= 0:
        return "0.00"
    return str((part * 100 / whole).quantize(CENT, rounding=ROUND_HALF_UP))


def _amounts_from_payload(payload: Mapping[str, Any], *, partial: bool) -> dict[str, Decimal]:
    """Read camelCase amount fields; in partial mode only the supplied ones."""

    amounts: dict[str, Decimal] = {}
    for name in AMOUNT_FIELDS:
        key = camel(name)
        if partial and key not in payload:
            continue
        amounts[name] = require_amount(payload.get(key), key)
    return amounts


class SalaryStructureService:
    def __init__(self, structures: SalaryStructureRepository):
        self._structures = structures

    def list(
        self,
        *,
        is_active: Optional[bool] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 100,
    ) -> StructurePage:
        rows = self._structures.list(is_active=is_active, search=search, offset=(page - 1) * limit, limit=limit)
        total = self._structures.count(is_active=is_active, search=search)
        return StructurePage(structures=list(rows), total=total)

    def get(self, structure_id: int) -> SalaryStructure:
        s = self._structures.get(structure_id)
        if not s:
            raise NotFoundError("Salary structure not found")
        return s

    def find_active_for_employee(self, employee_id: str) -> Optional[SalaryStructure]:
        return self._structures.get_active_for_employee(employee_id)

    def get_active_for_employee(self, employee_id: str) -> SalaryStructure:
        s = self._structures.get_active_for_employee(employee_id)
        if not s:
            raise NotFoundError(f"No active salary structure for employee {employee_id}")
        return s

    def history(self, employee_id: str) -> list[SalaryStructure]:
        return list(self._structures.list_for_employee(employee_id))

    def active_employee_ids(self) -> list[str]:
        return list(self._structures.active_employee_ids())

    def create(self, payload: Mapping[str, Any]) -> SalaryStructure:
        employee_id = require_non_empty(payload.get("employeeId"), "employeeId")

        data = dict(payload)
        if data.get("basicSalary") in (None, "") and data.get("monthlySalary") not in (None, ""):
            data["basicSalary"] = data["monthlySalary"]

        amounts = _amounts_from_payload(data, partial=False)
        if amounts["basic_salary"] <= 0:
            raise ValidationError("basicSalary must be greater than 0")

        effective_from = coerce_date(data.get("effectiveFrom"))
        structure = SalaryStructure(employee_id=employee_id, **amounts)
        if effective_from:
            structure = dataclasses.replace(structure, effective_from=effective_from)

        # Uniqueness of the active structure is enforced by the store.
        new_id = self._structures.create(structure)
        logger.info("Created salary structure %s for employee %s", new_id, employee_id)
        return self.get(new_id)

    def update(self, structure_id: int, payload: Mapping[str, Any]) -> SalaryStructure:
        fields: dict[str, Any] = _amounts_from_payload(payload, partial=True)
        if "basic_salary" in fields and fields["basic_salary"] <= 0:
            raise ValidationError("basicSalary must be greater than 0")
        if "effectiveFrom" in payload:
            d = coerce_date(payload.get("effectiveFrom"))
            if d is None:
                raise ValidationError("effectiveFrom must be YYYY-MM-DD")
            fields["effective_from"] = d

        if not self._structures.update(structure_id, fields):
            raise NotFoundError("Salary structure not found")
        return self.get(structure_id)

    def deactivate(self, structure_id: int) -> SalaryStructure:
        if not self._structures.set_active(structure_id, False):
            raise NotFoundError("Salary structure not found")
        logger.info("Deactivated salary structure %s", structure_id)
        return self.get(structure_id)

    def delete(self, structure_id: int) -> None:
        if not self._structures.delete(structure_id):
            raise NotFoundError("Salary structure not found")
        logger.info("Deleted salary structure %s", structure_id)

    def summary(self) -> StructureSummary:
        active = self._all_active()
        count = len(active)
        total_basic = sum((s.basic_salary for s in active), ZERO)
        total_allowances = sum((s.total_allowances for s in active), ZERO)
        avg_basic = int((total_basic / count).quantize(Decimal("1"), rounding=ROUND_HALF_UP)) if count else 0
        total_ctc = int((total_basic + total_allowances).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
        return StructureSummary(
            active_structures=count,
            avg_basic_salary=avg_basic,
            total_basic=total_basic,
            total_hra=sum((s.hra for s in active), ZERO),
            total_da=sum((s.da for s in active), ZERO),
            total_allowances=total_allowances,
            total_deductions=sum((s.total_deductions for s in active), ZERO),
            total_ctc=total_ctc,
        )

    def breakdown(self, employee_id: str) -> StructureBreakdown:
        s = self.get_active_for_employee(employee_id)
        gross = s.basic_salary + s.total_allowances
        net = gross - s.total_deductions
        earnings = {"basic_salary": s.basic_salary}
        earnings.update({f: getattr(s, f) for f in EARNING_FIELDS})
        return StructureBreakdown(
            employee_id=s.employee_id,
            earnings=earnings,
            deductions={f: getattr(s, f) for f in DEDUCTION_FIELDS},
            gross_salary=gross,
            total_deductions=s.total_deductions,
            net_salary=net,
            basic_percentage=_percent(s.basic_salary, gross),
            allowances_percentage=_percent(s.total_allowances, gross),
            deductions_percentage=_percent(s.total_deductions, gross),
        )

    def _all_active(self) -> list[SalaryStructure]:
        total = self._structures.count(is_active=True)
        if not total:
            return []
        return list(self._structures.list(is_active=True, offset=0, limit=total))
