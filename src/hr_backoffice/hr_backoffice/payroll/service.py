from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Mapping, Optional, Sequence

from ..attendance.model import AttendanceAggregate
from ..attendance.service import AttendanceService
from ..common.datetime_utils import coerce_date, require_month
from ..common.validators import require_amount, require_count, require_non_empty
from ..core.constants import DEFAULT_TOTAL_WORKING_DAYS
from ..core.enums import PaymentStatus, PayrollStatus
from ..core.exceptions import DomainError, NotFoundError, ValidationError
from ..salary_slips.repository import SalarySlipRepository
from ..salary_structures.model import DEDUCTION_FIELDS, EARNING_FIELDS, SalaryStructure
from ..salary_structures.repository import SalaryStructureRepository
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import ZERO, BulkError, BulkOutcome, PaymentUpdate, PayrollRecord, PayrollSummary
from .repository import PayrollRepository

logger = logging.getLogger(__name__)

_COUNT_KEYS = ("presentDays", "absentDays", "halfDays")

EXPORT_COLUMNS = [
    "Employee ID",
    "Month",
    "Total Working Days",
    "Present Days",
    "Absent Days",
    "Half Days",
    "Leaves",
    "Basic Salary",
    "Allowances",
    "Deductions",
    "Net Salary",
    "Paid Amount",
    "Status",
    "Payment Status",
    "Payment Date",
    "Notes",
]


@dataclass(frozen=True)
class PayrollPage:
    records: list[PayrollRecord]
    total: int


def _parse_payment_status(value: Any) -> PaymentStatus:
    try:
        return PaymentStatus(str(value or "").strip().lower())
    except ValueError:
        allowed = ", ".join(s.value for s in PaymentStatus)
        raise ValidationError(f"status must be one of: {allowed}")


def _optional_date(payload: Mapping[str, Any], key: str) -> Optional[date]:
    raw = payload.get(key)
    if raw in (None, ""):
        return None
    d = coerce_date(raw)
    if d is None:
        raise ValidationError(f"{key} must be YYYY-MM-DD")
    return d


class PayrollService:
    def __init__(
        self,
        payroll: PayrollRepository,
        structures: SalaryStructureRepository,
        attendance: AttendanceService,
        slips: SalarySlipRepository,
        *,
        calculator: Optional[PayrollCalculator] = None,
        total_working_days: int = DEFAULT_TOTAL_WORKING_DAYS,
    ):
        self._payroll = payroll
        self._structures = structures
        self._attendance = attendance
        self._slips = slips
        self._calculator = calculator or StandardPayrollCalculator()
        self._total_working_days = int(total_working_days)

    # ----- reads -----

    def list(
        self,
        *,
        month: Optional[str] = None,
        status: Optional[PayrollStatus] = None,
        payment_status: Optional[PaymentStatus] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 100,
    ) -> PayrollPage:
        filters = dict(month=month, status=status, payment_status=payment_status, search=search)
        rows = self._payroll.list(**filters, offset=(page - 1) * limit, limit=limit)
        return PayrollPage(records=list(rows), total=self._payroll.count(**filters))

    def get(self, payroll_id: int) -> PayrollRecord:
        rec = self._payroll.get(payroll_id)
        if not rec:
            raise NotFoundError("Payroll record not found")
        return rec

    def get_for_employee_month(self, employee_id: str, month: str) -> PayrollRecord:
        rec = self._payroll.get_for_employee_month(employee_id, require_month(month))
        if not rec:
            raise NotFoundError("Payroll record not found for this employee and month")
        return rec

    # ----- processing -----

    def _total_days(self, payload: Mapping[str, Any]) -> int:
        raw = payload.get("totalWorkingDays")
        if raw in (None, ""):
            return self._total_working_days
        days = require_count(raw, "totalWorkingDays")
        return int(days)

    @staticmethod
    def _explicit_aggregate(employee_id: str, counts: Mapping[str, Any], total_days: int) -> AttendanceAggregate:
        return AttendanceAggregate(
            employee_id=employee_id,
            present_days=require_count(counts.get("presentDays"), "presentDays"),
            absent_days=require_count(counts.get("absentDays"), "absentDays"),
            half_days=require_count(counts.get("halfDays"), "halfDays"),
            total_working_days=total_days,
        )

    def _build_record(
        self,
        structure: SalaryStructure,
        aggregate: AttendanceAggregate,
        *,
        month: str,
        leaves: float,
        notes: Optional[str],
    ) -> PayrollRecord:
        b = self._calculator.calculate(structure, aggregate, leave_count=leaves)
        return PayrollRecord(
            employee_id=structure.employee_id,
            month=month,
            basic_salary=structure.basic_salary,
            allowances=b.total_allowances,
            deductions=b.total_deductions,
            net_salary=b.net_salary,
            total_working_days=int(aggregate.total_working_days),
            present_days=aggregate.present_days,
            absent_days=aggregate.absent_days,
            half_days=aggregate.half_days,
            leaves=leaves,
            daily_rate=b.daily_rate,
            earned_basic=b.earned_basic,
            salary_loss=b.salary_loss,
            net_basic=b.net_basic,
            line_items={f: getattr(structure, f) for f in EARNING_FIELDS + DEDUCTION_FIELDS},
            paid_amount=ZERO,
            status=PayrollStatus.PROCESSED,
            payment_status=PaymentStatus.PENDING,
            notes=notes,
        )

    def _store(self, record: PayrollRecord) -> PayrollRecord:
        # The unique (employee_id, month) key decides duplicates; no pre-read.
        new_id = self._payroll.create(record)
        logger.info(
            "Processed payroll %s for employee %s month %s net=%s",
            new_id,
            record.employee_id,
            record.month,
            record.net_salary,
        )
        return self.get(new_id)

    def _active_structure(self, employee_id: str) -> SalaryStructure:
        structure = self._structures.get_active_for_employee(employee_id)
        if not structure:
            raise NotFoundError(f"Active salary structure not found for employee {employee_id}")
        return structure

    def process(self, payload: Mapping[str, Any]) -> PayrollRecord:
        employee_id = require_non_empty(payload.get("employeeId"), "employeeId")
        month = require_month(payload.get("month"))
        structure = self._active_structure(employee_id)
        total_days = self._total_days(payload)

        if any(payload.get(k) not in (None, "") for k in _COUNT_KEYS):
            aggregate = self._explicit_aggregate(employee_id, payload, total_days)
        else:
            aggregate = self._attendance.aggregate_for_employee(employee_id, month, total_working_days=total_days)

        record = self._build_record(
            structure,
            aggregate,
            month=month,
            leaves=require_count(payload.get("leaves"), "leaves"),
            notes=payload.get("notes") or None,
        )
        return self._store(record)

    def bulk_process(self, payload: Mapping[str, Any]) -> BulkOutcome:
        """Process every requested employee independently for one month."""

        month = require_month(payload.get("month"))
        total_days = self._total_days(payload)

        employee_ids: Sequence[str] = payload.get("employeeIds") or self._structures.active_employee_ids()
        employee_ids = [str(e) for e in employee_ids]
        attendance_map: Mapping[str, Any] = payload.get("attendanceMap") or {}

        missing = [e for e in employee_ids if attendance_map.get(e) is None]
        stored = (
            self._attendance.monthly_aggregates(month, employee_ids=missing, total_working_days=total_days)
            if missing
            else {}
        )

        results: list[PayrollRecord] = []
        errors: list[BulkError] = []
        for employee_id in employee_ids:
            try:
                structure = self._active_structure(employee_id)
                counts = attendance_map.get(employee_id)
                if counts is not None:
                    if not isinstance(counts, Mapping):
                        raise ValidationError("attendanceMap entries must be objects")
                    aggregate = self._explicit_aggregate(employee_id, counts, total_days)
                    leaves = require_count(counts.get("leaves"), "leaves")
                else:
                    aggregate = stored[employee_id]
                    leaves = 0
                record = self._build_record(structure, aggregate, month=month, leaves=leaves, notes=None)
                results.append(self._store(record))
            except DomainError as e:
                logger.warning("Bulk payroll skipped employee %s for %s: %s", employee_id, month, e)
                errors.append(BulkError(employee_id=employee_id, error=str(e)))
            except Exception:
                logger.exception("Bulk payroll failed for employee %s in %s", employee_id, month)
                errors.append(BulkError(employee_id=employee_id, error="Unexpected error while processing payroll"))

        logger.info("Bulk payroll %s: %d processed, %d failed", month, len(results), len(errors))
        return BulkOutcome(month=month, results=results, errors=errors)

    # ----- payment lifecycle -----

    def update_payment_status(self, payroll_id: int, payload: Mapping[str, Any]) -> PayrollRecord:
        target = _parse_payment_status(payload.get("status"))
        record = self.get(payroll_id)
        net = record.net_salary

        payment_date = _optional_date(payload, "paymentDate")
        notes = payload["notes"] if "notes" in payload else record.notes

        if target in (PaymentStatus.PAID, PaymentStatus.PART_PAID) and payment_date is None:
            raise ValidationError(f"paymentDate is required for status {target.value}")

        if target is PaymentStatus.PAID:
            paid_amount = net
        elif target is PaymentStatus.PART_PAID:
            paid_amount = require_amount(payload.get("paidAmount"), "paidAmount")
            if paid_amount <= 0:
                raise ValidationError("paidAmount must be greater than 0 for part-paid")
            if paid_amount > net:
                raise ValidationError("paidAmount cannot exceed net salary")
        else:
            # hold / pending keep what was recorded unless new values are supplied.
            if payload.get("paidAmount") not in (None, ""):
                paid_amount = require_amount(payload.get("paidAmount"), "paidAmount")
                if paid_amount > net:
                    raise ValidationError("paidAmount cannot exceed net salary")
            else:
                paid_amount = record.paid_amount
            if payment_date is None:
                payment_date = record.payment_date

        update = PaymentUpdate(status=target, paid_amount=paid_amount, payment_date=payment_date, notes=notes)
        if not self._payroll.update_payment(payroll_id, update):
            raise NotFoundError("Payroll record not found")
        logger.info("Payroll %s payment status -> %s (paid=%s)", payroll_id, target.value, paid_amount)
        return self.get(payroll_id)

    def delete(self, payroll_id: int) -> None:
        self.get(payroll_id)
        if self._slips.exists_for_payroll(payroll_id):
            raise ValidationError("Cannot delete payroll with a generated salary slip")
        if not self._payroll.delete(payroll_id):
            raise NotFoundError("Payroll record not found")
        logger.info("Deleted payroll %s", payroll_id)

    # ----- rollups -----

    def summary(self, month: Optional[str] = None) -> PayrollSummary:
        records = self._payroll.list_all(month=require_month(month) if month else None)

        amounts = {"total": ZERO, "paid": ZERO, "pending": ZERO, "hold": ZERO, "part_paid": ZERO}
        counts = {"processed": 0, "paid": 0, "pending": 0, "hold": 0, "part_paid": 0}
        for r in records:
            amounts["total"] += r.net_salary
            if r.status is PayrollStatus.PROCESSED:
                counts["processed"] += 1

            if r.payment_status is PaymentStatus.PAID:
                counts["paid"] += 1
                amounts["paid"] += r.paid_amount
            elif r.payment_status is PaymentStatus.HOLD:
                counts["hold"] += 1
                amounts["hold"] += r.net_salary
            elif r.payment_status is PaymentStatus.PART_PAID:
                counts["part_paid"] += 1
                amounts["part_paid"] += r.paid_amount
                amounts["pending"] += r.net_salary - r.paid_amount
            else:
                counts["pending"] += 1
                amounts["pending"] += r.net_salary

        return PayrollSummary(
            month=month or None,
            total_records=len(records),
            total_amount=amounts["total"],
            paid_amount=amounts["paid"],
            pending_amount=amounts["pending"],
            hold_amount=amounts["hold"],
            part_paid_amount=amounts["part_paid"],
            processed_count=counts["processed"],
            paid_count=counts["paid"],
            pending_count=counts["pending"],
            hold_count=counts["hold"],
            part_paid_count=counts["part_paid"],
        )

    def export_rows(self, month: Optional[str] = None) -> list[dict]:
        rows = []
        for r in self._payroll.list_all(month=require_month(month) if month else None):
            rows.append(
                {
                    "Employee ID": r.employee_id,
                    "Month": r.month,
                    "Total Working Days": r.total_working_days,
                    "Present Days": r.present_days,
                    "Absent Days": r.absent_days,
                    "Half Days": r.half_days,
                    "Leaves": r.leaves,
                    "Basic Salary": r.basic_salary,
                    "Allowances": r.allowances,
                    "Deductions": r.deductions,
                    "Net Salary": r.net_salary,
                    "Paid Amount": r.paid_amount,
                    "Status": r.status.value,
                    "Payment Status": r.payment_status.value,
                    "Payment Date": r.payment_date.isoformat() if r.payment_date else "",
                    "Notes": r.notes or "",
                }
            )
        return rows
