from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Mapping, Optional

from ..common.datetime_utils import now_local, require_month
from ..core.constants import SLIP_NUMBER_PREFIX
from ..core.enums import PayrollStatus
from ..core.exceptions import DuplicateRecordError, NotFoundError, ValidationError
from ..payroll.model import PayrollRecord
from ..payroll.repository import PayrollRepository
from .model import SalarySlip
from .repository import SalarySlipRepository

logger = logging.getLogger(__name__)

_NUMBER_ATTEMPTS = 3


def slip_prefix(at: datetime) -> str:
    return f"{SLIP_NUMBER_PREFIX}/{at:%Y}/{at:%m}/"


def next_slip_number(last: Optional[str], at: datetime) -> str:
    """SS/YYYY/MM/NNNN, numbered per generation month."""

    seq = 1
    if last:
        try:
            seq = int(last.rsplit("/", 1)[1]) + 1
        except (IndexError, ValueError):
            seq = 1
    return f"{slip_prefix(at)}{seq:04d}"


class SalarySlipService:
    """Generate and track salary slips.

    Generation always creates a new slip unless reuse_existing is set, in
    which case the latest slip of the payroll record is returned.
    """

    def __init__(
        self,
        slips: SalarySlipRepository,
        payroll: PayrollRepository,
        *,
        reuse_existing: bool = False,
        clock: Callable[[], datetime] = now_local,
    ):
        self._slips = slips
        self._payroll = payroll
        self._reuse_existing = bool(reuse_existing)
        self._clock = clock

    def list(self, *, month: Optional[str] = None, employee_id: Optional[str] = None) -> list[SalarySlip]:
        return list(self._slips.list(month=require_month(month) if month else None, employee_id=employee_id))

    def get(self, slip_id: int) -> SalarySlip:
        slip = self._slips.get(slip_id)
        if not slip:
            raise NotFoundError("Salary slip not found")
        return slip

    def get_for_employee_month(self, employee_id: str, month: str) -> SalarySlip:
        slip = self._slips.latest_for_employee_month(employee_id, require_month(month))
        if not slip:
            raise NotFoundError("Salary slip not found for this employee and month")
        return slip

    def payroll_for(self, slip: SalarySlip) -> Optional[PayrollRecord]:
        return self._payroll.get(slip.payroll_id)

    def generate(self, payload: Mapping[str, Any]) -> SalarySlip:
        try:
            payroll_id = int(payload.get("payrollId"))
        except (TypeError, ValueError):
            raise ValidationError("payrollId is required")

        record = self._payroll.get(payroll_id)
        if not record:
            raise NotFoundError("Payroll record not found")
        if record.status is PayrollStatus.PENDING:
            raise ValidationError("Payroll must be processed before generating a salary slip")

        if self._reuse_existing:
            existing = self._slips.latest_for_payroll(payroll_id)
            if existing:
                return existing

        now = self._clock()
        for attempt in range(_NUMBER_ATTEMPTS):
            number = next_slip_number(self._slips.last_slip_number(slip_prefix(now)), now)
            slip = SalarySlip(
                payroll_id=payroll_id,
                employee_id=record.employee_id,
                month=record.month,
                slip_number=number,
                basic_salary=record.basic_salary,
                allowances=record.allowances,
                deductions=record.deductions,
                net_salary=record.net_salary,
                present_days=record.present_days,
                absent_days=record.absent_days,
                half_days=record.half_days,
                leaves=record.leaves,
                generated_at=now,
            )
            try:
                new_id = self._slips.create(slip)
            except DuplicateRecordError:
                # Another generation took this number; read the sequence again.
                logger.warning("Slip number %s taken (attempt %d)", number, attempt + 1)
                continue
            logger.info("Generated salary slip %s for payroll %s", number, payroll_id)
            return self.get(new_id)

        raise DuplicateRecordError("Could not allocate a salary slip number, please retry")

    def mark_emailed(self, slip_id: int) -> SalarySlip:
        slip = self.get(slip_id)
        if slip.email_sent:
            return slip
        self._slips.mark_emailed(slip_id, self._clock())
        logger.info("Salary slip %s marked as emailed", slip.slip_number)
        return self.get(slip_id)

    def delete(self, slip_id: int) -> None:
        if not self._slips.delete(slip_id):
            raise NotFoundError("Salary slip not found")
