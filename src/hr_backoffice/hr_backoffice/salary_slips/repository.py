from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import SalarySlip


class SalarySlipRepository(Protocol):
    def list(self, *, month: Optional[str] = None, employee_id: Optional[str] = None) -> Sequence[SalarySlip]:
        raise NotImplementedError

    def get(self, slip_id: int) -> Optional[SalarySlip]:
        raise NotImplementedError

    def latest_for_payroll(self, payroll_id: int) -> Optional[SalarySlip]:
        raise NotImplementedError

    def latest_for_employee_month(self, employee_id: str, month: str) -> Optional[SalarySlip]:
        raise NotImplementedError

    def exists_for_payroll(self, payroll_id: int) -> bool:
        raise NotImplementedError

    def last_slip_number(self, prefix: str) -> Optional[str]:
        """Highest slip number starting with prefix, if any."""

        raise NotImplementedError

    def create(self, slip: SalarySlip) -> int:
        """Raises DuplicateRecordError when the slip number is taken."""

        raise NotImplementedError

    def mark_emailed(self, slip_id: int, sent_at: datetime) -> bool:
        raise NotImplementedError

    def delete(self, slip_id: int) -> bool:
        raise NotImplementedError
