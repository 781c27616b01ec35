from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import PaymentStatus, PayrollStatus
from .model import PaymentUpdate, PayrollRecord


class PayrollRepository(Protocol):
    def list(
        self,
        *,
        month: Optional[str] = None,
        status: Optional[PayrollStatus] = None,
        payment_status: Optional[PaymentStatus] = None,
        search: Optional[str] = None,
        offset: int = 0,
        limit: int = 100,
    ) -> Sequence[PayrollRecord]:
        raise NotImplementedError

    def count(
        self,
        *,
        month: Optional[str] = None,
        status: Optional[PayrollStatus] = None,
        payment_status: Optional[PaymentStatus] = None,
        search: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def list_all(self, *, month: Optional[str] = None) -> Sequence[PayrollRecord]:
        """Every record (optionally for one month), ordered by month then employee."""

        raise NotImplementedError

    def get(self, payroll_id: int) -> Optional[PayrollRecord]:
        raise NotImplementedError

    def get_for_employee_month(self, employee_id: str, month: str) -> Optional[PayrollRecord]:
        raise NotImplementedError

    def create(self, record: PayrollRecord) -> int:
        """Insert a record. Raises DuplicateRecordError when (employee_id, month) exists."""

        raise NotImplementedError

    def update_payment(self, payroll_id: int, update: PaymentUpdate) -> bool:
        raise NotImplementedError

    def delete(self, payroll_id: int) -> bool:
        raise NotImplementedError
