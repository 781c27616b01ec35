from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping, Optional, Protocol, Sequence

from ..core.enums import LedgerPaymentStatus
from .model import MethodShare, Payment, PeriodTotal


class PaymentRepository(Protocol):
    def list(
        self,
        *,
        status: Optional[LedgerPaymentStatus] = None,
        method: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        offset: int = 0,
        limit: int = 50,
    ) -> Sequence[Payment]:
        raise NotImplementedError

    def count(
        self,
        *,
        status: Optional[LedgerPaymentStatus] = None,
        method: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> int:
        raise NotImplementedError

    def get(self, payment_id: int) -> Optional[Payment]:
        raise NotImplementedError

    def create(self, payment: Payment) -> int:
        raise NotImplementedError

    def update(self, payment_id: int, fields: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def delete(self, payment_id: int) -> bool:
        raise NotImplementedError

    def method_distribution(self) -> Sequence[MethodShare]:
        """Amount and count per method, largest amount first."""

        raise NotImplementedError

    def totals_by_period(self, date_format: str) -> Sequence[PeriodTotal]:
        """Group by payment_date rendered with a strftime/DATE_FORMAT pattern, ascending."""

        raise NotImplementedError
