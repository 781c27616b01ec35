from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import LedgerPaymentStatus


@dataclass(frozen=True)
class Payment:
    """Entry in the invoice payments ledger. Not linked to payroll."""

    invoice_id: str
    client: str
    amount: Decimal
    method: str
    payment_date: datetime
    status: LedgerPaymentStatus = LedgerPaymentStatus.PENDING
    payment_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class MethodShare:
    method: str
    amount: Decimal
    count: int


@dataclass(frozen=True)
class PeriodTotal:
    period: str
    total_amount: Decimal
    count: int
