from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional

from ..common.datetime_utils import now_local
from ..common.validators import require_amount, require_non_empty
from ..core.enums import LedgerPaymentStatus
from ..core.exceptions import NotFoundError, ValidationError
from .model import MethodShare, Payment, PeriodTotal
from .repository import PaymentRepository

logger = logging.getLogger(__name__)

PERIOD_FORMATS = {
    "daily": "%Y-%m-%d",
    "weekly": "%Y-%U",
    "monthly": "%Y-%m",
    "yearly": "%Y",
}


def period_format(period: Optional[str]) -> str:
    """Grouping pattern for a stats period; unknown periods group monthly."""

    return PERIOD_FORMATS.get((period or "").lower(), PERIOD_FORMATS["monthly"])


def parse_datetime(value: Any, field_name: str) -> Optional[datetime]:
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        return value
    raw = str(value).strip().replace("Z", "")
    try:
        return datetime.fromisoformat(raw)
    except ValueError:
        raise ValidationError(f"{field_name} must be an ISO date or datetime")


def _status(value: Any) -> LedgerPaymentStatus:
    try:
        return LedgerPaymentStatus(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(s.value for s in LedgerPaymentStatus)
        raise ValidationError(f"status must be one of: {allowed}")


@dataclass(frozen=True)
class PaymentPage:
    payments: list[Payment]
    total: int


class PaymentService:
    def __init__(self, payments: PaymentRepository):
        self._payments = payments

    def list(
        self,
        *,
        status: Optional[str] = None,
        method: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        page: int = 1,
        limit: int = 50,
    ) -> PaymentPage:
        filters = dict(
            status=_status(status) if status else None,
            method=method or None,
            start=parse_datetime(start_date, "startDate"),
            end=parse_datetime(end_date, "endDate"),
        )
        rows = self._payments.list(**filters, offset=(page - 1) * limit, limit=limit)
        return PaymentPage(payments=list(rows), total=self._payments.count(**filters))

    def get(self, payment_id: int) -> Payment:
        p = self._payments.get(payment_id)
        if not p:
            raise NotFoundError("Payment not found")
        return p

    def create(self, payload: Mapping[str, Any]) -> Payment:
        payment = Payment(
            invoice_id=require_non_empty(payload.get("invoiceId"), "invoiceId"),
            client=require_non_empty(payload.get("client"), "client"),
            amount=require_amount(payload.get("amount"), "amount", allow_zero=False),
            method=require_non_empty(payload.get("method"), "method"),
            payment_date=parse_datetime(payload.get("date"), "date") or now_local(),
            status=_status(payload["status"]) if payload.get("status") else LedgerPaymentStatus.PENDING,
        )
        new_id = self._payments.create(payment)
        logger.info("Recorded payment %s for invoice %s", new_id, payment.invoice_id)
        return self.get(new_id)

    def update(self, payment_id: int, payload: Mapping[str, Any]) -> Payment:
        fields: dict[str, Any] = {}
        if payload.get("invoiceId"):
            fields["invoice_id"] = require_non_empty(payload["invoiceId"], "invoiceId")
        if payload.get("client"):
            fields["client"] = require_non_empty(payload["client"], "client")
        if payload.get("amount") not in (None, ""):
            fields["amount"] = require_amount(payload["amount"], "amount", allow_zero=False)
        if payload.get("date"):
            fields["payment_date"] = parse_datetime(payload["date"], "date")
        if payload.get("method"):
            fields["method"] = require_non_empty(payload["method"], "method")
        if payload.get("status"):
            fields["status"] = _status(payload["status"])

        if not self._payments.update(payment_id, fields):
            raise NotFoundError("Payment not found")
        return self.get(payment_id)

    def delete(self, payment_id: int) -> None:
        if not self._payments.delete(payment_id):
            raise NotFoundError("Payment not found")

    def method_distribution(self) -> list[MethodShare]:
        return list(self._payments.method_distribution())

    def stats(self, period: Optional[str] = None) -> list[PeriodTotal]:
        return list(self._payments.totals_by_period(period_format(period)))
