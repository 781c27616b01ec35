from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Canonical day status. Raw spellings are mapped by attendance.normalize."""

    PRESENT = "present"
    ABSENT = "absent"
    HALF_DAY = "half-day"
    LEAVE = "leave"


class PayrollStatus(str, Enum):
    PENDING = "pending"
    PROCESSED = "processed"
    PAID = "paid"
    HOLD = "hold"
    PART_PAID = "part-paid"


class PaymentStatus(str, Enum):
    """Payment decision on a processed payroll record."""

    PENDING = "pending"
    PAID = "paid"
    HOLD = "hold"
    PART_PAID = "part-paid"


class DeductionType(str, Enum):
    ADVANCE = "advance"
    FINE = "fine"
    OTHER = "other"


class DeductionStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    COMPLETED = "completed"


class LedgerPaymentStatus(str, Enum):
    """Status of an entry in the payments ledger (not payroll)."""

    COMPLETED = "completed"
    FAILED = "failed"
    PENDING = "pending"
