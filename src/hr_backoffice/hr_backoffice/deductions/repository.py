from __future__ import annotations

from datetime import date
from typing import Any, Mapping, Optional, Protocol, Sequence

from ..core.enums import DeductionStatus, DeductionType
from .model import Deduction, DeductionStats


class DeductionRepository(Protocol):
    def list(
        self,
        *,
        status: Optional[DeductionStatus] = None,
        type: Optional[DeductionType] = None,
        employee_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        search: Optional[str] = None,
        offset: int = 0,
        limit: int = 10,
    ) -> Sequence[Deduction]:
        raise NotImplementedError

    def count(
        self,
        *,
        status: Optional[DeductionStatus] = None,
        type: Optional[DeductionType] = None,
        employee_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        search: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def get(self, deduction_id: int) -> Optional[Deduction]:
        raise NotImplementedError

    def list_for_employee(self, employee_id: str) -> Sequence[Deduction]:
        raise NotImplementedError

    def list_for_month(self, applied_month: str) -> Sequence[Deduction]:
        raise NotImplementedError

    def stats(self) -> DeductionStats:
        raise NotImplementedError

    def create(self, deduction: Deduction) -> int:
        raise NotImplementedError

    def update(self, deduction_id: int, fields: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def delete(self, deduction_id: int) -> bool:
        raise NotImplementedError
