from __future__ import annotations

from abc import ABC, abstractmethod

from ...attendance.model import AttendanceAggregate
from ...salary_structures.model import SalaryStructure
from ..model import PayrollBreakdown


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def calculate(
        self,
        structure: SalaryStructure,
        aggregate: AttendanceAggregate,
        *,
        leave_count: float = 0,
    ) -> PayrollBreakdown:
        raise NotImplementedError
