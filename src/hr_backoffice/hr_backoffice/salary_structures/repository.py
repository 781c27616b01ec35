from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from .model import SalaryStructure


class SalaryStructureRepository(Protocol):
    def list(
        self,
        *,
        is_active: Optional[bool] = None,
        search: Optional[str] = None,
        offset: int = 0,
        limit: int = 100,
    ) -> Sequence[SalaryStructure]:
        raise NotImplementedError

    def count(self, *, is_active: Optional[bool] = None, search: Optional[str] = None) -> int:
        raise NotImplementedError

    def get(self, structure_id: int) -> Optional[SalaryStructure]:
        raise NotImplementedError

    def get_active_for_employee(self, employee_id: str) -> Optional[SalaryStructure]:
        raise NotImplementedError

    def list_for_employee(self, employee_id: str) -> Sequence[SalaryStructure]:
        """All structures for an employee, newest first (history)."""

        raise NotImplementedError

    def active_employee_ids(self) -> Sequence[str]:
        raise NotImplementedError

    def create(self, structure: SalaryStructure) -> int:
        """Raises DuplicateRecordError when the employee already has an active structure."""

        raise NotImplementedError

    def update(self, structure_id: int, fields: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def set_active(self, structure_id: int, is_active: bool) -> bool:
        raise NotImplementedError

    def delete(self, structure_id: int) -> bool:
        raise NotImplementedError
