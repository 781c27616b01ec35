from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def list_records(
        self,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        employee_id: Optional[str] = None,
        site_name: Optional[str] = None,
        department: Optional[str] = None,
        offset: int = 0,
        limit: int = 100,
    ) -> Sequence[AttendanceRecord]:
        """Newest first, for screens and exports."""

        raise NotImplementedError

    def count_records(
        self,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        employee_id: Optional[str] = None,
        site_name: Optional[str] = None,
        department: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def records_between(
        self,
        *,
        start_date: date,
        end_date: date,
        employee_ids: Optional[Sequence[str]] = None,
    ) -> Sequence[AttendanceRecord]:
        """Insertion order, so the first record stored for a day wins on dedupe."""

        raise NotImplementedError

    def create(self, record: AttendanceRecord) -> int:
        raise NotImplementedError
