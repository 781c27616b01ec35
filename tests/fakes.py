"""In-memory repositories shared by the service and API tests."""

from __future__ import annotations

import dataclasses
from collections import defaultdict
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Mapping

from src.hr_backoffice.hr_backoffice.attendance.model import AttendanceRecord
from src.hr_backoffice.hr_backoffice.container import assemble_container
from src.hr_backoffice.hr_backoffice.core.enums import AttendanceStatus, DeductionStatus, DeductionType
from src.hr_backoffice.hr_backoffice.core.exceptions import DuplicateRecordError
from src.hr_backoffice.hr_backoffice.deductions.model import Deduction, DeductionStats
from src.hr_backoffice.hr_backoffice.payments.model import MethodShare, Payment, PeriodTotal
from src.hr_backoffice.hr_backoffice.payroll.model import PaymentUpdate, PayrollRecord
from src.hr_backoffice.hr_backoffice.reporting.model import Site
from src.hr_backoffice.hr_backoffice.salary_slips.model import SalarySlip
from src.hr_backoffice.hr_backoffice.salary_structures.model import SalaryStructure


def money(value) -> Decimal:
    return Decimal(str(value)).quantize(Decimal("0.01"))


def make_structure(employee_id: str = "EMP001", basic=22000, **amounts) -> SalaryStructure:
    values = {k: money(v) for k, v in amounts.items()}
    return SalaryStructure(employee_id=employee_id, basic_salary=money(basic), effective_from=date(2025, 1, 1), **values)


def att(employee_id: str, day: date, status, site: str = "Alpha Tower", department: str = "Security", name=None):
    return AttendanceRecord(
        employee_id=employee_id,
        work_date=day,
        status=status if isinstance(status, AttendanceStatus) else AttendanceStatus(status),
        site_id=site.lower().replace(" ", "-"),
        site_name=site,
        department=department,
        employee_name=name,
    )


class InMemoryAttendance:
    def __init__(self, records=()):
        self.records: list[AttendanceRecord] = []
        for r in records:
            self.create(r)

    def _match(self, r, *, start_date, end_date, employee_id=None, site_name=None, department=None):
        if start_date and r.work_date < start_date:
            return False
        if end_date and r.work_date > end_date:
            return False
        if employee_id and r.employee_id != employee_id:
            return False
        if site_name and r.site_name != site_name:
            return False
        if department and r.department != department:
            return False
        return True

    def list_records(self, *, start_date=None, end_date=None, employee_id=None, site_name=None, department=None,
                     offset=0, limit=100):
        rows = [
            r for r in self.records
            if self._match(r, start_date=start_date, end_date=end_date, employee_id=employee_id,
                           site_name=site_name, department=department)
        ]
        return rows[offset:offset + limit]

    def count_records(self, *, start_date=None, end_date=None, employee_id=None, site_name=None, department=None):
        return len(self.list_records(start_date=start_date, end_date=end_date, employee_id=employee_id,
                                     site_name=site_name, department=department, limit=10**9))

    def records_between(self, *, start_date, end_date, employee_ids=None):
        rows = [r for r in self.records if start_date <= r.work_date <= end_date]
        if employee_ids is not None:
            wanted = set(employee_ids)
            rows = [r for r in rows if r.employee_id in wanted]
        return rows

    def create(self, record: AttendanceRecord) -> int:
        new_id = len(self.records) + 1
        self.records.append(dataclasses.replace(record, attendance_id=new_id))
        return new_id


class InMemoryStructures:
    def __init__(self, structures=()):
        self.items: dict[int, SalaryStructure] = {}
        self._id = 0
        for s in structures:
            self.create(s)

    def _active_ids(self, employee_id, exclude=None):
        return [
            k for k, s in self.items.items()
            if s.employee_id == employee_id and s.is_active and k != exclude
        ]

    def list(self, *, is_active=None, search=None, offset=0, limit=100):
        rows = [s for s in self.items.values()
                if (is_active is None or s.is_active == is_active) and (not search or search in s.employee_id)]
        return rows[offset:offset + limit]

    def count(self, *, is_active=None, search=None):
        return len(self.list(is_active=is_active, search=search, limit=10**9))

    def get(self, structure_id):
        return self.items.get(int(structure_id))

    def get_active_for_employee(self, employee_id):
        ids = self._active_ids(employee_id)
        return self.items[ids[0]] if ids else None

    def list_for_employee(self, employee_id):
        return [s for s in reversed(list(self.items.values())) if s.employee_id == employee_id]

    def active_employee_ids(self):
        return sorted({s.employee_id for s in self.items.values() if s.is_active})

    def create(self, structure: SalaryStructure) -> int:
        if structure.is_active and self._active_ids(structure.employee_id):
            raise DuplicateRecordError("An active salary structure already exists for this employee")
        self._id += 1
        self.items[self._id] = dataclasses.replace(structure, structure_id=self._id)
        return self._id

    def update(self, structure_id, fields: Mapping[str, Any]) -> bool:
        current = self.items.get(int(structure_id))
        if not current:
            return False
        self.items[int(structure_id)] = dataclasses.replace(current, **fields)
        return True

    def set_active(self, structure_id, is_active: bool) -> bool:
        current = self.items.get(int(structure_id))
        if not current:
            return False
        if is_active and self._active_ids(current.employee_id, exclude=int(structure_id)):
            raise DuplicateRecordError("An active salary structure already exists for this employee")
        self.items[int(structure_id)] = dataclasses.replace(current, is_active=is_active)
        return True

    def delete(self, structure_id) -> bool:
        return self.items.pop(int(structure_id), None) is not None


class InMemoryPayroll:
    def __init__(self):
        self.items: dict[int, PayrollRecord] = {}
        self._id = 0
        self.create_calls = 0

    def _filtered(self, *, month=None, status=None, payment_status=None, search=None):
        return [
            r for r in self.items.values()
            if (not month or r.month == month)
            and (not status or r.status == status)
            and (not payment_status or r.payment_status == payment_status)
            and (not search or search in r.employee_id)
        ]

    def list(self, *, month=None, status=None, payment_status=None, search=None, offset=0, limit=100):
        return self._filtered(month=month, status=status, payment_status=payment_status,
                              search=search)[offset:offset + limit]

    def count(self, *, month=None, status=None, payment_status=None, search=None):
        return len(self._filtered(month=month, status=status, payment_status=payment_status, search=search))

    def list_all(self, *, month=None):
        return sorted(self._filtered(month=month), key=lambda r: (r.month, r.employee_id))

    def get(self, payroll_id):
        return self.items.get(int(payroll_id))

    def get_for_employee_month(self, employee_id, month):
        for r in self.items.values():
            if r.employee_id == employee_id and r.month == month:
                return r
        return None

    def create(self, record: PayrollRecord) -> int:
        self.create_calls += 1
        if self.get_for_employee_month(record.employee_id, record.month):
            raise DuplicateRecordError(f"Payroll already processed for {record.employee_id} in {record.month}")
        self._id += 1
        self.items[self._id] = dataclasses.replace(record, payroll_id=self._id)
        return self._id

    def update_payment(self, payroll_id, update: PaymentUpdate) -> bool:
        current = self.items.get(int(payroll_id))
        if not current:
            return False
        self.items[int(payroll_id)] = dataclasses.replace(
            current,
            status=update.record_status,
            payment_status=update.status,
            paid_amount=update.paid_amount,
            payment_date=update.payment_date,
            notes=update.notes,
        )
        return True

    def delete(self, payroll_id) -> bool:
        return self.items.pop(int(payroll_id), None) is not None


class InMemorySlips:
    def __init__(self):
        self.items: dict[int, SalarySlip] = {}
        self._id = 0

    def list(self, *, month=None, employee_id=None):
        return [s for s in reversed(list(self.items.values()))
                if (not month or s.month == month) and (not employee_id or s.employee_id == employee_id)]

    def get(self, slip_id):
        return self.items.get(int(slip_id))

    def latest_for_payroll(self, payroll_id):
        matches = [s for s in self.items.values() if s.payroll_id == int(payroll_id)]
        return matches[-1] if matches else None

    def latest_for_employee_month(self, employee_id, month):
        matches = [s for s in self.items.values() if s.employee_id == employee_id and s.month == month]
        return matches[-1] if matches else None

    def exists_for_payroll(self, payroll_id) -> bool:
        return self.latest_for_payroll(payroll_id) is not None

    def last_slip_number(self, prefix):
        numbers = sorted(
            (s.slip_number for s in self.items.values() if s.slip_number.startswith(prefix)),
            key=lambda n: int(n.rsplit("/", 1)[1]),
        )
        return numbers[-1] if numbers else None

    def create(self, slip: SalarySlip) -> int:
        if any(s.slip_number == slip.slip_number for s in self.items.values()):
            raise DuplicateRecordError(f"Slip number {slip.slip_number} already exists")
        self._id += 1
        self.items[self._id] = dataclasses.replace(slip, slip_id=self._id)
        return self._id

    def mark_emailed(self, slip_id, sent_at: datetime) -> bool:
        current = self.items.get(int(slip_id))
        if not current:
            return False
        self.items[int(slip_id)] = dataclasses.replace(current, email_sent=True, email_sent_at=sent_at)
        return True

    def delete(self, slip_id) -> bool:
        return self.items.pop(int(slip_id), None) is not None


class InMemoryDeductions:
    def __init__(self):
        self.items: dict[int, Deduction] = {}
        self._id = 0

    def _filtered(self, *, status=None, type=None, employee_id=None, start_date=None, end_date=None, search=None):
        out = []
        for d in self.items.values():
            if status and d.status != status:
                continue
            if type and d.type != type:
                continue
            if employee_id and d.employee_id != employee_id:
                continue
            if start_date and d.deduction_date < start_date:
                continue
            if end_date and d.deduction_date > end_date:
                continue
            if search and not any(search.lower() in (v or "").lower()
                                  for v in (d.employee_id, d.employee_name, d.description)):
                continue
            out.append(d)
        return list(reversed(out))

    def list(self, *, offset=0, limit=10, **filters):
        return self._filtered(**filters)[offset:offset + limit]

    def count(self, **filters):
        return len(self._filtered(**filters))

    def get(self, deduction_id):
        return self.items.get(int(deduction_id))

    def list_for_employee(self, employee_id):
        return [d for d in reversed(list(self.items.values())) if d.employee_id == employee_id]

    def list_for_month(self, applied_month):
        return [d for d in reversed(list(self.items.values())) if d.applied_month == applied_month]

    def stats(self) -> DeductionStats:
        items = list(self.items.values())
        zero = Decimal("0.00")
        return DeductionStats(
            total_deductions=sum((d.amount for d in items), zero),
            total_advances=sum((d.amount for d in items if d.type is DeductionType.ADVANCE), zero),
            total_fines=sum((d.amount for d in items if d.type is DeductionType.FINE), zero),
            pending_count=sum(1 for d in items if d.status is DeductionStatus.PENDING),
            approved_count=sum(1 for d in items if d.status is DeductionStatus.APPROVED),
            rejected_count=sum(1 for d in items if d.status is DeductionStatus.REJECTED),
            completed_count=sum(1 for d in items if d.status is DeductionStatus.COMPLETED),
            total_count=len(items),
        )

    def create(self, deduction: Deduction) -> int:
        self._id += 1
        self.items[self._id] = dataclasses.replace(deduction, deduction_id=self._id)
        return self._id

    def update(self, deduction_id, fields) -> bool:
        current = self.items.get(int(deduction_id))
        if not current:
            return False
        self.items[int(deduction_id)] = dataclasses.replace(current, **fields)
        return True

    def delete(self, deduction_id) -> bool:
        return self.items.pop(int(deduction_id), None) is not None


class InMemoryPayments:
    def __init__(self):
        self.items: dict[int, Payment] = {}
        self._id = 0

    def _filtered(self, *, status=None, method=None, start=None, end=None):
        rows = [
            p for p in self.items.values()
            if (not status or p.status == status)
            and (not method or p.method == method)
            and (not start or p.payment_date >= start)
            and (not end or p.payment_date <= end)
        ]
        return sorted(rows, key=lambda p: p.payment_date, reverse=True)

    def list(self, *, offset=0, limit=50, **filters):
        return self._filtered(**filters)[offset:offset + limit]

    def count(self, **filters):
        return len(self._filtered(**filters))

    def get(self, payment_id):
        return self.items.get(int(payment_id))

    def create(self, payment: Payment) -> int:
        self._id += 1
        self.items[self._id] = dataclasses.replace(payment, payment_id=self._id)
        return self._id

    def update(self, payment_id, fields) -> bool:
        current = self.items.get(int(payment_id))
        if not current:
            return False
        self.items[int(payment_id)] = dataclasses.replace(current, **fields)
        return True

    def delete(self, payment_id) -> bool:
        return self.items.pop(int(payment_id), None) is not None

    def method_distribution(self):
        amounts: dict[str, Decimal] = defaultdict(lambda: Decimal("0.00"))
        counts: dict[str, int] = defaultdict(int)
        for p in self.items.values():
            amounts[p.method] += p.amount
            counts[p.method] += 1
        shares = [MethodShare(method=m, amount=amounts[m], count=counts[m]) for m in amounts]
        return sorted(shares, key=lambda s: s.amount, reverse=True)

    def totals_by_period(self, date_format: str):
        amounts: dict[str, Decimal] = defaultdict(lambda: Decimal("0.00"))
        counts: dict[str, int] = defaultdict(int)
        for p in self.items.values():
            key = p.payment_date.strftime(date_format)
            amounts[key] += p.amount
            counts[key] += 1
        return [PeriodTotal(period=k, total_amount=amounts[k], count=counts[k]) for k in sorted(amounts)]


class InMemorySites:
    def __init__(self, sites=()):
        self.sites: list[Site] = list(sites)

    def list_sites(self, *, active_only: bool = True):
        return [s for s in self.sites if s.is_active or not active_only]


def make_container(
    *,
    attendance=(),
    structures=(),
    sites=(),
    total_working_days: int = 22,
    reuse_existing_slips: bool = False,
):
    return assemble_container(
        attendance_repo=InMemoryAttendance(attendance),
        structures_repo=InMemoryStructures(structures),
        payroll_repo=InMemoryPayroll(),
        slips_repo=InMemorySlips(),
        deductions_repo=InMemoryDeductions(),
        payments_repo=InMemoryPayments(),
        sites_repo=InMemorySites(sites),
        total_working_days=total_working_days,
        reuse_existing_slips=reuse_existing_slips,
    )
