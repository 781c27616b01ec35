from __future__ import annotations

from decimal import Decimal

import pytest

from src.hr_backoffice.hr_backoffice.core.exceptions import DuplicateRecordError, NotFoundError, ValidationError
from src.hr_backoffice.hr_backoffice.salary_structures.service import SalaryStructureService
from tests.fakes import InMemoryStructures, make_structure


def test_monthly_salary_is_used_when_basic_missing():
    svc = SalaryStructureService(InMemoryStructures())

    s = svc.create({"employeeId": "E1", "monthlySalary": "18000", "hra": 1500, "effectiveFrom": "2025-02-01"})

    assert s.basic_salary == Decimal("18000.00")
    assert s.hra == Decimal("1500.00")
    assert s.is_active
    assert str(s.effective_from) == "2025-02-01"


def test_basic_salary_must_be_positive():
    svc = SalaryStructureService(InMemoryStructures())

    with pytest.raises(ValidationError):
        svc.create({"employeeId": "E1", "basicSalary": 0})
    with pytest.raises(ValidationError):
        svc.create({"employeeId": "E1", "basicSalary": 1000, "hra": -5})


def test_second_active_structure_is_rejected():
    svc = SalaryStructureService(InMemoryStructures([make_structure("E1")]))

    with pytest.raises(DuplicateRecordError):
        svc.create({"employeeId": "E1", "basicSalary": 30000})


def test_deactivate_then_create_keeps_history():
    repo = InMemoryStructures([make_structure("E1", basic=20000)])
    svc = SalaryStructureService(repo)
    old = svc.get_active_for_employee("E1")

    svc.deactivate(old.structure_id)
    new = svc.create({"employeeId": "E1", "basicSalary": 25000})

    assert svc.get_active_for_employee("E1").structure_id == new.structure_id
    assert [s.basic_salary for s in svc.history("E1")] == [Decimal("25000.00"), Decimal("20000.00")]


def test_partial_update_touches_only_supplied_fields():
    repo = InMemoryStructures([make_structure("E1", basic=20000, hra=1000)])
    svc = SalaryStructureService(repo)

    s = svc.update(1, {"da": 500})

    assert s.da == Decimal("500.00")
    assert s.hra == Decimal("1000.00")
    assert s.basic_salary == Decimal("20000.00")


def test_missing_structure_is_not_found():
    svc = SalaryStructureService(InMemoryStructures())

    with pytest.raises(NotFoundError):
        svc.get_active_for_employee("E404")
    with pytest.raises(NotFoundError):
        svc.delete(99)


def test_summary_and_breakdown():
    repo = InMemoryStructures(
        [
            make_structure("E1", basic=20000, hra=2000, provident_fund=1000),
            make_structure("E2", basic=10001, da=1000),
        ]
    )
    svc = SalaryStructureService(repo)

    summary = svc.summary()
    assert summary.active_structures == 2
    assert summary.avg_basic_salary == 15001
    assert summary.total_ctc == 33001
    assert summary.total_deductions == Decimal("1000.00")

    b = svc.breakdown("E1")
    assert b.gross_salary == Decimal("22000.00")
    assert b.net_salary == Decimal("21000.00")
    assert b.basic_percentage == "90.91"
    assert b.allowances_percentage == "9.09"
    assert b.deductions_percentage == "4.55"
