from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from src.hr_backoffice.hr_backoffice.core.enums import PaymentStatus, PayrollStatus
from src.hr_backoffice.hr_backoffice.core.exceptions import DuplicateRecordError, NotFoundError, ValidationError
from src.hr_backoffice.hr_backoffice.payroll.service import EXPORT_COLUMNS
from tests.fakes import att, make_container, make_structure


def _processed(container, employee_id="EMP001", month="2025-03", **counts):
    payload = {"employeeId": employee_id, "month": month, "presentDays": 20, "absentDays": 2, "halfDays": 0}
    payload.update(counts)
    return container.payroll_service.process(payload)


def test_process_stores_snapshot_with_explicit_counts():
    c = make_container(structures=[make_structure(basic=22000, hra=2000)])

    rec = _processed(c)

    assert rec.payroll_id is not None
    assert rec.net_salary == Decimal("20000.00")
    assert rec.allowances == Decimal("2000.00")
    assert rec.present_days == 20
    assert rec.total_working_days == 22
    assert rec.status is PayrollStatus.PROCESSED
    assert rec.payment_status is PaymentStatus.PENDING
    assert rec.paid_amount == Decimal("0.00")
    assert rec.line_items["hra"] == Decimal("2000.00")


def test_process_aggregates_stored_attendance_when_counts_missing():
    records = [att("EMP001", date(2025, 3, d), "present") for d in range(1, 21)]
    records += [att("EMP001", date(2025, 3, 21), "absent"), att("EMP001", date(2025, 3, 24), "absent")]
    c = make_container(attendance=records, structures=[make_structure(basic=22000, hra=2000)])

    rec = c.payroll_service.process({"employeeId": "EMP001", "month": "2025-03"})

    assert rec.present_days == 20
    assert rec.absent_days == 2
    assert rec.net_salary == Decimal("20000.00")


def test_processing_twice_is_rejected_without_a_second_record():
    c = make_container(structures=[make_structure()])
    _processed(c)

    with pytest.raises(DuplicateRecordError):
        _processed(c, presentDays=22, absentDays=0)

    assert c.payroll_repo.count(month="2025-03") == 1
    assert c.payroll_repo.get_for_employee_month("EMP001", "2025-03").present_days == 20


def test_process_without_active_structure_is_not_found():
    c = make_container()

    with pytest.raises(NotFoundError):
        _processed(c, employee_id="GHOST")


def test_process_validates_month_and_counts():
    c = make_container(structures=[make_structure()])

    with pytest.raises(ValidationError):
        _processed(c, month="2025-13")
    with pytest.raises(ValidationError):
        _processed(c, absentDays=-1)
    with pytest.raises(ValidationError):
        _processed(c, presentDays="NaN")
    with pytest.raises(ValidationError):
        _processed(c, leaves="inf")
    assert c.payroll_repo.count(month="2025-03") == 0


def test_bulk_process_reports_failures_per_employee():
    c = make_container(structures=[make_structure("E1"), make_structure("E2", basic=11000)])
    _processed(c, employee_id="E2")

    outcome = c.payroll_service.bulk_process(
        {
            "month": "2025-03",
            "employeeIds": ["E1", "E2", "E3"],
            "attendanceMap": {"E1": {"presentDays": 22}},
        }
    )

    assert [r.employee_id for r in outcome.results] == ["E1"]
    assert outcome.results[0].net_salary == Decimal("22000.00")
    assert sorted(e.employee_id for e in outcome.errors) == ["E2", "E3"]
    assert outcome.summary == {"processed": 1, "failed": 2, "total": 3}


def test_bulk_process_keeps_going_after_a_bad_row():
    records = [att("E3", date(2025, 3, d), "present") for d in range(3, 6)]
    c = make_container(attendance=records, structures=[make_structure("E1"), make_structure("E2"), make_structure("E3")])

    outcome = c.payroll_service.bulk_process(
        {
            "month": "2025-03",
            "employeeIds": ["E1", "E2", "E3"],
            "attendanceMap": {"E1": {"presentDays": "NaN"}, "E2": {"presentDays": 22}, "E3": None},
        }
    )

    assert [e.employee_id for e in outcome.errors] == ["E1"]
    assert [r.employee_id for r in outcome.results] == ["E2", "E3"]
    assert c.payroll_repo.get_for_employee_month("E2", "2025-03").net_salary == Decimal("22000.00")
    assert c.payroll_repo.get_for_employee_month("E3", "2025-03").present_days == 3
    assert outcome.summary == {"processed": 2, "failed": 1, "total": 3}


def test_bulk_process_records_unexpected_errors_per_employee(monkeypatch):
    c = make_container(structures=[make_structure("E1"), make_structure("E2")])
    svc = c.payroll_service
    original = svc._active_structure

    def flaky(employee_id):
        if employee_id == "E1":
            raise RuntimeError("connection reset")
        return original(employee_id)

    monkeypatch.setattr(svc, "_active_structure", flaky)

    outcome = svc.bulk_process({"month": "2025-03", "attendanceMap": {"E1": {}, "E2": {"presentDays": 22}}})

    assert [e.employee_id for e in outcome.errors] == ["E1"]
    assert "connection reset" not in outcome.errors[0].error
    assert [r.employee_id for r in outcome.results] == ["E2"]


def test_bulk_process_defaults_to_active_structures():
    records = [att("E1", date(2025, 3, 3), "present")]
    c = make_container(attendance=records, structures=[make_structure("E1"), make_structure("E2")])

    outcome = c.payroll_service.bulk_process({"month": "2025-03"})

    assert sorted(r.employee_id for r in outcome.results) == ["E1", "E2"]
    assert outcome.errors == []
    e1 = next(r for r in outcome.results if r.employee_id == "E1")
    assert e1.present_days == 1


def test_paid_requires_date_and_pays_full_net():
    c = make_container(structures=[make_structure(basic=22000, hra=2000)])
    rec = _processed(c)

    with pytest.raises(ValidationError):
        c.payroll_service.update_payment_status(rec.payroll_id, {"status": "paid"})

    paid = c.payroll_service.update_payment_status(rec.payroll_id, {"status": "paid", "paymentDate": "2025-04-01"})

    assert paid.payment_status is PaymentStatus.PAID
    assert paid.status is PayrollStatus.PAID
    assert paid.paid_amount == paid.net_salary
    assert paid.payment_date == date(2025, 4, 1)


def test_part_paid_amount_must_be_within_net():
    c = make_container(structures=[make_structure(basic=22000, hra=2000)])
    rec = _processed(c)
    svc = c.payroll_service

    with pytest.raises(ValidationError):
        svc.update_payment_status(rec.payroll_id, {"status": "part-paid", "paymentDate": "2025-04-01", "paidAmount": 25000})
    with pytest.raises(ValidationError):
        svc.update_payment_status(rec.payroll_id, {"status": "part-paid", "paymentDate": "2025-04-01", "paidAmount": 0})

    full = svc.update_payment_status(
        rec.payroll_id, {"status": "part-paid", "paymentDate": "2025-04-01", "paidAmount": "20000"}
    )
    assert full.paid_amount == Decimal("20000.00")

    part = svc.update_payment_status(
        rec.payroll_id, {"status": "part-paid", "paymentDate": "2025-04-02", "paidAmount": 5000}
    )
    assert part.payment_status is PaymentStatus.PART_PAID
    assert part.paid_amount == Decimal("5000.00")


def test_hold_keeps_previous_amount_and_date():
    c = make_container(structures=[make_structure()])
    rec = _processed(c)
    svc = c.payroll_service
    svc.update_payment_status(
        rec.payroll_id, {"status": "part-paid", "paymentDate": "2025-04-01", "paidAmount": 1000, "notes": "first"}
    )

    held = svc.update_payment_status(rec.payroll_id, {"status": "hold"})

    assert held.payment_status is PaymentStatus.HOLD
    assert held.paid_amount == Decimal("1000.00")
    assert held.payment_date == date(2025, 4, 1)
    assert held.notes == "first"


def test_reset_to_pending_keeps_record_processed_and_slip_ready():
    c = make_container(structures=[make_structure()])
    rec = _processed(c)
    svc = c.payroll_service

    svc.update_payment_status(rec.payroll_id, {"status": "hold"})
    reset = svc.update_payment_status(rec.payroll_id, {"status": "pending"})

    assert reset.payment_status is PaymentStatus.PENDING
    assert reset.status is PayrollStatus.PROCESSED
    slip = c.salary_slip_service.generate({"payrollId": rec.payroll_id})
    assert slip.payroll_id == rec.payroll_id


def test_unknown_payment_status_is_rejected():
    c = make_container(structures=[make_structure()])
    rec = _processed(c)

    with pytest.raises(ValidationError):
        c.payroll_service.update_payment_status(rec.payroll_id, {"status": "settled"})


def test_delete_refused_once_a_slip_exists():
    c = make_container(structures=[make_structure("E1"), make_structure("E2")])
    with_slip = _processed(c, employee_id="E1")
    without_slip = _processed(c, employee_id="E2")
    c.salary_slip_service.generate({"payrollId": with_slip.payroll_id})

    with pytest.raises(ValidationError):
        c.payroll_service.delete(with_slip.payroll_id)

    c.payroll_service.delete(without_slip.payroll_id)
    with pytest.raises(NotFoundError):
        c.payroll_service.get(without_slip.payroll_id)


def test_summary_buckets_by_payment_status():
    c = make_container(structures=[make_structure("E1"), make_structure("E2"), make_structure("E3")])
    svc = c.payroll_service
    r1 = _processed(c, employee_id="E1", presentDays=22, absentDays=0)
    r2 = _processed(c, employee_id="E2", presentDays=22, absentDays=0)
    _processed(c, employee_id="E3", presentDays=22, absentDays=0)
    svc.update_payment_status(r1.payroll_id, {"status": "paid", "paymentDate": "2025-04-01"})
    svc.update_payment_status(r2.payroll_id, {"status": "part-paid", "paymentDate": "2025-04-01", "paidAmount": 2000})

    s = svc.summary("2025-03")

    assert s.total_records == 3
    assert s.total_amount == Decimal("66000.00")
    assert s.paid_amount == Decimal("22000.00")
    assert s.part_paid_amount == Decimal("2000.00")
    assert s.pending_amount == Decimal("42000.00")
    assert (s.paid_count, s.part_paid_count, s.pending_count, s.processed_count) == (1, 1, 1, 1)


def test_export_rows_follow_column_order():
    c = make_container(structures=[make_structure()])
    _processed(c)

    rows = c.payroll_service.export_rows("2025-03")

    assert list(rows[0].keys()) == EXPORT_COLUMNS
    assert rows[0]["Payment Date"] == ""
    assert rows[0]["Status"] == "processed"
