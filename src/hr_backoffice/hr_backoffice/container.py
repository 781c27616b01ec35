from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_TOTAL_WORKING_DAYS
from .database.connection import DBConfig, DatabaseConnection
from .deductions.mysql_deduction_repository import MySQLDeductionRepository
from .deductions.repository import DeductionRepository
from .deductions.service import DeductionService
from .payments.mysql_payment_repository import MySQLPaymentRepository
from .payments.repository import PaymentRepository
from .payments.service import PaymentService
from .payroll.mysql_payroll_repository import MySQLPayrollRepository
from .payroll.repository import PayrollRepository
from .payroll.service import PayrollService
from .reporting.mysql_site_repository import MySQLSiteRepository
from .reporting.repository import SiteRepository
from .reporting.service import ReportService
from .salary_slips.mysql_salary_slip_repository import MySQLSalarySlipRepository
from .salary_slips.repository import SalarySlipRepository
from .salary_slips.service import SalarySlipService
from .salary_structures.mysql_salary_structure_repository import MySQLSalaryStructureRepository
from .salary_structures.repository import SalaryStructureRepository
from .salary_structures.service import SalaryStructureService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    attendance_repo: AttendanceRepository
    structures_repo: SalaryStructureRepository
    payroll_repo: PayrollRepository
    slips_repo: SalarySlipRepository
    deductions_repo: DeductionRepository
    payments_repo: PaymentRepository
    sites_repo: SiteRepository

    attendance_service: AttendanceService
    salary_structure_service: SalaryStructureService
    payroll_service: PayrollService
    salary_slip_service: SalarySlipService
    deduction_service: DeductionService
    payment_service: PaymentService
    report_service: ReportService


def assemble_container(
    *,
    attendance_repo: AttendanceRepository,
    structures_repo: SalaryStructureRepository,
    payroll_repo: PayrollRepository,
    slips_repo: SalarySlipRepository,
    deductions_repo: DeductionRepository,
    payments_repo: PaymentRepository,
    sites_repo: SiteRepository,
    total_working_days: int = DEFAULT_TOTAL_WORKING_DAYS,
    reuse_existing_slips: bool = False,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services over any set of repositories (MySQL or in-memory)."""

    attendance_service = AttendanceService(attendance_repo, total_working_days=total_working_days)
    salary_structure_service = SalaryStructureService(structures_repo)
    payroll_service = PayrollService(
        payroll_repo,
        structures_repo,
        attendance_service,
        slips_repo,
        total_working_days=total_working_days,
    )
    salary_slip_service = SalarySlipService(slips_repo, payroll_repo, reuse_existing=reuse_existing_slips)
    deduction_service = DeductionService(deductions_repo)
    payment_service = PaymentService(payments_repo)
    report_service = ReportService(attendance_service, payroll_repo, sites_repo)

    return Container(
        conn=conn,
        attendance_repo=attendance_repo,
        structures_repo=structures_repo,
        payroll_repo=payroll_repo,
        slips_repo=slips_repo,
        deductions_repo=deductions_repo,
        payments_repo=payments_repo,
        sites_repo=sites_repo,
        attendance_service=attendance_service,
        salary_structure_service=salary_structure_service,
        payroll_service=payroll_service,
        salary_slip_service=salary_slip_service,
        deduction_service=deduction_service,
        payment_service=payment_service,
        report_service=report_service,
    )


def build_container(
    *,
    db_config: dict,
    total_working_days: int = DEFAULT_TOTAL_WORKING_DAYS,
    reuse_existing_slips: bool = False,
) -> Container:
    conn = DatabaseConnection(DBConfig.from_settings(db_config))

    return assemble_container(
        attendance_repo=MySQLAttendanceRepository(conn),
        structures_repo=MySQLSalaryStructureRepository(conn),
        payroll_repo=MySQLPayrollRepository(conn),
        slips_repo=MySQLSalarySlipRepository(conn),
        deductions_repo=MySQLDeductionRepository(conn),
        payments_repo=MySQLPaymentRepository(conn),
        sites_repo=MySQLSiteRepository(conn),
        total_working_days=total_working_days,
        reuse_existing_slips=reuse_existing_slips,
        conn=conn,
    )
