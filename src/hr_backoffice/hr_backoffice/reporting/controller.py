from __future__ import annotations

from datetime import date, timedelta

from flask import Flask, request

from ..common.datetime_utils import coerce_date, now_local, require_month
from ..common.http import json_endpoint, ok
from ..container import Container
from ..core.exceptions import ValidationError
from .csv_export import attendance_filename, csv_response, to_csv
from .service import SITE_CSV_COLUMNS


def _range_args() -> tuple[date, date]:
    """startDate/endDate query args; defaults to the last 7 days."""

    today = now_local().date()
    start_raw, end_raw = request.args.get("startDate"), request.args.get("endDate")
    start = coerce_date(start_raw) if start_raw else today - timedelta(days=6)
    end = coerce_date(end_raw) if end_raw else today
    if start is None or end is None:
        raise ValidationError("startDate and endDate must be YYYY-MM-DD")
    return start, end


def register(app: Flask, container: Container) -> None:
    service = container.report_service

    @app.route("/api/sites", methods=["GET"], endpoint="sites_list")
    @json_endpoint
    def sites_list():
        return ok(service.sites())

    @app.route("/api/reports/attendance/sites", methods=["GET"], endpoint="reports_site_attendance")
    @json_endpoint
    def reports_site_attendance():
        start, end = _range_args()
        return ok(service.site_attendance(start, end))

    @app.route("/api/reports/attendance/sites.csv", methods=["GET"], endpoint="reports_site_attendance_csv")
    @json_endpoint
    def reports_site_attendance_csv():
        start, end = _range_args()
        report = service.site_attendance(start, end)
        text = to_csv(service.site_csv_rows(report.sites), SITE_CSV_COLUMNS)
        return csv_response(text, attendance_filename("all-sites", start, end))

    @app.route("/api/reports/attendance/departments", methods=["GET"], endpoint="reports_department_attendance")
    @json_endpoint
    def reports_department_attendance():
        start, end = _range_args()
        return ok(service.department_attendance(start, end))

    @app.route("/api/reports/attendance/shortage", methods=["GET"], endpoint="reports_shortage")
    @json_endpoint
    def reports_shortage():
        start, end = _range_args()
        return ok(service.shortage(start, end))

    @app.route("/api/reports/payroll/monthly", methods=["GET"], endpoint="reports_payroll_monthly")
    @json_endpoint
    def reports_payroll_monthly():
        month = request.args.get("month")
        return ok(service.payroll_monthly(require_month(month) if month else None))
