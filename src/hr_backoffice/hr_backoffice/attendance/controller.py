from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import coerce_date, require_month
from ..common.http import json_body, json_endpoint, ok, pagination
from ..common.validators import parse_int
from ..core.constants import MAX_ATTENDANCE_PAGE_SIZE
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    def _date_arg(name: str):
        raw = request.args.get(name)
        if not raw:
            return None
        d = coerce_date(raw)
        if d is None:
            raise ValidationError(f"{name} must be YYYY-MM-DD")
        return d

    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_list")
    @json_endpoint
    def attendance_list():
        page = parse_int(request.args.get("page"), 1)
        limit = parse_int(request.args.get("limit"), 100, maximum=MAX_ATTENDANCE_PAGE_SIZE)
        result = container.attendance_service.list_records(
            start_date=_date_arg("startDate"),
            end_date=_date_arg("endDate"),
            employee_id=request.args.get("employeeId") or None,
            site_name=request.args.get("siteName") or None,
            department=request.args.get("department") or None,
            page=page,
            limit=limit,
        )
        return ok(result.records, pagination=pagination(page=page, limit=limit, total=result.total))

    @app.route("/api/attendance", methods=["POST"], endpoint="attendance_create")
    @json_endpoint
    def attendance_create():
        record = container.attendance_service.record(json_body())
        return ok(record, message="Attendance recorded", status=201)

    @app.route("/api/attendance/summary", methods=["GET"], endpoint="attendance_summary")
    @json_endpoint
    def attendance_summary():
        month = require_month(request.args.get("month"))
        total_days = parse_int(
            request.args.get("totalWorkingDays"), container.attendance_service.total_working_days, minimum=0
        )
        aggregates = container.attendance_service.monthly_aggregates(month, total_working_days=total_days)
        rows = sorted(aggregates.values(), key=lambda a: a.employee_id)
        return ok(rows, month=month)
