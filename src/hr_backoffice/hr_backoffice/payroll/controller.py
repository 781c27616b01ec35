from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import require_month
from ..common.http import json_body, json_endpoint, ok, pagination
from ..common.validators import parse_int
from ..core.enums import PaymentStatus, PayrollStatus
from ..core.exceptions import ValidationError
from ..container import Container
from ..reporting.csv_export import csv_response, payroll_filename, to_csv, xlsx_response
from .service import EXPORT_COLUMNS


def _enum_arg(enum_cls, name: str):
    raw = request.args.get(name)
    if not raw or raw == "all":
        return None
    try:
        return enum_cls(raw)
    except ValueError:
        raise ValidationError(f"Invalid {name}: {raw}")


def register(app: Flask, container: Container) -> None:
    service = container.payroll_service

    @app.route("/api/payroll", methods=["GET"], endpoint="payroll_list")
    @json_endpoint
    def payroll_list():
        month = request.args.get("month")
        page = parse_int(request.args.get("page"), 1)
        limit = parse_int(request.args.get("limit"), 100, maximum=1000)
        result = service.list(
            month=require_month(month) if month else None,
            status=_enum_arg(PayrollStatus, "status"),
            payment_status=_enum_arg(PaymentStatus, "paymentStatus"),
            search=request.args.get("search") or None,
            page=page,
            limit=limit,
        )
        return ok(result.records, pagination=pagination(page=page, limit=limit, total=result.total))

    @app.route("/api/payroll/summary", methods=["GET"], endpoint="payroll_summary")
    @json_endpoint
    def payroll_summary():
        return ok(service.summary(request.args.get("month") or None))

    @app.route("/api/payroll/export", methods=["GET"], endpoint="payroll_export")
    @json_endpoint
    def payroll_export():
        month = request.args.get("month") or None
        fmt = (request.args.get("format") or "csv").lower()
        rows = service.export_rows(month)
        if fmt == "xlsx":
            return xlsx_response(rows, EXPORT_COLUMNS, payroll_filename(month, "xlsx"), sheet="Payroll")
        if fmt != "csv":
            raise ValidationError("format must be csv or xlsx")
        return csv_response(to_csv(rows, EXPORT_COLUMNS), payroll_filename(month))

    @app.route("/api/payroll/<int:payroll_id>", methods=["GET"], endpoint="payroll_get")
    @json_endpoint
    def payroll_get(payroll_id: int):
        return ok(service.get(payroll_id))

    @app.route(
        "/api/payroll/employee/<employee_id>/month/<month>", methods=["GET"], endpoint="payroll_by_employee_month"
    )
    @json_endpoint
    def payroll_by_employee_month(employee_id: str, month: str):
        return ok(service.get_for_employee_month(employee_id, month))

    @app.route("/api/payroll/process", methods=["POST"], endpoint="payroll_process")
    @json_endpoint
    def payroll_process():
        record = service.process(json_body())
        return ok(record, message="Payroll processed successfully", status=201)

    @app.route("/api/payroll/bulk-process", methods=["POST"], endpoint="payroll_bulk_process")
    @json_endpoint
    def payroll_bulk_process():
        outcome = service.bulk_process(json_body())
        summary = outcome.summary
        return ok(
            {"results": outcome.results, "errors": outcome.errors, "summary": summary},
            message=f"Processed {summary['processed']} payroll records, {summary['failed']} failed",
        )

    @app.route(
        "/api/payroll/<int:payroll_id>/payment-status",
        methods=["PUT", "PATCH"],
        endpoint="payroll_payment_status",
    )
    @json_endpoint
    def payroll_payment_status(payroll_id: int):
        record = service.update_payment_status(payroll_id, json_body())
        return ok(record, message="Payment status updated successfully")

    @app.route("/api/payroll/<int:payroll_id>", methods=["DELETE"], endpoint="payroll_delete")
    @json_endpoint
    def payroll_delete(payroll_id: int):
        service.delete(payroll_id)
        return ok(message="Payroll record deleted successfully")
