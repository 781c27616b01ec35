from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import coerce_date
from ..common.http import json_body, json_endpoint, ok, pagination
from ..common.validators import parse_int
from ..container import Container
from ..core.enums import DeductionStatus, DeductionType
from .service import parse_enum

PREFIX = "/api/deductions"


def register(app: Flask, container: Container) -> None:
    service = container.deduction_service

    def _filter(enum_cls, name: str):
        raw = request.args.get(name)
        if not raw or raw == "all":
            return None
        return parse_enum(enum_cls, raw, name)

    @app.route(f"{PREFIX}/health", methods=["GET"], endpoint="deductions_health")
    def deductions_health():
        return jsonify({"status": "OK"}), 200

    @app.route(f"{PREFIX}/deductions", methods=["GET"], endpoint="deductions_list")
    @json_endpoint
    def deductions_list():
        page = parse_int(request.args.get("page"), 1)
        limit = parse_int(request.args.get("limit"), 10, maximum=1000)
        result = service.list(
            status=_filter(DeductionStatus, "status"),
            type=_filter(DeductionType, "type"),
            employee_id=request.args.get("employeeId") or None,
            start_date=coerce_date(request.args.get("startDate")),
            end_date=coerce_date(request.args.get("endDate")),
            search=request.args.get("search") or None,
            page=page,
            limit=limit,
        )
        return ok(result.deductions, pagination=pagination(page=page, limit=limit, total=result.total))

    @app.route(f"{PREFIX}/deductions/stats", methods=["GET"], endpoint="deductions_stats")
    @json_endpoint
    def deductions_stats():
        return ok(service.stats())

    @app.route(f"{PREFIX}/deductions/month/<year>/<month>", methods=["GET"], endpoint="deductions_by_month")
    @json_endpoint
    def deductions_by_month(year: str, month: str):
        applied_month, groups = service.by_month(year, month)
        return ok(groups, month=applied_month)

    @app.route(f"{PREFIX}/deductions/<int:deduction_id>", methods=["GET"], endpoint="deductions_get")
    @json_endpoint
    def deductions_get(deduction_id: int):
        return ok(service.get(deduction_id))

    @app.route(f"{PREFIX}/deductions", methods=["POST"], endpoint="deductions_create")
    @json_endpoint
    def deductions_create():
        return ok(service.create(json_body()), message="Deduction created successfully", status=201)

    @app.route(f"{PREFIX}/deductions/<int:deduction_id>", methods=["PUT"], endpoint="deductions_update")
    @json_endpoint
    def deductions_update(deduction_id: int):
        return ok(service.update(deduction_id, json_body()), message="Deduction updated successfully")

    @app.route(f"{PREFIX}/deductions/<int:deduction_id>", methods=["DELETE"], endpoint="deductions_delete")
    @json_endpoint
    def deductions_delete(deduction_id: int):
        service.delete(deduction_id)
        return ok(message="Deduction deleted successfully")

    @app.route(f"{PREFIX}/employees/<employee_id>/deductions", methods=["GET"], endpoint="deductions_by_employee")
    @json_endpoint
    def deductions_by_employee(employee_id: str):
        return ok(service.for_employee(employee_id))

    @app.route(f"{PREFIX}/employees/active", methods=["GET"], endpoint="deductions_active_employees")
    @json_endpoint
    def deductions_active_employees():
        ids = container.salary_structure_service.active_employee_ids()
        return ok([{"employeeId": eid} for eid in ids])
