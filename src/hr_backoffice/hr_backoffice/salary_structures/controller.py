from __future__ import annotations

from flask import Flask, request

from ..common.http import json_body, json_endpoint, ok, pagination
from ..common.validators import parse_bool, parse_int
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.salary_structure_service

    @app.route("/api/salary-structures", methods=["GET"], endpoint="salary_structures_list")
    @json_endpoint
    def salary_structures_list():
        page = parse_int(request.args.get("page"), 1)
        limit = parse_int(request.args.get("limit"), 100, maximum=1000)
        result = service.list(
            is_active=parse_bool(request.args.get("isActive")),
            search=request.args.get("search") or None,
            page=page,
            limit=limit,
        )
        return ok(result.structures, pagination=pagination(page=page, limit=limit, total=result.total))

    @app.route("/api/salary-structures/summary", methods=["GET"], endpoint="salary_structures_summary")
    @json_endpoint
    def salary_structures_summary():
        return ok(service.summary())

    @app.route(
        "/api/salary-structures/employee/<employee_id>", methods=["GET"], endpoint="salary_structures_by_employee"
    )
    @json_endpoint
    def salary_structures_by_employee(employee_id: str):
        return ok(service.get_active_for_employee(employee_id))

    @app.route(
        "/api/salary-structures/employee/<employee_id>/history",
        methods=["GET"],
        endpoint="salary_structures_history",
    )
    @json_endpoint
    def salary_structures_history(employee_id: str):
        return ok(service.history(employee_id))

    @app.route(
        "/api/salary-structures/employee/<employee_id>/breakdown",
        methods=["GET"],
        endpoint="salary_structures_breakdown",
    )
    @json_endpoint
    def salary_structures_breakdown(employee_id: str):
        return ok(service.breakdown(employee_id))

    @app.route("/api/salary-structures/<int:structure_id>", methods=["GET"], endpoint="salary_structures_get")
    @json_endpoint
    def salary_structures_get(structure_id: int):
        return ok(service.get(structure_id))

    @app.route("/api/salary-structures", methods=["POST"], endpoint="salary_structures_create")
    @json_endpoint
    def salary_structures_create():
        structure = service.create(json_body())
        return ok(structure, message="Salary structure created successfully", status=201)

    @app.route("/api/salary-structures/<int:structure_id>", methods=["PUT"], endpoint="salary_structures_update")
    @json_endpoint
    def salary_structures_update(structure_id: int):
        structure = service.update(structure_id, json_body())
        return ok(structure, message="Salary structure updated successfully")

    @app.route(
        "/api/salary-structures/<int:structure_id>/deactivate",
        methods=["PATCH"],
        endpoint="salary_structures_deactivate",
    )
    @json_endpoint
    def salary_structures_deactivate(structure_id: int):
        structure = service.deactivate(structure_id)
        return ok(structure, message="Salary structure deactivated successfully")

    @app.route("/api/salary-structures/<int:structure_id>", methods=["DELETE"], endpoint="salary_structures_delete")
    @json_endpoint
    def salary_structures_delete(structure_id: int):
        service.delete(structure_id)
        return ok(message="Salary structure deleted successfully")
