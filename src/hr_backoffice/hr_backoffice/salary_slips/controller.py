from __future__ import annotations

from flask import Flask, render_template, request

from ..common.http import json_body, json_endpoint, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.salary_slip_service

    @app.route("/api/salary-slips", methods=["GET"], endpoint="salary_slips_list")
    @json_endpoint
    def salary_slips_list():
        slips = service.list(
            month=request.args.get("month") or None,
            employee_id=request.args.get("employeeId") or None,
        )
        return ok(slips)

    @app.route("/api/salary-slips", methods=["POST"], endpoint="salary_slips_create")
    @app.route("/api/salary-slips/generate", methods=["POST"], endpoint="salary_slips_generate")
    @json_endpoint
    def salary_slips_generate():
        slip = service.generate(json_body())
        return ok(slip, message="Salary slip generated successfully", status=201)

    @app.route("/api/salary-slips/<int:slip_id>", methods=["GET"], endpoint="salary_slips_get")
    @json_endpoint
    def salary_slips_get(slip_id: int):
        return ok(service.get(slip_id))

    @app.route(
        "/api/salary-slips/employee/<employee_id>/month/<month>",
        methods=["GET"],
        endpoint="salary_slips_by_employee_month",
    )
    @json_endpoint
    def salary_slips_by_employee_month(employee_id: str, month: str):
        return ok(service.get_for_employee_month(employee_id, month))

    @app.route("/api/salary-slips/<int:slip_id>/print", methods=["GET"], endpoint="salary_slips_print")
    @json_endpoint
    def salary_slips_print(slip_id: int):
        slip = service.get(slip_id)
        return render_template("salary_slip.html", slip=slip, payroll=service.payroll_for(slip))

    @app.route("/api/salary-slips/<int:slip_id>/email", methods=["PATCH"], endpoint="salary_slips_email")
    @json_endpoint
    def salary_slips_email(slip_id: int):
        return ok(service.mark_emailed(slip_id), message="Salary slip marked as emailed")

    @app.route("/api/salary-slips/<int:slip_id>", methods=["DELETE"], endpoint="salary_slips_delete")
    @json_endpoint
    def salary_slips_delete(slip_id: int):
        service.delete(slip_id)
        return ok(message="Salary slip deleted successfully")
