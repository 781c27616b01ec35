from __future__ import annotations

from flask import Flask, request

from ..common.http import json_body, json_endpoint, ok, pagination
from ..common.validators import parse_int
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.payment_service

    @app.route("/api/payments", methods=["GET"], endpoint="payments_list")
    @json_endpoint
    def payments_list():
        page = parse_int(request.args.get("page"), 1)
        limit = parse_int(request.args.get("limit"), 50, maximum=1000)
        result = service.list(
            status=request.args.get("status") or None,
            method=request.args.get("method") or None,
            start_date=request.args.get("startDate"),
            end_date=request.args.get("endDate"),
            page=page,
            limit=limit,
        )
        return ok(result.payments, pagination=pagination(page=page, limit=limit, total=result.total))

    @app.route("/api/payments/methods/distribution", methods=["GET"], endpoint="payments_distribution")
    @json_endpoint
    def payments_distribution():
        return ok(service.method_distribution())

    @app.route("/api/payments/stats", methods=["GET"], endpoint="payments_stats")
    @json_endpoint
    def payments_stats():
        return ok(service.stats(request.args.get("period")))

    @app.route("/api/payments/<int:payment_id>", methods=["GET"], endpoint="payments_get")
    @json_endpoint
    def payments_get(payment_id: int):
        return ok(service.get(payment_id))

    @app.route("/api/payments", methods=["POST"], endpoint="payments_create")
    @json_endpoint
    def payments_create():
        return ok(service.create(json_body()), message="Payment created successfully", status=201)

    @app.route("/api/payments/<int:payment_id>", methods=["PUT"], endpoint="payments_update")
    @json_endpoint
    def payments_update(payment_id: int):
        return ok(service.update(payment_id, json_body()), message="Payment updated successfully")

    @app.route("/api/payments/<int:payment_id>", methods=["DELETE"], endpoint="payments_delete")
    @json_endpoint
    def payments_delete(payment_id: int):
        service.delete(payment_id)
        return ok(message="Payment deleted successfully")
