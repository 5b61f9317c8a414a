from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import current_year
from ..common.validators import require_positive_int
from ..core.exceptions import NotFoundError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    def _year_arg() -> int:
        value = request.args.get("year")
        if not value:
            return current_year()
        return require_positive_int(value, "year")

    @app.route("/api/employees/<employee_id>/entitlements", methods=["GET"], endpoint="entitlement_summary")
    def entitlement_summary(employee_id: str):
        year = _year_arg()
        rows = container.ledger.summary(employee_id, year)
        return jsonify({"employee_id": employee_id, "year": year, "entitlements": [r.to_dict() for r in rows]})

    @app.route(
        "/api/employees/<employee_id>/entitlements/<int:year>/initialize",
        methods=["POST"],
        endpoint="initialize_entitlements",
    )
    def initialize_entitlements(employee_id: str, year: int):
        employee = container.employees_repo.get_by_id(employee_id)
        if not employee:
            raise NotFoundError(f"Unknown employee: {employee_id}")
        container.ledger.initialize_year(employee.employee_id, year, employee.gender)
        rows = container.ledger.summary(employee.employee_id, year)
        return jsonify({"employee_id": employee_id, "year": year, "entitlements": [r.to_dict() for r in rows]}), 201
