from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import json_body
from ..common.validators import require_non_empty, require_positive_int
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/carry-forward", methods=["POST"], endpoint="run_carry_forward")
    def run_carry_forward():
        data = json_body()
        report = container.carry_forward_service.run(
            org_id=require_non_empty(data.get("org_id"), "org_id"),
            from_year=require_positive_int(data.get("from_year"), "from_year"),
        )
        return jsonify(report.to_dict())
