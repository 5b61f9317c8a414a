from __future__ import annotations

from flask import Flask, jsonify, request

from ..core.constants import SPECIAL_LEAVE_REASONS
from ..core.enums import Gender
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    def _parse_gender(value):
        try:
            return Gender.parse(value)
        except ValueError as e:
            raise ValidationError(str(e))

    @app.route("/api/leave-types", methods=["GET"], endpoint="list_leave_types")
    def list_leave_types():
        gender = _parse_gender(request.args.get("gender"))
        types = container.registry.list_types_for_gender(gender)
        return jsonify(
            {
                "gender": gender.value if gender else None,
                "types": [t.to_dict() for t in types],
                "total_days": container.calculator.compute_total_days(gender),
                "summary": container.registry.summary_text(gender),
            }
        )

    @app.route("/api/leave-types/special-reasons", methods=["GET"], endpoint="special_leave_reasons")
    def special_leave_reasons():
        return jsonify({"reasons": list(SPECIAL_LEAVE_REASONS)})
