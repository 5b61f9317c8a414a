from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.http import json_body
from ..common.validators import require_non_empty
from ..core.enums import Decision, LeaveStatus
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.leave_request_service

    def _parse_status(value):
        if not value:
            return None
        try:
            return LeaveStatus(value.strip().upper())
        except ValueError:
            raise ValidationError(f"Unknown status: {value}")

    def _parse_decision(value) -> Decision:
        try:
            return Decision((value or "").strip().upper())
        except ValueError:
            raise ValidationError("decision must be APPROVE or REJECT")

    @app.route("/api/leave-requests", methods=["POST"], endpoint="create_leave_request")
    def create_leave_request():
        data = json_body()
        request_id = service.create(
            employee_id=require_non_empty(data.get("employee_id"), "employee_id"),
            type_id=require_non_empty(data.get("type"), "type"),
            start_date=parse_iso_date(data.get("start_date") or ""),
            end_date=parse_iso_date(data.get("end_date") or ""),
            special_reason=data.get("reason"),
        )
        return jsonify({"request_id": request_id}), 201

    @app.route("/api/leave-requests/<int:request_id>", methods=["GET"], endpoint="get_leave_request")
    def get_leave_request(request_id: int):
        return jsonify(service.get(request_id).to_dict())

    @app.route("/api/leave-requests/<int:request_id>/decision", methods=["POST"], endpoint="decide_leave_request")
    def decide_leave_request(request_id: int):
        data = json_body()
        updated = service.decide(
            request_id=request_id,
            decision=_parse_decision(data.get("decision")),
            approver_id=data.get("approver_id") or "",
            reason=data.get("reason"),
        )
        return jsonify({"ok": True, "request_id": updated.request_id, "status": updated.status.value})

    @app.route("/api/leave-requests/<int:request_id>/cancel", methods=["POST"], endpoint="cancel_leave_request")
    def cancel_leave_request(request_id: int):
        data = json_body()
        updated = service.cancel(request_id=request_id, actor_id=data.get("actor_id") or "")
        return jsonify({"ok": True, "request_id": updated.request_id, "status": updated.status.value})

    @app.route("/api/employees/<employee_id>/leave-requests", methods=["GET"], endpoint="employee_leave_requests")
    def employee_leave_requests(employee_id: str):
        rows = service.list_for_employee(employee_id=employee_id, status=_parse_status(request.args.get("status")))
        return jsonify({"employee_id": employee_id, "leave_requests": [r.to_dict() for r in rows]})

    @app.route(
        "/api/managers/<manager_id>/pending-leave-requests",
        methods=["GET"],
        endpoint="manager_pending_leave_requests",
    )
    def manager_pending_leave_requests(manager_id: str):
        rows = service.list_pending_for_manager(manager_id=manager_id)
        return jsonify({"manager_id": manager_id, "count": len(rows), "leave_requests": [r.to_dict() for r in rows]})
