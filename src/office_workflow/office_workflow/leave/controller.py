from __future__ import annotations

from flask import Flask, jsonify

from ..common.datetime_utils import parse_iso_date
from ..common.web import (
    current_role,
    current_user_id,
    json_body,
    login_required,
    permission_required,
    required_field,
)
from ..container import Container
from ..core.enums import Permission
from ..core.exceptions import AuthorizationError


def register(app: Flask, container: Container) -> None:
    leaves = container.leave_workflow

    @app.route("/api/leaves", methods=["POST"], endpoint="submit_leave")
    @permission_required(Permission.APPLY_LEAVE)
    def submit_leave():
        data = json_body()
        leave = leaves.submit(
            requester_id=current_user_id(),
            current_role=current_role(),
            category=required_field(data, "leave_type"),
            start_date=parse_iso_date(required_field(data, "start_date")),
            end_date=parse_iso_date(required_field(data, "end_date")),
            reason=data.get("reason", ""),
        )
        return jsonify(leave.to_dict()), 201

    @app.route("/api/leaves/mine", methods=["GET"], endpoint="my_leaves")
    @login_required
    def my_leaves():
        return jsonify([x.to_dict() for x in leaves.list_mine(requester_id=current_user_id())])

    @app.route("/api/leaves/pending", methods=["GET"], endpoint="pending_leaves")
    @permission_required(Permission.APPROVE_LEAVE)
    def pending_leaves():
        pending = leaves.list_pending_for_supervisor(supervisor_id=current_user_id(), current_role=current_role())
        return jsonify([x.to_dict() for x in pending])

    @app.route("/api/leaves/<int:request_id>", methods=["GET"], endpoint="get_leave")
    @login_required
    def get_leave(request_id: int):
        leave = leaves.get(request_id=request_id)
        if leave.requester_id != current_user_id() and not container.hierarchy.can_decide_for(
            actor_id=current_user_id(), actor_role=current_role(), subject_id=leave.requester_id
        ):
            raise AuthorizationError("Cannot view this leave request")
        return jsonify(leave.to_dict())

    @app.route("/api/leaves/<int:request_id>/approve", methods=["POST"], endpoint="approve_leave")
    @permission_required(Permission.APPROVE_LEAVE)
    def approve_leave(request_id: int):
        leave = leaves.approve(request_id=request_id, actor_id=current_user_id(), current_role=current_role())
        return jsonify(leave.to_dict())

    @app.route("/api/leaves/<int:request_id>/reject", methods=["POST"], endpoint="reject_leave")
    @permission_required(Permission.APPROVE_LEAVE)
    def reject_leave(request_id: int):
        data = json_body()
        leave = leaves.reject(
            request_id=request_id,
            actor_id=current_user_id(),
            current_role=current_role(),
            reason=data.get("reject_reason", ""),
        )
        return jsonify(leave.to_dict())

    @app.route("/api/leaves/<int:request_id>/cancel", methods=["POST"], endpoint="cancel_leave")
    @permission_required(Permission.CANCEL_LEAVE)
    def cancel_leave(request_id: int):
        leave = leaves.cancel(request_id=request_id, actor_id=current_user_id(), current_role=current_role())
        return jsonify(leave.to_dict())
