from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import (
    as_int,
    current_role,
    current_user_id,
    json_body,
    login_required,
    permission_required,
    required_field,
)
from ..container import Container
from ..core.enums import Permission


def register(app: Flask, container: Container) -> None:
    inventory = container.device_inventory
    workflow = container.device_workflow

    # ----- devices (device admin) -----
    @app.route("/api/devices", methods=["GET"], endpoint="list_devices")
    @login_required
    def list_devices():
        return jsonify([d.to_dict() for d in inventory.list_devices()])

    @app.route("/api/devices/available", methods=["GET"], endpoint="list_available_devices")
    @permission_required(Permission.VIEW_DEVICES)
    def list_available_devices():
        return jsonify([d.to_dict() for d in inventory.list_available()])

    @app.route("/api/devices/<int:device_id>", methods=["GET"], endpoint="get_device")
    @login_required
    def get_device(device_id: int):
        return jsonify(inventory.get_device(device_id=device_id).to_dict())

    @app.route("/api/devices", methods=["POST"], endpoint="create_device")
    @permission_required(Permission.MANAGE_DEVICES)
    def create_device():
        data = json_body()
        device = inventory.create_device(
            current_role=current_role(),
            name=required_field(data, "name"),
            category=data.get("type", ""),
            total_quantity=as_int(required_field(data, "quantity"), "quantity"),
            description=data.get("description", ""),
        )
        return jsonify(device.to_dict()), 201

    @app.route("/api/devices/<int:device_id>", methods=["PUT"], endpoint="update_device")
    @permission_required(Permission.MANAGE_DEVICES)
    def update_device(device_id: int):
        data = json_body()
        device = inventory.update_device(
            current_role=current_role(),
            device_id=device_id,
            name=data.get("name"),
            category=data.get("type"),
            description=data.get("description"),
        )
        if data.get("quantity") is not None:
            device = inventory.adjust_capacity(
                current_role=current_role(),
                device_id=device_id,
                new_total=as_int(data["quantity"], "quantity"),
            )
        return jsonify(device.to_dict())

    @app.route("/api/devices/<int:device_id>", methods=["DELETE"], endpoint="delete_device")
    @permission_required(Permission.MANAGE_DEVICES)
    def delete_device(device_id: int):
        inventory.delete_device(current_role=current_role(), device_id=device_id)
        return jsonify({"message": "Device deleted"})

    # ----- device requests -----
    @app.route("/api/device-requests", methods=["POST"], endpoint="create_device_request")
    @permission_required(Permission.APPLY_DEVICE)
    def create_device_request():
        data = json_body()
        req = workflow.create_request(
            employee_id=current_user_id(),
            device_id=as_int(required_field(data, "device_id"), "device_id"),
        )
        return jsonify(req.to_dict()), 201

    @app.route("/api/device-requests/mine", methods=["GET"], endpoint="my_device_requests")
    @login_required
    def my_device_requests():
        return jsonify([r.to_dict() for r in workflow.list_mine(employee_id=current_user_id())])

    @app.route("/api/device-requests/pending", methods=["GET"], endpoint="pending_device_requests")
    @permission_required(Permission.APPROVE_DEVICE_REQUEST)
    def pending_device_requests():
        return jsonify([r.to_dict() for r in workflow.list_pending()])

    @app.route("/api/device-requests/return-pending", methods=["GET"], endpoint="return_pending_device_requests")
    @permission_required(Permission.CONFIRM_DEVICE_RETURN)
    def return_pending_device_requests():
        return jsonify([r.to_dict() for r in workflow.list_return_pending()])

    @app.route("/api/device-requests/<int:request_id>/approve", methods=["POST"], endpoint="approve_device_request")
    @permission_required(Permission.APPROVE_DEVICE_REQUEST)
    def approve_device_request(request_id: int):
        return jsonify(workflow.approve(request_id=request_id, current_role=current_role()).to_dict())

    @app.route("/api/device-requests/<int:request_id>/reject", methods=["POST"], endpoint="reject_device_request")
    @permission_required(Permission.APPROVE_DEVICE_REQUEST)
    def reject_device_request(request_id: int):
        data = json_body()
        req = workflow.reject(
            request_id=request_id,
            current_role=current_role(),
            reason=data.get("reject_reason", ""),
        )
        return jsonify(req.to_dict())

    @app.route("/api/device-requests/<int:request_id>/collect", methods=["POST"], endpoint="collect_device")
    @permission_required(Permission.COLLECT_DEVICE)
    def collect_device(request_id: int):
        return jsonify(workflow.collect(request_id=request_id, employee_id=current_user_id()).to_dict())

    @app.route("/api/device-requests/<int:request_id>/return", methods=["POST"], endpoint="return_device")
    @permission_required(Permission.RETURN_DEVICE)
    def return_device(request_id: int):
        return jsonify(workflow.initiate_return(request_id=request_id, employee_id=current_user_id()).to_dict())

    @app.route(
        "/api/device-requests/<int:request_id>/confirm-return", methods=["POST"], endpoint="confirm_device_return"
    )
    @permission_required(Permission.CONFIRM_DEVICE_RETURN)
    def confirm_device_return(request_id: int):
        return jsonify(workflow.confirm_return(request_id=request_id, current_role=current_role()).to_dict())

    @app.route("/api/device-requests/<int:request_id>/cancel", methods=["POST"], endpoint="cancel_device_request")
    @permission_required(Permission.CANCEL_DEVICE_REQUEST)
    def cancel_device_request(request_id: int):
        req = workflow.cancel(request_id=request_id, actor_id=current_user_id(), current_role=current_role())
        return jsonify(req.to_dict())
