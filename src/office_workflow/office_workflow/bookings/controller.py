from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_hhmm, parse_iso_date
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
    engine = container.booking_engine

    # ----- rooms -----
    @app.route("/api/meeting-rooms", methods=["GET"], endpoint="list_meeting_rooms")
    @permission_required(Permission.VIEW_MEETING_ROOMS)
    def list_meeting_rooms():
        return jsonify([r.to_dict() for r in engine.list_rooms()])

    @app.route("/api/meeting-rooms", methods=["POST"], endpoint="create_meeting_room")
    @permission_required(Permission.MANAGE_MEETING_ROOMS)
    def create_meeting_room():
        data = json_body()
        room = engine.create_room(
            current_role=current_role(),
            name=required_field(data, "name"),
            capacity=as_int(required_field(data, "capacity"), "capacity"),
            location=data.get("location", ""),
        )
        return jsonify(room.to_dict()), 201

    @app.route("/api/meeting-rooms/<int:room_id>", methods=["PUT"], endpoint="update_meeting_room")
    @permission_required(Permission.MANAGE_MEETING_ROOMS)
    def update_meeting_room(room_id: int):
        data = json_body()
        room = engine.update_room(
            current_role=current_role(),
            room_id=room_id,
            name=data.get("name"),
            capacity=as_int(data["capacity"], "capacity") if data.get("capacity") is not None else None,
            location=data.get("location"),
        )
        return jsonify(room.to_dict())

    @app.route("/api/meeting-rooms/<int:room_id>", methods=["DELETE"], endpoint="delete_meeting_room")
    @permission_required(Permission.MANAGE_MEETING_ROOMS)
    def delete_meeting_room(room_id: int):
        engine.delete_room(current_role=current_role(), room_id=room_id)
        return jsonify({"message": "Meeting room deleted"})

    @app.route("/api/meeting-rooms/<int:room_id>/availability", methods=["GET"], endpoint="room_availability")
    @permission_required(Permission.VIEW_MEETING_ROOMS)
    def room_availability(room_id: int):
        booking_date = parse_iso_date(request.args.get("date", ""))
        return jsonify(engine.room_availability(room_id=room_id, booking_date=booking_date).to_dict())

    # ----- bookings -----
    @app.route("/api/bookings", methods=["POST"], endpoint="create_booking")
    @permission_required(Permission.BOOK_MEETING_ROOM)
    def create_booking():
        data = json_body()
        booking = engine.create_booking(
            requester_id=current_user_id(),
            room_id=as_int(required_field(data, "meeting_room_id"), "meeting_room_id"),
            booking_date=parse_iso_date(required_field(data, "booking_date")),
            start_time=parse_hhmm(required_field(data, "start_time")),
            end_time=parse_hhmm(required_field(data, "end_time")),
        )
        return jsonify(booking.to_dict()), 201

    @app.route("/api/bookings/mine", methods=["GET"], endpoint="my_bookings")
    @login_required
    def my_bookings():
        return jsonify([b.to_dict() for b in engine.list_mine(employee_id=current_user_id())])

    @app.route("/api/bookings/<int:booking_id>", methods=["GET"], endpoint="get_booking")
    @login_required
    def get_booking(booking_id: int):
        booking = engine.get_booking(booking_id=booking_id, viewer_id=current_user_id(), current_role=current_role())
        return jsonify(booking.to_dict())

    @app.route("/api/bookings/<int:booking_id>/complete", methods=["POST"], endpoint="complete_booking")
    @permission_required(Permission.COMPLETE_BOOKING)
    def complete_booking(booking_id: int):
        return jsonify(engine.complete_booking(booking_id=booking_id, employee_id=current_user_id()).to_dict())

    @app.route("/api/bookings/<int:booking_id>/cancel", methods=["POST"], endpoint="cancel_booking")
    @permission_required(Permission.CANCEL_BOOKING)
    def cancel_booking(booking_id: int):
        return jsonify(engine.cancel_booking(booking_id=booking_id, employee_id=current_user_id()).to_dict())
