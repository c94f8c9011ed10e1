from __future__ import annotations

import logging
from datetime import date, time
from typing import Optional, Sequence

from ..common.validators import require_non_empty, require_positive
from ..core.constants import AVAILABILITY_DAY_END, AVAILABILITY_DAY_START, DEFAULT_LIST_LIMIT
from ..core.enums import BookingStatus, Permission, Role
from ..core.exceptions import (
    AuthorizationError,
    BookingConflictError,
    BookingLimitExceededError,
    InvalidIntervalError,
    InvalidStateError,
    NotFoundError,
    NotOwnerError,
    RoomNotFoundError,
)
from ..core.permissions import has_permission
from .interval import first_conflict, free_slots, is_valid_interval
from .model import BookingConflictInfo, MeetingRoom, MeetingRoomBooking, RoomAvailability
from .repository import BookingRepository, MeetingRoomRepository

logger = logging.getLogger(__name__)


class BookingConflictEngine:
    """Meeting-room reservations.

    Invariants: active bookings on one room/date never overlap, and an
    employee holds at most one active booking anywhere. The limit check, the
    overlap scan and the insert share one serialized transaction.
    """

    def __init__(self, rooms: MeetingRoomRepository, bookings: BookingRepository):
        self._rooms = rooms
        self._bookings = bookings

    # ----- rooms -----
    def get_room(self, *, room_id: int) -> MeetingRoom:
        room = self._rooms.get_by_id(room_id=int(room_id))
        if not room:
            raise RoomNotFoundError("Meeting room not found")
        return room

    def list_rooms(self) -> Sequence[MeetingRoom]:
        return self._rooms.list_all()

    def create_room(self, *, current_role: Role, name: str, capacity: int, location: str = "") -> MeetingRoom:
        if not has_permission(current_role, Permission.MANAGE_MEETING_ROOMS):
            raise AuthorizationError("Only administrators manage meeting rooms")
        room_id = self._rooms.create(
            name=require_non_empty(name, "Name"),
            capacity=require_positive(capacity, "Capacity"),
            location=(location or "").strip(),
        )
        logger.info("Meeting room %s created", room_id)
        return self.get_room(room_id=room_id)

    def update_room(
        self,
        *,
        current_role: Role,
        room_id: int,
        name: Optional[str] = None,
        capacity: Optional[int] = None,
        location: Optional[str] = None,
    ) -> MeetingRoom:
        if not has_permission(current_role, Permission.MANAGE_MEETING_ROOMS):
            raise AuthorizationError("Only administrators manage meeting rooms")
        room = self.get_room(room_id=room_id)
        self._rooms.update(
            room_id=room.room_id,
            name=(name or "").strip() or room.name,
            capacity=require_positive(capacity, "Capacity") if capacity else room.capacity,
            location=location.strip() if location else room.location,
        )
        return self.get_room(room_id=room.room_id)

    def delete_room(self, *, current_role: Role, room_id: int) -> None:
        if not has_permission(current_role, Permission.MANAGE_MEETING_ROOMS):
            raise AuthorizationError("Only administrators manage meeting rooms")
        room = self.get_room(room_id=room_id)
        if self._bookings.count_active_for_room(room_id=room.room_id) > 0:
            raise InvalidStateError("Meeting room still has active bookings")

        if not self._rooms.delete(room_id=room.room_id):
            self.get_room(room_id=room.room_id)
            raise InvalidStateError("Meeting room still has active bookings")
        logger.info("Meeting room %s deleted", room.room_id)

    def room_availability(self, *, room_id: int, booking_date: date) -> RoomAvailability:
        room = self.get_room(room_id=room_id)
        active = list(self._bookings.list_active_for_room(room_id=room.room_id, booking_date=booking_date))
        return RoomAvailability(
            room=room,
            booking_date=booking_date,
            bookings=tuple(active),
            free_slots=tuple(free_slots(active, AVAILABILITY_DAY_START, AVAILABILITY_DAY_END)),
        )

    # ----- bookings -----
    def _load(self, booking_id: int) -> MeetingRoomBooking:
        booking = self._bookings.get_by_id(booking_id=int(booking_id))
        if not booking:
            raise NotFoundError("Booking not found")
        return booking

    def create_booking(
        self,
        *,
        requester_id: int,
        room_id: int,
        booking_date: date,
        start_time: time,
        end_time: time,
    ) -> MeetingRoomBooking:
        room = self.get_room(room_id=room_id)
        if not is_valid_interval(start_time, end_time):
            raise InvalidIntervalError("Start time must be before end time")

        with self._bookings.serialized(requester_id=int(requester_id), room_id=room.room_id) as scope:
            if scope.has_active_booking(requester_id=int(requester_id)):
                raise BookingLimitExceededError("Already has an active booking")

            clash = first_conflict(
                scope.list_active(room_id=room.room_id, booking_date=booking_date), start_time, end_time
            )
            if clash:
                logger.info(
                    "Booking rejected: room %s on %s %s-%s clashes with booking %s",
                    room.room_id,
                    booking_date,
                    start_time,
                    end_time,
                    clash.booking_id,
                )
                raise BookingConflictError(BookingConflictInfo.from_booking(clash))

            booking_id = scope.insert(
                requester_id=int(requester_id),
                room_id=room.room_id,
                booking_date=booking_date,
                start_time=start_time,
                end_time=end_time,
            )

        logger.info("Booking %s created for room %s by employee %s", booking_id, room.room_id, requester_id)
        return self._load(booking_id)

    def _finish(self, *, booking_id: int, employee_id: int, to_status: BookingStatus) -> MeetingRoomBooking:
        booking = self._load(booking_id)
        if booking.requester_id != int(employee_id):
            raise NotOwnerError("Can only operate on own booking")
        if booking.status != BookingStatus.ACTIVE:
            raise InvalidStateError(
                "Booking status does not allow this operation", current_status=booking.status.value
            )

        if not self._bookings.transition(
            booking_id=booking.booking_id, from_status=BookingStatus.ACTIVE, to_status=to_status
        ):
            current = self._load(booking.booking_id)
            raise InvalidStateError(
                "Booking status does not allow this operation", current_status=current.status.value
            )

        logger.info("Booking %s: active -> %s", booking.booking_id, to_status.value)
        return self._load(booking.booking_id)

    def complete_booking(self, *, booking_id: int, employee_id: int) -> MeetingRoomBooking:
        return self._finish(booking_id=booking_id, employee_id=employee_id, to_status=BookingStatus.COMPLETED)

    def cancel_booking(self, *, booking_id: int, employee_id: int) -> MeetingRoomBooking:
        # The slot is free again once this commits: scans only see active bookings.
        return self._finish(booking_id=booking_id, employee_id=employee_id, to_status=BookingStatus.CANCELLED)

    def get_booking(self, *, booking_id: int, viewer_id: int, current_role: Role) -> MeetingRoomBooking:
        """Visible to its owner and to room administrators."""
        booking = self._load(booking_id)
        if booking.requester_id != int(viewer_id) and not has_permission(
            current_role, Permission.MANAGE_MEETING_ROOMS
        ):
            raise NotOwnerError("Can only operate on own booking")
        return booking

    def list_mine(self, *, employee_id: int) -> Sequence[MeetingRoomBooking]:
        return self._bookings.list_by_requester(requester_id=int(employee_id), limit=DEFAULT_LIST_LIMIT)
