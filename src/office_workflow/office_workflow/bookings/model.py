from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Optional, Sequence

from ..core.enums import BookingStatus


@dataclass(frozen=True)
class MeetingRoom:
    room_id: int
    name: str
    capacity: int
    location: str = ""
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.room_id,
            "name": self.name,
            "capacity": self.capacity,
            "location": self.location,
        }


@dataclass(frozen=True)
class MeetingRoomBooking:
    """A reservation of [start_time, end_time) on one room and date."""

    booking_id: int
    requester_id: int
    room_id: int
    booking_date: date
    start_time: time
    end_time: time
    status: BookingStatus
    created_at: datetime
    requester_name: str = ""
    room_name: str = ""

    @property
    def is_active(self) -> bool:
        return self.status == BookingStatus.ACTIVE

    def to_dict(self) -> dict:
        return {
            "id": self.booking_id,
            "employee_id": self.requester_id,
            "employee_name": self.requester_name,
            "meeting_room_id": self.room_id,
            "meeting_room_name": self.room_name,
            "booking_date": self.booking_date.isoformat(),
            "start_time": self.start_time.strftime("%H:%M"),
            "end_time": self.end_time.strftime("%H:%M"),
            "status": self.status.value,
            "created_at": self.created_at.strftime("%Y-%m-%d %H:%M"),
        }


@dataclass(frozen=True)
class BookingConflictInfo:
    booking_id: int
    employee_name: str
    start_time: time
    end_time: time

    @classmethod
    def from_booking(cls, booking: MeetingRoomBooking) -> "BookingConflictInfo":
        return cls(
            booking_id=booking.booking_id,
            employee_name=booking.requester_name,
            start_time=booking.start_time,
            end_time=booking.end_time,
        )

    def to_dict(self) -> dict:
        return {
            "booking_id": self.booking_id,
            "employee_name": self.employee_name,
            "start_time": self.start_time.strftime("%H:%M"),
            "end_time": self.end_time.strftime("%H:%M"),
        }


@dataclass(frozen=True)
class RoomAvailability:
    room: MeetingRoom
    booking_date: date
    bookings: Sequence[MeetingRoomBooking] = field(default_factory=tuple)
    free_slots: Sequence[tuple[time, time]] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "room": self.room.to_dict(),
            "date": self.booking_date.isoformat(),
            "bookings": [b.to_dict() for b in self.bookings],
            "free_slots": [{"start_time": s.strftime("%H:%M"), "end_time": e.strftime("%H:%M")} for s, e in self.free_slots],
        }
