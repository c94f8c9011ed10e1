from __future__ import annotations

from datetime import date, time
from typing import ContextManager, Optional, Protocol, Sequence

from ..core.enums import BookingStatus
from .model import MeetingRoom, MeetingRoomBooking


class MeetingRoomRepository(Protocol):
    def create(self, *, name: str, capacity: int, location: str) -> int:
        raise NotImplementedError

    def get_by_id(self, *, room_id: int) -> Optional[MeetingRoom]:
        raise NotImplementedError

    def list_all(self) -> Sequence[MeetingRoom]:
        raise NotImplementedError

    def update(self, *, room_id: int, name: str, capacity: int, location: str) -> bool:
        raise NotImplementedError

    def delete(self, *, room_id: int) -> bool:
        """Remove the room and its booking history under the room lock.

        Refuses (returns False) when the room is missing or still has an
        active booking.
        """

        raise NotImplementedError


class BookingScope(Protocol):
    """Reads and the insert of one serialized booking transaction."""

    def has_active_booking(self, *, requester_id: int) -> bool:
        raise NotImplementedError

    def list_active(self, *, room_id: int, booking_date: date) -> Sequence[MeetingRoomBooking]:
        raise NotImplementedError

    def insert(
        self,
        *,
        requester_id: int,
        room_id: int,
        booking_date: date,
        start_time: time,
        end_time: time,
    ) -> int:
        raise NotImplementedError


class BookingRepository(Protocol):
    def serialized(self, *, requester_id: int, room_id: int) -> ContextManager[BookingScope]:
        """Open one transaction holding the requester lock, then the room lock.

        Concurrent scopes for the same requester or the same room run one at a
        time; raising inside the block rolls the transaction back.
        """

        raise NotImplementedError

    def get_by_id(self, *, booking_id: int) -> Optional[MeetingRoomBooking]:
        raise NotImplementedError

    def list_by_requester(self, *, requester_id: int, limit: int = 200) -> Sequence[MeetingRoomBooking]:
        raise NotImplementedError

    def list_active_for_room(self, *, room_id: int, booking_date: date) -> Sequence[MeetingRoomBooking]:
        raise NotImplementedError

    def count_active_for_room(self, *, room_id: int) -> int:
        raise NotImplementedError

    def transition(self, *, booking_id: int, from_status: BookingStatus, to_status: BookingStatus) -> bool:
        raise NotImplementedError
