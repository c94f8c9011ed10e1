from __future__ import annotations

from contextlib import contextmanager
from datetime import date, time
from typing import Iterator, Optional, Sequence

from ..core.enums import BookingStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import MeetingRoom, MeetingRoomBooking
from .repository import BookingRepository, BookingScope, MeetingRoomRepository

_BOOKING_SELECT = """
    SELECT b.booking_id, b.employee_id, b.room_id, b.booking_date,
           b.start_time, b.end_time, b.status, b.created_at,
           e.full_name AS employee_name, m.name AS room_name
    FROM meeting_room_bookings b
    JOIN employees e ON e.employee_id = b.employee_id
    JOIN meeting_rooms m ON m.room_id = b.room_id
"""


def _to_room(r: dict) -> MeetingRoom:
    return MeetingRoom(
        room_id=int(r["room_id"]),
        name=r["name"],
        capacity=int(r["capacity"]),
        location=r.get("location") or "",
        created_at=r.get("created_at"),
    )


def _to_booking(r: dict) -> MeetingRoomBooking:
    return MeetingRoomBooking(
        booking_id=int(r["booking_id"]),
        requester_id=int(r["employee_id"]),
        room_id=int(r["room_id"]),
        booking_date=r["booking_date"],
        start_time=normalize_mysql_time(r["start_time"]),
        end_time=normalize_mysql_time(r["end_time"]),
        status=BookingStatus(r["status"]),
        created_at=r["created_at"],
        requester_name=r.get("employee_name") or "",
        room_name=r.get("room_name") or "",
    )


def _select_active(cur, *, room_id: int, booking_date: date) -> list[MeetingRoomBooking]:
    cur.execute(
        f"""
        {_BOOKING_SELECT}
        WHERE b.room_id=%s AND b.booking_date=%s AND b.status=%s
        ORDER BY b.start_time ASC
        """,
        (int(room_id), booking_date, BookingStatus.ACTIVE.value),
    )
    return [_to_booking(r) for r in fetchall(cur)]


class MySQLMeetingRoomRepository(MeetingRoomRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, name: str, capacity: int, location: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO meeting_rooms(name, capacity, location) VALUES(%s,%s,%s)",
                (name, int(capacity), location),
            )
            return int(cur.lastrowid)

    def get_by_id(self, *, room_id: int) -> Optional[MeetingRoom]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT room_id, name, capacity, location, created_at FROM meeting_rooms WHERE room_id=%s",
                (int(room_id),),
            )
            r = fetchone(cur)
            return _to_room(r) if r else None

    def list_all(self) -> Sequence[MeetingRoom]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT room_id, name, capacity, location, created_at FROM meeting_rooms ORDER BY name")
            return [_to_room(r) for r in fetchall(cur)]

    def update(self, *, room_id: int, name: str, capacity: int, location: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE meeting_rooms SET name=%s, capacity=%s, location=%s WHERE room_id=%s",
                (name, int(capacity), location, int(room_id)),
            )
            return cur.rowcount > 0

    def delete(self, *, room_id: int) -> bool:
        with db_cursor(self._conn_factory) as (conn, cur):
            # Booking transactions take this lock too, so no insert slips in.
            cur.execute("SELECT room_id FROM meeting_rooms WHERE room_id=%s FOR UPDATE", (int(room_id),))
            if not fetchone(cur):
                conn.rollback()
                return False
            cur.execute(
                "SELECT COUNT(*) AS n FROM meeting_room_bookings WHERE room_id=%s AND status=%s",
                (int(room_id), BookingStatus.ACTIVE.value),
            )
            if int(fetchone(cur)["n"]) > 0:
                conn.rollback()
                return False

            cur.execute("DELETE FROM meeting_room_bookings WHERE room_id=%s", (int(room_id),))
            cur.execute("DELETE FROM meeting_rooms WHERE room_id=%s", (int(room_id),))
            return cur.rowcount > 0


class _MySQLBookingScope(BookingScope):
    def __init__(self, cur):
        self._cur = cur

    def has_active_booking(self, *, requester_id: int) -> bool:
        self._cur.execute(
            "SELECT COUNT(*) AS n FROM meeting_room_bookings WHERE employee_id=%s AND status=%s",
            (int(requester_id), BookingStatus.ACTIVE.value),
        )
        return int(fetchone(self._cur)["n"]) > 0

    def list_active(self, *, room_id: int, booking_date: date) -> Sequence[MeetingRoomBooking]:
        return _select_active(self._cur, room_id=room_id, booking_date=booking_date)

    def insert(
        self,
        *,
        requester_id: int,
        room_id: int,
        booking_date: date,
        start_time: time,
        end_time: time,
    ) -> int:
        self._cur.execute(
            """
            INSERT INTO meeting_room_bookings(employee_id, room_id, booking_date, start_time, end_time, status)
            VALUES(%s,%s,%s,%s,%s,%s)
            """,
            (int(requester_id), int(room_id), booking_date, start_time, end_time, BookingStatus.ACTIVE.value),
        )
        return int(self._cur.lastrowid)


class MySQLBookingRepository(BookingRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @contextmanager
    def serialized(self, *, requester_id: int, room_id: int) -> Iterator[BookingScope]:
        # READ COMMITTED so the scan after the locks sees every committed booking.
        with db_cursor(self._conn_factory, isolation_level="READ COMMITTED") as (_, cur):
            # Fixed order (employee, then room) keeps concurrent scopes deadlock-free.
            cur.execute("SELECT employee_id FROM employees WHERE employee_id=%s FOR UPDATE", (int(requester_id),))
            cur.fetchall()
            cur.execute("SELECT room_id FROM meeting_rooms WHERE room_id=%s FOR UPDATE", (int(room_id),))
            cur.fetchall()
            yield _MySQLBookingScope(cur)

    def get_by_id(self, *, booking_id: int) -> Optional[MeetingRoomBooking]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_BOOKING_SELECT} WHERE b.booking_id=%s", (int(booking_id),))
            r = fetchone(cur)
            return _to_booking(r) if r else None

    def list_by_requester(self, *, requester_id: int, limit: int = 200) -> Sequence[MeetingRoomBooking]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                {_BOOKING_SELECT}
                WHERE b.employee_id=%s
                ORDER BY b.booking_date DESC, b.start_time DESC
                LIMIT %s
                """,
                (int(requester_id), int(limit)),
            )
            return [_to_booking(r) for r in fetchall(cur)]

    def list_active_for_room(self, *, room_id: int, booking_date: date) -> Sequence[MeetingRoomBooking]:
        with db_cursor(self._conn_factory) as (_, cur):
            return _select_active(cur, room_id=room_id, booking_date=booking_date)

    def count_active_for_room(self, *, room_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT COUNT(*) AS n FROM meeting_room_bookings WHERE room_id=%s AND status=%s",
                (int(room_id), BookingStatus.ACTIVE.value),
            )
            return int(fetchone(cur)["n"])

    def transition(self, *, booking_id: int, from_status: BookingStatus, to_status: BookingStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE meeting_room_bookings SET status=%s WHERE booking_id=%s AND status=%s",
                (to_status.value, int(booking_id), from_status.value),
            )
            return cur.rowcount > 0
