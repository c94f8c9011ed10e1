from __future__ import annotations

from datetime import date, datetime, time

import pytest

from src.office_workflow.office_workflow.bookings.interval import first_conflict, free_slots, is_valid_interval, overlaps
from src.office_workflow.office_workflow.bookings.model import MeetingRoomBooking
from src.office_workflow.office_workflow.core.enums import BookingStatus


def _booking(booking_id, start, end, status=BookingStatus.ACTIVE):
    return MeetingRoomBooking(
        booking_id=booking_id,
        requester_id=booking_id,
        room_id=1,
        booking_date=date(2026, 3, 2),
        start_time=start,
        end_time=end,
        status=status,
        created_at=datetime(2026, 3, 1, 8, 0),
    )


@pytest.mark.parametrize(
    "a,b,expected",
    [
        ((time(9), time(10)), (time(10), time(11)), False),
        ((time(10), time(11)), (time(9), time(10)), False),
        ((time(9), time(10)), (time(9, 30), time(10, 30)), True),
        ((time(9), time(12)), (time(10), time(11)), True),
        ((time(10), time(11)), (time(9), time(12)), True),
        ((time(9), time(10)), (time(9), time(10)), True),
    ],
)
def test_overlaps_is_half_open(a, b, expected):
    assert overlaps(a[0], a[1], b[0], b[1]) is expected


def test_valid_interval_needs_positive_length():
    assert is_valid_interval(time(9), time(10))
    assert not is_valid_interval(time(9), time(9))
    assert not is_valid_interval(time(10), time(9))


def test_first_conflict_ignores_inactive_bookings():
    bookings = [
        _booking(1, time(9), time(10), status=BookingStatus.CANCELLED),
        _booking(2, time(9), time(10), status=BookingStatus.COMPLETED),
    ]
    assert first_conflict(bookings, time(9), time(10)) is None


def test_first_conflict_picks_earliest_start():
    bookings = [_booking(5, time(10), time(11)), _booking(6, time(9), time(10))]
    assert first_conflict(bookings, time(9, 30), time(10, 30)).booking_id == 6


def test_free_slots_for_empty_day():
    assert free_slots([], time(8), time(20)) == [(time(8), time(20))]


def test_free_slots_merge_adjacent_and_clip_to_day():
    bookings = [
        _booking(1, time(7), time(9)),
        _booking(2, time(9), time(10)),
        _booking(3, time(12), time(13)),
        _booking(4, time(19), time(21)),
        _booking(5, time(10), time(11), status=BookingStatus.CANCELLED),
    ]
    assert free_slots(bookings, time(8), time(20)) == [(time(10), time(12)), (time(13), time(19))]
