"""Half-open time interval helpers for same-day bookings.

[start, end) intervals: 09:00-10:00 and 10:00-11:00 do not overlap.
"""

from __future__ import annotations

from datetime import time
from typing import Iterable, Optional

from .model import MeetingRoomBooking


def is_valid_interval(start: time, end: time) -> bool:
    return start < end


def overlaps(a_start: time, a_end: time, b_start: time, b_end: time) -> bool:
    return a_start < b_end and a_end > b_start


def first_conflict(
    bookings: Iterable[MeetingRoomBooking], start: time, end: time
) -> Optional[MeetingRoomBooking]:
    """Earliest-starting active booking overlapping [start, end), if any."""
    hits = [b for b in bookings if b.is_active and overlaps(b.start_time, b.end_time, start, end)]
    if not hits:
        return None
    return min(hits, key=lambda b: (b.start_time, b.booking_id))


def free_slots(
    bookings: Iterable[MeetingRoomBooking], day_start: time, day_end: time
) -> list[tuple[time, time]]:
    """Gaps between active bookings inside [day_start, day_end)."""
    busy = sorted((b.start_time, b.end_time) for b in bookings if b.is_active)
    slots: list[tuple[time, time]] = []
    cursor = day_start
    for start, end in busy:
        if end <= cursor:
            continue
        if start >= day_end:
            break
        if start > cursor:
            slots.append((cursor, start))
        cursor = max(cursor, end)
    if cursor < day_end:
        slots.append((cursor, day_end))
    return slots
