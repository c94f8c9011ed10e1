from __future__ import annotations

from datetime import date, datetime, time

from ..core.constants import DATE_FORMAT, TIME_FORMAT
from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    if value is None:
        value = ""
    if not isinstance(value, str):
        raise ValidationError("Invalid date format, expected YYYY-MM-DD")
    try:
        return datetime.strptime(value.strip(), DATE_FORMAT).date()
    except ValueError:
        raise ValidationError("Invalid date format, expected YYYY-MM-DD")


def parse_hhmm(value: str) -> time:
    """Parse HH:MM string into time."""
    if value is None:
        value = ""
    if not isinstance(value, str):
        raise ValidationError("Invalid time format, expected HH:MM")
    try:
        return datetime.strptime(value.strip(), TIME_FORMAT).time()
    except ValueError:
        raise ValidationError("Invalid time format, expected HH:MM")
