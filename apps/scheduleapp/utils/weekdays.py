"""
Weekday numbering helpers.

The engine only ever speaks ISO weekdays (1=Monday .. 7=Sunday). Clients that
send the legacy Sunday-first numbering (0=Sunday .. 6=Saturday) are translated
here, at the API edge, and nowhere else.
"""

from datetime import date

from apps.scheduleapp.enums import DayNumbering

ISO_WEEKDAYS = range(1, 8)
SUNDAY_ZERO_WEEKDAYS = range(0, 7)


def iso_weekday(value: date) -> int:
    """ISO weekday of a date (1=Monday .. 7=Sunday)."""
    return value.isoweekday()


def is_iso_weekday(day) -> bool:
    return isinstance(day, int) and not isinstance(day, bool) and day in ISO_WEEKDAYS


def from_sunday_zero(day: int) -> int:
    """Translate a Sunday-first 0..6 weekday to ISO 1..7."""
    if day not in SUNDAY_ZERO_WEEKDAYS:
        raise ValueError(f"Weekday {day} is outside 0..6")
    return 7 if day == 0 else day


def to_sunday_zero(day: int) -> int:
    """Translate an ISO 1..7 weekday to Sunday-first 0..6."""
    if day not in ISO_WEEKDAYS:
        raise ValueError(f"Weekday {day} is outside 1..7")
    return day % 7


def to_iso(day: int, numbering: str = DayNumbering.ISO) -> int:
    """Normalize a weekday sent by a client to ISO numbering."""
    if numbering == DayNumbering.SUNDAY_ZERO:
        return from_sunday_zero(day)
    if day not in ISO_WEEKDAYS:
        raise ValueError(f"Weekday {day} is outside 1..7")
    return day
