"""
Recurring pattern expansion.

Pure functions turning a weekday pattern into concrete calendar dates. Weekdays
are ISO numbered (1=Monday .. 7=Sunday).
"""

from datetime import date, timedelta
from typing import Iterable, Iterator, List

from apps.scheduleapp.utils.weekdays import is_iso_weekday
from core.exceptions import InvalidRequestException


def validate_weekdays(weekdays: Iterable[int]) -> set:
    weekdays = set(weekdays or ())
    invalid = sorted(str(day) for day in weekdays if not is_iso_weekday(day))
    if invalid:
        raise InvalidRequestException(
            f"Weekdays must be between 1 (Monday) and 7 (Sunday), got {', '.join(invalid)}"
        )
    return weekdays


def generate_dates(weekdays: Iterable[int], start_date: date, end_date: date) -> List[date]:
    """
    Expand a weekday pattern over a date range.

    Args:
        weekdays: ISO weekdays to include
        start_date: First date of the range (inclusive)
        end_date: Last date of the range (inclusive)

    Returns:
        Ascending list of every date in the range whose weekday is in the set.
        Empty when the set is empty or ``end_date < start_date``.

    Raises:
        InvalidRequestException: If a weekday is outside 1..7
    """
    weekdays = validate_weekdays(weekdays)
    if not weekdays or end_date < start_date:
        return []

    dates = []
    for weekday in weekdays:
        current = start_date + timedelta(days=(weekday - start_date.isoweekday()) % 7)
        while current <= end_date:
            dates.append(current)
            current += timedelta(weeks=1)

    return sorted(dates)


def date_range(start_date: date, end_date: date) -> Iterator[date]:
    """Every date from ``start_date`` to ``end_date`` inclusive."""
    current = start_date
    while current <= end_date:
        yield current
        current += timedelta(days=1)
