import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, List, Optional

from apps.scheduleapp.services.recurrence import generate_dates
from apps.scheduleapp.services.resource_calendars import get_calendar
from core.exceptions import InvalidRequestException

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConflictReport:
    resource_id: object
    conflicting_dates: List[date] = field(default_factory=list)

    @property
    def has_conflicts(self):
        return bool(self.conflicting_dates)

    def to_dict(self):
        return {
            "resource_id": str(self.resource_id),
            "has_conflicts": self.has_conflicts,
            "conflicting_dates": [d.isoformat() for d in self.conflicting_dates],
        }


class ConflictService:
    """
    Detects which requested dates already hold schedule entries, without
    writing anything
    """

    @staticmethod
    def candidate_dates(
        dates: Optional[Iterable[date]] = None,
        weekdays: Optional[Iterable[int]] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[date]:
        """Union of explicit dates and the dates a weekday pattern expands to."""
        candidates = set(dates or ())

        if weekdays:
            if start_date is None or end_date is None:
                raise InvalidRequestException("A weekday pattern needs both start_date and end_date")
            candidates.update(generate_dates(weekdays, start_date, end_date))

        return sorted(candidates)

    @classmethod
    def check_conflicts(
        cls,
        kind: str,
        resource_id,
        dates: Optional[Iterable[date]] = None,
        weekdays: Optional[Iterable[int]] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        include_customized_only: bool = True,
    ) -> ConflictReport:
        """
        Report which candidate dates already have an entry for the resource.

        Args:
            kind: Resource kind
            resource_id: Resource UUID
            dates: Explicit dates to check
            weekdays: ISO weekdays of a recurring pattern
            start_date: Start of the pattern range
            end_date: End of the pattern range
            include_customized_only: When True only explicitly written entries
                count as conflicts; mechanically materialized ones are expected
                to be overwritten by a new pattern

        Returns:
            ConflictReport with the conflicting dates in ascending order

        Raises:
            ResourceNotFoundException: If the resource does not exist
        """
        calendar = get_calendar(kind)
        calendar.get_resource(resource_id)

        candidates = cls.candidate_dates(dates, weekdays, start_date, end_date)
        if not candidates:
            return ConflictReport(resource_id=resource_id)

        entries = calendar.entries(resource_id).filter(date__in=candidates)
        if include_customized_only:
            entries = entries.filter(customized=True)

        conflicting = sorted(entries.values_list("date", flat=True))
        if conflicting:
            logger.debug(f"{kind} {resource_id} has {len(conflicting)} conflicting dates")

        return ConflictReport(resource_id=resource_id, conflicting_dates=conflicting)
