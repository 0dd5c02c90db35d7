"""
Recurring calendar use cases.

Set up a resource's calendar from weekday patterns: one window repeated over a
set of weekdays, a full per-weekday schedule, or a list of closed days. All of
them are best-effort bulk operations built on the schedule materializer.
"""

import logging
from dataclasses import dataclass
from datetime import date, time
from typing import Dict, Iterable, Mapping, Optional

from apps.scheduleapp.services.conflict_service import ConflictService
from apps.scheduleapp.services.recurrence import generate_dates, validate_weekdays
from apps.scheduleapp.services.resource_calendars import get_calendar
from apps.scheduleapp.services.schedule_service import BulkScheduleResult, ScheduleService
from core.exceptions import (
    InvalidRequestException,
    InvalidWindowException,
    ScheduleConflictException,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DaySchedule:
    """Opening configuration of one weekday in a week schedule"""

    open: bool
    open_time: Optional[time] = None
    close_time: Optional[time] = None

    def validate(self):
        if self.open and (
            self.open_time is None or self.close_time is None or self.close_time <= self.open_time
        ):
            raise InvalidWindowException(
                f"Close time must be after open time ({self.open_time} - {self.close_time})"
            )


class RecurringScheduleService:
    """
    Service for materializing recurring patterns into schedule entries
    """

    @staticmethod
    def create_recurring_schedule(
        kind: str,
        resource_id,
        weekdays: Iterable[int],
        start_date: date,
        end_date: date,
        open_time: time,
        close_time: time,
        replace_existing: bool = False,
        exclude_dates: Optional[Iterable[date]] = None,
    ) -> BulkScheduleResult:
        """
        Materialize one opening window on every matching weekday of a range.

        Args:
            kind: Resource kind
            resource_id: Resource UUID
            weekdays: ISO weekdays (1=Monday .. 7=Sunday)
            start_date: First date of the range
            end_date: Last date of the range
            open_time: Opening time
            close_time: Closing time
            replace_existing: Overwrite dates that already have an entry
            exclude_dates: Dates to leave untouched

        Returns:
            BulkScheduleResult with the dates actually written
        """
        if close_time <= open_time:
            raise InvalidWindowException(f"Close time must be after open time ({open_time} - {close_time})")

        excluded = set(exclude_dates or ())
        dates = [d for d in generate_dates(weekdays, start_date, end_date) if d not in excluded]

        return ScheduleService.upsert_entries(
            kind,
            resource_id,
            dates,
            open_time=open_time,
            close_time=close_time,
            replace_existing=replace_existing,
        )

    @staticmethod
    def create_closed_days(
        kind: str, resource_id, dates: Iterable[date], replace_existing: bool = False
    ) -> BulkScheduleResult:
        """Mark each date as closed for the resource."""
        return ScheduleService.upsert_entries(
            kind, resource_id, dates, closed=True, replace_existing=replace_existing
        )

    @staticmethod
    def apply_week_schedule(
        kind: str,
        resource_id,
        week_schedule: Mapping[int, DaySchedule],
        start_date: date,
        end_date: date,
        replace_existing: bool = False,
        check_conflicts: bool = True,
        exclude_dates: Optional[Iterable[date]] = None,
    ) -> BulkScheduleResult:
        """
        Apply a per-weekday schedule over a date range.

        Weekdays configured as not open are skipped; closing specific dates is
        done with ``create_closed_days``.

        Args:
            kind: Resource kind
            resource_id: Resource UUID
            week_schedule: ISO weekday -> DaySchedule
            start_date: First date of the range
            end_date: Last date of the range
            replace_existing: Overwrite dates that already have an entry
            check_conflicts: Refuse the whole request up front when a customized
                entry would be hit (only when not replacing)
            exclude_dates: Dates to leave untouched

        Returns:
            BulkScheduleResult with the dates actually written

        Raises:
            InvalidRequestException: If the range or the weekday keys are invalid,
                or no weekday is open
            ScheduleConflictException: If ``check_conflicts`` finds customized entries
        """
        if end_date < start_date:
            raise InvalidRequestException("end_date must be on or after start_date")

        validate_weekdays(week_schedule.keys())
        open_days: Dict[int, DaySchedule] = {
            weekday: config for weekday, config in week_schedule.items() if config.open
        }
        if not open_days:
            raise InvalidRequestException("At least one weekday must be open")
        for config in open_days.values():
            config.validate()

        get_calendar(kind).get_resource(resource_id)
        excluded = set(exclude_dates or ())

        if check_conflicts and not replace_existing:
            report = ConflictService.check_conflicts(
                kind,
                resource_id,
                weekdays=open_days.keys(),
                start_date=start_date,
                end_date=end_date,
                include_customized_only=True,
            )
            conflicting = [d for d in report.conflicting_dates if d not in excluded]
            if conflicting:
                logger.warning(f"Week schedule for {kind} {resource_id} blocked on {len(conflicting)} dates")
                raise ScheduleConflictException(
                    "Customized schedule entries exist on the requested dates",
                    resource_id=resource_id,
                    conflicting_dates=conflicting,
                )

        result = BulkScheduleResult(resource_id=resource_id)
        for weekday, config in sorted(open_days.items()):
            dates = [d for d in generate_dates([weekday], start_date, end_date) if d not in excluded]
            partial = ScheduleService.upsert_entries(
                kind,
                resource_id,
                dates,
                open_time=config.open_time,
                close_time=config.close_time,
                replace_existing=replace_existing,
            )
            result.succeeded.extend(partial.succeeded)
            result.failed.update(partial.failed)

        result.succeeded.sort()
        return result
