"""
Schedule materializer.

Creates or updates the single schedule entry a resource holds for a date. The
same code serves every resource kind through the calendar registry.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, time
from typing import Dict, Iterable, List, Optional

from django.db import IntegrityError, transaction

from apps.scheduleapp.enums import ResourceKind
from apps.scheduleapp.models import ScheduleEntry
from apps.scheduleapp.services.resource_calendars import ResourceCalendar, get_calendar
from core.exceptions import (
    APIException,
    InvalidWindowException,
    ResourceNotFoundException,
    ScheduleConflictException,
)

logger = logging.getLogger(__name__)

MIDNIGHT = time(0, 0)


@dataclass
class BulkScheduleResult:
    """Partial-success report of a bulk calendar operation"""

    resource_id: object
    succeeded: List[date] = field(default_factory=list)
    failed: Dict[date, str] = field(default_factory=dict)

    @property
    def succeeded_count(self):
        return len(self.succeeded)

    def to_dict(self):
        return {
            "resource_id": str(self.resource_id),
            "succeeded": [d.isoformat() for d in self.succeeded],
            "failed": {d.isoformat(): reason for d, reason in sorted(self.failed.items())},
        }


class ScheduleService:
    """
    Service for reading and writing per-date schedule entries
    """

    @staticmethod
    def get_entry(kind: str, resource_id, day: date) -> Optional[ScheduleEntry]:
        """
        Get the entry a resource holds for a date.

        Raises:
            ResourceNotFoundException: If the resource does not exist
        """
        calendar = get_calendar(kind)
        calendar.get_resource(resource_id)
        return calendar.find_entry(resource_id, day)

    @staticmethod
    def get_entries(kind: str, resource_id, start_date: date, end_date: date):
        """Entries of a resource between two dates, inclusive, ordered by date."""
        calendar = get_calendar(kind)
        calendar.get_resource(resource_id)
        return calendar.entries(resource_id).filter(
            date__gte=start_date, date__lte=end_date
        ).order_by("date")

    @classmethod
    @transaction.atomic
    def upsert_entry(
        cls,
        kind: str,
        resource_id,
        day: date,
        open_time: Optional[time] = None,
        close_time: Optional[time] = None,
        closed: bool = False,
        replace_existing: bool = False,
    ) -> ScheduleEntry:
        """
        Create or update the entry of a resource for one date.

        Args:
            kind: Resource kind (subsidiary, chair_room, professional)
            resource_id: Resource UUID
            day: Calendar date
            open_time: Opening time (ignored for closed days)
            close_time: Closing time (ignored for closed days)
            closed: Mark the whole day as closed
            replace_existing: Overwrite an existing entry instead of failing

        Returns:
            The persisted entry, always marked as customized

        Raises:
            ResourceNotFoundException: If the resource does not exist
            InvalidWindowException: If the window is empty or falls outside the
                subsidiary's hours for that date
            ScheduleConflictException: If an entry exists and ``replace_existing``
                is False
        """
        calendar = get_calendar(kind)
        resource = calendar.get_resource(resource_id)

        if closed:
            open_time, close_time = MIDNIGHT, MIDNIGHT
        else:
            if open_time is None or close_time is None or close_time <= open_time:
                raise InvalidWindowException(
                    f"Close time must be after open time ({open_time} - {close_time})"
                )
            cls._validate_within_subsidiary_hours(calendar, resource, day, open_time, close_time)

        entry = calendar.entries(resource.id).select_for_update().filter(date=day).first()

        if entry is not None:
            if not replace_existing:
                raise ScheduleConflictException(
                    f"{calendar.label} already has a schedule on {day}",
                    resource_id=resource.id,
                    conflicting_dates=[day],
                )
            entry.open_time = open_time
            entry.close_time = close_time
            entry.closed = closed
            entry.customized = True
            entry.save(update_fields=["open_time", "close_time", "closed", "customized", "updated_at"])
            logger.info(f"Replaced {kind} schedule {resource.id} on {day}")
            return entry

        entry = calendar.new_entry(
            resource,
            date=day,
            open_time=open_time,
            close_time=close_time,
            closed=closed,
            customized=True,
        )
        try:
            with transaction.atomic():
                entry.save(force_insert=True)
        except IntegrityError:
            # Lost a race with a concurrent insert for the same date
            raise ScheduleConflictException(
                f"{calendar.label} already has a schedule on {day}",
                resource_id=resource.id,
                conflicting_dates=[day],
            )

        logger.info(f"Created {kind} schedule {resource.id} on {day}")
        return entry

    @classmethod
    def upsert_entries(
        cls,
        kind: str,
        resource_id,
        days: Iterable[date],
        open_time: Optional[time] = None,
        close_time: Optional[time] = None,
        closed: bool = False,
        replace_existing: bool = False,
    ) -> BulkScheduleResult:
        """
        Best-effort bulk upsert.

        Every date is attempted independently in its own savepoint; a failure
        on one date is recorded and the remaining dates are still processed.

        Returns:
            BulkScheduleResult listing the dates actually written and the
            reason each failed date was skipped

        Raises:
            ResourceNotFoundException: If the resource does not exist
        """
        get_calendar(kind).get_resource(resource_id)
        result = BulkScheduleResult(resource_id=resource_id)

        for day in sorted(set(days)):
            try:
                cls.upsert_entry(
                    kind,
                    resource_id,
                    day,
                    open_time=open_time,
                    close_time=close_time,
                    closed=closed,
                    replace_existing=replace_existing,
                )
            except ResourceNotFoundException:
                raise
            except APIException as e:
                logger.warning(f"Skipping {kind} schedule {resource_id} on {day}: {e.message}")
                result.failed[day] = str(e.message)
            else:
                result.succeeded.append(day)

        logger.info(
            f"Bulk {kind} schedule {resource_id}: {len(result.succeeded)} written, "
            f"{len(result.failed)} skipped"
        )
        return result

    @staticmethod
    @transaction.atomic
    def delete_entry(kind: str, resource_id, day: date) -> None:
        """
        Explicitly delete the entry of a resource for a date.

        Raises:
            ResourceNotFoundException: If the resource or the entry does not exist
        """
        calendar = get_calendar(kind)
        calendar.get_resource(resource_id)
        deleted, _ = calendar.entries(resource_id).filter(date=day).delete()
        if not deleted:
            raise ResourceNotFoundException(f"No {calendar.label.lower()} schedule on {day}")
        logger.info(f"Deleted {kind} schedule {resource_id} on {day}")

    @staticmethod
    def _validate_within_subsidiary_hours(
        calendar: ResourceCalendar, resource, day: date, open_time: time, close_time: time
    ) -> None:
        """Child resources may only open inside their subsidiary's window for that date."""
        subsidiary_id = calendar.parent_subsidiary_id(resource)
        if subsidiary_id is None:
            return

        subsidiary_entry = get_calendar(ResourceKind.SUBSIDIARY).find_entry(subsidiary_id, day)
        if subsidiary_entry is None:
            return

        if subsidiary_entry.closed:
            raise InvalidWindowException(f"Subsidiary is closed on {day}")

        if not subsidiary_entry.covers(open_time, close_time):
            raise InvalidWindowException(
                f"Schedule {open_time}-{close_time} is outside subsidiary hours "
                f"{subsidiary_entry.open_time}-{subsidiary_entry.close_time} on {day}"
            )
