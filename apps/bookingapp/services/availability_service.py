"""
Availability evaluation.

Answers whether one resource can hold a time interval on a date, and finds
free slots across the subsidiary, professional and chair/room calendars.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Dict, List, Optional

from django.conf import settings
from django.db.models import Q
from django.utils import timezone

from apps.bookingapp.models import Appointment, AppointmentStatus
from apps.scheduleapp.enums import ResourceKind
from apps.scheduleapp.services.assignment_service import AssignmentService
from apps.scheduleapp.services.recurrence import date_range
from apps.scheduleapp.services.resource_calendars import get_calendar
from core.exceptions import InvalidRequestException

logger = logging.getLogger(__name__)

NO_SCHEDULE = "no_schedule"
CLOSED = "closed"
OUTSIDE_HOURS = "outside_hours"
OVERLAPPING_APPOINTMENT = "overlapping_appointment"


@dataclass(frozen=True)
class AvailabilityResult:
    available: bool
    reason: Optional[str] = None

    def __bool__(self):
        return self.available


def make_local_datetime(day: date, at: time) -> datetime:
    """Aware datetime for a wall-clock time on a date in the current time zone."""
    return timezone.make_aware(datetime.combine(day, at))


class AvailabilityService:
    """
    Service for checking resource availability
    """

    @staticmethod
    def check_availability(
        kind: str,
        resource_id,
        day: date,
        start_time: time,
        end_time: time,
        exclude_appointment_id=None,
    ) -> AvailabilityResult:
        """
        Decide whether a resource can hold ``[start_time, end_time)`` on a date.

        All of the following must hold:

        1. the resource has a schedule entry for the date (no entry means
           unavailable);
        2. the entry is not closed;
        3. the interval lies inside the entry's window;
        4. no non-cancelled appointment on the resource overlaps the interval
           (professionals and chairs/rooms only; a subsidiary hosts any number
           of parallel appointments).

        Args:
            kind: Resource kind
            resource_id: Resource UUID
            day: Calendar date
            start_time: Interval start (wall clock)
            end_time: Interval end (wall clock)
            exclude_appointment_id: Appointment to ignore in the overlap check,
                used when rescheduling

        Returns:
            AvailabilityResult carrying the first failing reason, if any
        """
        calendar = get_calendar(kind)

        entry = calendar.find_entry(resource_id, day)
        if entry is None:
            return AvailabilityResult(False, NO_SCHEDULE)

        if entry.closed:
            return AvailabilityResult(False, CLOSED)

        if not entry.covers(start_time, end_time):
            return AvailabilityResult(False, OUTSIDE_HOURS)

        overlapping = calendar.find_overlapping_appointments(
            resource_id,
            make_local_datetime(day, start_time),
            make_local_datetime(day, end_time),
            exclude_appointment_id=exclude_appointment_id,
        )
        if overlapping.exists():
            return AvailabilityResult(False, OVERLAPPING_APPOINTMENT)

        return AvailabilityResult(True)

    @classmethod
    def is_available(
        cls,
        kind: str,
        resource_id,
        day: date,
        start_time: time,
        end_time: time,
        exclude_appointment_id=None,
    ) -> bool:
        """Boolean form of ``check_availability``."""
        return cls.check_availability(
            kind, resource_id, day, start_time, end_time, exclude_appointment_id
        ).available

    @staticmethod
    def find_available_slots(
        subsidiary_id,
        professional_id,
        start_date: date,
        end_date: date,
        duration_minutes: int,
        chair_room_id=None,
        step_minutes: Optional[int] = None,
    ) -> List[Dict[str, datetime]]:
        """
        Find free slots of a given duration.

        For each date the usable window is the intersection of the subsidiary,
        professional and (if given) chair/room windows. Candidate slots start
        every ``step_minutes`` from the window start and are kept when they fit
        in the window and overlap no non-cancelled appointment of the
        professional or chair/room.

        Assignment rules follow the booking chain: a day on which the
        professional is bound to some chair/room yields no room-less slots, and
        with a chair/room only slots covered by the resolved assignment are kept.

        Returns:
            List of ``{"start": datetime, "end": datetime}`` in ascending order
        """
        if duration_minutes <= 0:
            raise InvalidRequestException("duration_minutes must be positive")
        if end_date < start_date:
            raise InvalidRequestException("end_date must be on or after start_date")

        step = timedelta(minutes=step_minutes or settings.AGENDA["SLOT_STEP_MINUTES"])
        duration = timedelta(minutes=duration_minutes)

        resources = [
            (ResourceKind.SUBSIDIARY, subsidiary_id),
            (ResourceKind.PROFESSIONAL, professional_id),
        ]
        if chair_room_id:
            resources.append((ResourceKind.CHAIR_ROOM, chair_room_id))

        calendars = [(get_calendar(kind), resource_id) for kind, resource_id in resources]
        for calendar, resource_id in calendars:
            calendar.get_resource(resource_id)

        slots = []
        for day in date_range(start_date, end_date):
            entries = [calendar.find_entry(resource_id, day) for calendar, resource_id in calendars]
            if any(entry is None or entry.closed for entry in entries):
                continue

            window_start = make_local_datetime(day, max(entry.open_time for entry in entries))
            window_end = make_local_datetime(day, min(entry.close_time for entry in entries))
            if window_end - window_start < duration:
                continue

            assignment = None
            if chair_room_id:
                assignment = AssignmentService.resolve(professional_id, chair_room_id, day)
            if assignment is None and AssignmentService.requires_assignment(professional_id, day):
                continue

            holders = Q(professional_id=professional_id)
            if chair_room_id:
                holders |= Q(chair_room_id=chair_room_id)
            busy = Appointment.objects.filter(
                holders, start_time__lt=window_end, end_time__gt=window_start
            ).exclude(status=AppointmentStatus.CANCELLED)
            busy_intervals = list(busy.values_list("start_time", "end_time"))

            slot_start = window_start
            while slot_start + duration <= window_end:
                slot_end = slot_start + duration
                free = not any(start < slot_end and end > slot_start for start, end in busy_intervals)
                if free and assignment is not None:
                    free = AssignmentService.is_covered(
                        assignment, timezone.localtime(slot_start).time(), timezone.localtime(slot_end).time()
                    )
                if free:
                    slots.append({"start": slot_start, "end": slot_end})
                slot_start += step

        logger.debug(f"Found {len(slots)} slots for professional {professional_id}")
        return slots
