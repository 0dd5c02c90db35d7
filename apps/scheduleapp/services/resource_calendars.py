"""
Resource-kind capability registry.

Subsidiaries, chairs/rooms and professionals all keep the same kind of
calendar. Each kind is described once here (which model owns the resource,
which table holds its schedule entries, how appointments reference it) so the
materializer, conflict checker and availability evaluator can be written a
single time and parameterized by kind.
"""

from datetime import date, datetime
from typing import Dict, Iterable, Optional

from django.core.exceptions import ValidationError
from django.db.models import Model, QuerySet

from apps.bookingapp.models import Appointment, AppointmentStatus
from apps.companiesapp.models import ChairRoom, Subsidiary
from apps.professionalsapp.models import Professional
from apps.scheduleapp.enums import ResourceKind
from apps.scheduleapp.models import (
    ChairRoomScheduleEntry,
    ProfessionalScheduleEntry,
    ScheduleEntry,
    SubsidiaryScheduleEntry,
)
from core.exceptions import InvalidRequestException, ResourceNotFoundException


class ResourceCalendar:
    """Calendar capabilities of one resource kind"""

    def __init__(self, kind, resource_model, entry_model, field_name, label, holds_appointments=True):
        self.kind = kind
        self.resource_model = resource_model
        self.entry_model = entry_model
        # Name of the FK pointing at the resource, on both the entry and Appointment
        self.field_name = field_name
        self.label = label
        # Only professionals and chairs/rooms are exclusively held by an appointment
        self.holds_appointments = holds_appointments

    def __repr__(self):
        return f"<ResourceCalendar {self.kind}>"

    def get_resource(self, resource_id) -> Model:
        """
        Look up the resource by id.

        Raises:
            ResourceNotFoundException: If no such resource exists
        """
        try:
            return self.resource_model.objects.get(id=resource_id)
        except (self.resource_model.DoesNotExist, ValidationError, ValueError):
            raise ResourceNotFoundException(f"{self.label} {resource_id} not found")

    def lock_resource(self, resource_id) -> Model:
        """Re-read the resource row with a row lock (must run inside a transaction)."""
        return self.resource_model.objects.select_for_update().get(id=resource_id)

    def parent_subsidiary_id(self, resource):
        """Subsidiary whose hours bound this resource's windows, if any."""
        if self.kind == ResourceKind.SUBSIDIARY:
            return None
        return resource.subsidiary_id

    def entries(self, resource_id) -> QuerySet:
        return self.entry_model.objects.filter(**{f"{self.field_name}_id": resource_id})

    def find_entry(self, resource_id, day: date) -> Optional[ScheduleEntry]:
        return self.entries(resource_id).filter(date=day).first()

    def exists_entry(self, resource_id, day: date) -> bool:
        return self.entries(resource_id).filter(date=day).exists()

    def find_entries(self, resource_id, days: Iterable[date]) -> Dict[date, ScheduleEntry]:
        return {entry.date: entry for entry in self.entries(resource_id).filter(date__in=list(days))}

    def new_entry(self, resource, **fields) -> ScheduleEntry:
        return self.entry_model(**{self.field_name: resource}, **fields)

    def find_overlapping_appointments(
        self, resource_id, start: datetime, end: datetime, exclude_appointment_id=None
    ) -> QuerySet:
        """
        Non-cancelled appointments on this resource overlapping ``[start, end)``.

        Uses strict half-open overlap, so back-to-back bookings do not collide.
        Kinds that do not hold appointments exclusively (subsidiaries) never
        report an overlap.
        """
        if not self.holds_appointments:
            return Appointment.objects.none()

        queryset = Appointment.objects.filter(
            **{f"{self.field_name}_id": resource_id},
            start_time__lt=end,
            end_time__gt=start,
        ).exclude(status=AppointmentStatus.CANCELLED)

        if exclude_appointment_id:
            queryset = queryset.exclude(id=exclude_appointment_id)

        return queryset


CALENDARS = {
    ResourceKind.SUBSIDIARY: ResourceCalendar(
        ResourceKind.SUBSIDIARY,
        Subsidiary,
        SubsidiaryScheduleEntry,
        "subsidiary",
        "Subsidiary",
        holds_appointments=False,
    ),
    ResourceKind.CHAIR_ROOM: ResourceCalendar(
        ResourceKind.CHAIR_ROOM, ChairRoom, ChairRoomScheduleEntry, "chair_room", "Chair/room"
    ),
    ResourceKind.PROFESSIONAL: ResourceCalendar(
        ResourceKind.PROFESSIONAL,
        Professional,
        ProfessionalScheduleEntry,
        "professional",
        "Professional",
    ),
}


def get_calendar(kind) -> ResourceCalendar:
    """
    Resolve the calendar capabilities for a resource kind.

    Raises:
        InvalidRequestException: If the kind is not known
    """
    try:
        return CALENDARS[ResourceKind(kind)]
    except ValueError:
        raise InvalidRequestException(f"Unknown resource kind: {kind}")
