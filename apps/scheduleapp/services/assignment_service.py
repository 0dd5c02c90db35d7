"""
Professional to chair/room assignments.

An explicit-date (SINGLE) assignment always wins over a same-weekday RECURRING
one for the same professional and chair/room.
"""

import logging
from datetime import date, time
from typing import Iterable, List, Optional

from django.db import transaction
from django.db.models import Q

from apps.scheduleapp.enums import AssignmentMode, ResourceKind
from apps.scheduleapp.models import ProfessionalChairRoomAssignment
from apps.scheduleapp.services.recurrence import generate_dates, validate_weekdays
from apps.scheduleapp.services.resource_calendars import get_calendar
from apps.scheduleapp.utils.weekdays import iso_weekday
from core.exceptions import InvalidWindowException, ResourceNotFoundException

logger = logging.getLogger(__name__)


class AssignmentService:
    """
    Service for resolving and maintaining professional/chair-room assignments
    """

    # --------------------------------------------------------------------- #
    # Resolution
    # --------------------------------------------------------------------- #
    @staticmethod
    def resolve(professional_id, chair_room_id, day: date) -> Optional[ProfessionalChairRoomAssignment]:
        """
        Effective assignment of a professional to a chair/room on a date.

        Looks for a SINGLE assignment on that exact date first, then for a
        RECURRING one on the date's weekday.

        Returns:
            The assignment, or None when the professional is not assigned to
            that chair/room on that date
        """
        base = ProfessionalChairRoomAssignment.objects.filter(
            professional_id=professional_id, chair_room_id=chair_room_id
        )

        single = base.filter(mode=AssignmentMode.SINGLE, date=day).first()
        if single is not None:
            return single

        return base.filter(mode=AssignmentMode.RECURRING, weekday=iso_weekday(day)).first()

    @staticmethod
    def is_covered(assignment: ProfessionalChairRoomAssignment, start_time: time, end_time: time) -> bool:
        """Whether the requested interval touches the assignment window (inclusive bounds)."""
        return assignment.covers(start_time, end_time)

    @staticmethod
    def requires_assignment(professional_id, day: date) -> bool:
        """
        Whether the professional is bound to some chair/room on a date.

        True when any SINGLE assignment exists on the date or any RECURRING
        assignment exists on its weekday, whatever the chair/room.
        """
        return ProfessionalChairRoomAssignment.objects.filter(
            Q(mode=AssignmentMode.SINGLE, date=day)
            | Q(mode=AssignmentMode.RECURRING, weekday=iso_weekday(day)),
            professional_id=professional_id,
        ).exists()

    @staticmethod
    def assignments_for_professional(professional_id, day: date) -> List[ProfessionalChairRoomAssignment]:
        """Assignments of a professional on a date; explicit ones replace recurring ones."""
        single = list(
            ProfessionalChairRoomAssignment.objects.filter(
                professional_id=professional_id, mode=AssignmentMode.SINGLE, date=day
            ).select_related("chair_room")
        )
        if single:
            return single

        return list(
            ProfessionalChairRoomAssignment.objects.filter(
                professional_id=professional_id,
                mode=AssignmentMode.RECURRING,
                weekday=iso_weekday(day),
            ).select_related("chair_room")
        )

    @staticmethod
    def assignments_for_chair_room(chair_room_id, day: date) -> List[ProfessionalChairRoomAssignment]:
        """Assignments of a chair/room on a date; explicit ones replace recurring ones."""
        single = list(
            ProfessionalChairRoomAssignment.objects.filter(
                chair_room_id=chair_room_id, mode=AssignmentMode.SINGLE, date=day
            ).select_related("professional")
        )
        if single:
            return single

        return list(
            ProfessionalChairRoomAssignment.objects.filter(
                chair_room_id=chair_room_id,
                mode=AssignmentMode.RECURRING,
                weekday=iso_weekday(day),
            ).select_related("professional")
        )

    # --------------------------------------------------------------------- #
    # Maintenance
    # --------------------------------------------------------------------- #
    @classmethod
    @transaction.atomic
    def upsert_single(
        cls, professional_id, chair_room_id, day: date, start_time: time, end_time: time
    ) -> ProfessionalChairRoomAssignment:
        """
        Create or update the SINGLE assignment keyed by (professional, chair/room, date).

        Raises:
            ResourceNotFoundException: If the professional or chair/room does not exist
            InvalidWindowException: If ``end_time <= start_time``
        """
        professional, chair_room = cls._resolve_resources(professional_id, chair_room_id)
        cls._validate_window(start_time, end_time)

        assignment, created = ProfessionalChairRoomAssignment.objects.update_or_create(
            professional=professional,
            chair_room=chair_room,
            mode=AssignmentMode.SINGLE,
            date=day,
            defaults={"start_time": start_time, "end_time": end_time, "weekday": None},
        )

        logger.info(
            f"{'Created' if created else 'Updated'} single assignment {professional.id} -> "
            f"{chair_room.id} on {day}"
        )
        return assignment

    @classmethod
    @transaction.atomic
    def upsert_recurring(
        cls, professional_id, chair_room_id, weekday: int, start_time: time, end_time: time
    ) -> ProfessionalChairRoomAssignment:
        """
        Create or update the RECURRING assignment keyed by (professional, chair/room, weekday).

        Raises:
            ResourceNotFoundException: If the professional or chair/room does not exist
            InvalidRequestException: If the weekday is outside 1..7
            InvalidWindowException: If ``end_time <= start_time``
        """
        validate_weekdays([weekday])
        professional, chair_room = cls._resolve_resources(professional_id, chair_room_id)
        cls._validate_window(start_time, end_time)

        assignment, created = ProfessionalChairRoomAssignment.objects.update_or_create(
            professional=professional,
            chair_room=chair_room,
            mode=AssignmentMode.RECURRING,
            weekday=weekday,
            defaults={"start_time": start_time, "end_time": end_time, "date": None},
        )

        logger.info(
            f"{'Created' if created else 'Updated'} recurring assignment {professional.id} -> "
            f"{chair_room.id} on weekday {weekday}"
        )
        return assignment

    @classmethod
    @transaction.atomic
    def upsert_recurring_many(
        cls, professional_id, chair_room_id, weekdays: Iterable[int], start_time: time, end_time: time
    ) -> List[ProfessionalChairRoomAssignment]:
        """Upsert one RECURRING assignment per weekday."""
        weekdays = validate_weekdays(weekdays)
        return [
            cls.upsert_recurring(professional_id, chair_room_id, weekday, start_time, end_time)
            for weekday in sorted(weekdays)
        ]

    @classmethod
    @transaction.atomic
    def create_for_date_range(
        cls,
        professional_id,
        chair_room_id,
        weekdays: Iterable[int],
        start_date: date,
        end_date: date,
        start_time: time,
        end_time: time,
    ) -> List[ProfessionalChairRoomAssignment]:
        """Upsert a SINGLE assignment on every matching weekday of a date range."""
        return [
            cls.upsert_single(professional_id, chair_room_id, day, start_time, end_time)
            for day in generate_dates(weekdays, start_date, end_date)
        ]

    @staticmethod
    @transaction.atomic
    def delete_single(professional_id, chair_room_id, day: date) -> None:
        """
        Raises:
            ResourceNotFoundException: If there is no such assignment
        """
        deleted, _ = ProfessionalChairRoomAssignment.objects.filter(
            professional_id=professional_id,
            chair_room_id=chair_room_id,
            mode=AssignmentMode.SINGLE,
            date=day,
        ).delete()
        if not deleted:
            raise ResourceNotFoundException(f"No assignment to chair/room {chair_room_id} on {day}")
        logger.info(f"Deleted single assignment {professional_id} -> {chair_room_id} on {day}")

    @staticmethod
    @transaction.atomic
    def delete_recurring(professional_id, chair_room_id, weekday: int) -> None:
        """
        Raises:
            ResourceNotFoundException: If there is no such assignment
        """
        deleted, _ = ProfessionalChairRoomAssignment.objects.filter(
            professional_id=professional_id,
            chair_room_id=chair_room_id,
            mode=AssignmentMode.RECURRING,
            weekday=weekday,
        ).delete()
        if not deleted:
            raise ResourceNotFoundException(
                f"No recurring assignment to chair/room {chair_room_id} on weekday {weekday}"
            )
        logger.info(f"Deleted recurring assignment {professional_id} -> {chair_room_id} on weekday {weekday}")

    @staticmethod
    def _resolve_resources(professional_id, chair_room_id):
        professional = get_calendar(ResourceKind.PROFESSIONAL).get_resource(professional_id)
        chair_room = get_calendar(ResourceKind.CHAIR_ROOM).get_resource(chair_room_id)
        return professional, chair_room

    @staticmethod
    def _validate_window(start_time: time, end_time: time) -> None:
        if end_time <= start_time:
            raise InvalidWindowException(f"End time must be after start time ({start_time} - {end_time})")
