"""
Booking Service Module for the Agenda backend

Validates a candidate appointment against the subsidiary, professional,
chair/room and assignment calendars plus existing bookings, derives its status
and persists it. Validation and commit run under per-resource locks and inside
one database transaction so two concurrent requests cannot both book the same
interval.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional, Tuple

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.db.models import QuerySet
from django.utils import timezone

from apps.bookingapp.models import Appointment, AppointmentStatus
from apps.bookingapp.services.availability_service import AvailabilityService
from apps.companiesapp.models import ChairRoom
from apps.customersapp.models import Customer
from apps.payment.models import Payment
from apps.payment.services.payment_service import PaymentService
from apps.scheduleapp.enums import ResourceKind
from apps.scheduleapp.services.assignment_service import AssignmentService
from apps.scheduleapp.services.resource_calendars import get_calendar
from apps.serviceapp.models import Item
from core.exceptions import (
    BookingConflictException,
    InvalidRequestException,
    PaymentRequiredException,
    ResourceNotFoundException,
)
from utils.distributed_locks import resource_locks

logger = logging.getLogger(__name__)

# Marks a reschedule argument that was not given, as opposed to an explicit None
UNSET = object()


@dataclass(frozen=True)
class BookingRequest:
    """Everything needed to place (or move) an appointment"""

    professional_id: object
    customer_id: object
    subsidiary_id: object
    item_id: object
    start_time: datetime
    end_time: Optional[datetime] = None
    chair_room_id: object = None
    payment_id: object = None
    # Front-desk override: book straight as CONFIRMED
    confirmed: bool = False
    notes: str = ""


def _get_or_not_found(model, object_id, label):
    try:
        return model.objects.get(id=object_id)
    except (model.DoesNotExist, ValidationError, ValueError):
        raise ResourceNotFoundException(f"{label} {object_id} not found")


class BookingService:
    """
    Service for scheduling, rescheduling, confirming and cancelling appointments.

    Validation order is fail-fast:

    1. professional, customer, subsidiary and item must exist;
    2. the appointment must not start on a past date;
    3. the subsidiary must be available;
    4. the professional must be available;
    5. the professional must not be booked in another subsidiary at that time;
    6. a requested chair/room must be available and the professional must be
       assigned to it (or be unassigned everywhere that day);
    7. without a chair/room, the professional must not be bound to one that day;
    8. status is derived and the appointment persisted.
    """

    @classmethod
    def schedule_appointment(cls, request: BookingRequest) -> Appointment:
        """
        Book a new appointment.

        Args:
            request: BookingRequest describing the appointment

        Returns:
            The persisted Appointment with its derived status

        Raises:
            ResourceNotFoundException: If a referenced entity does not exist
            InvalidRequestException: If the interval is invalid or in the past
            BookingConflictException: If any availability rule fails
        """
        professional, customer, subsidiary, item = cls._resolve_parties(request)
        start, end = cls._resolve_interval(request, item)

        with cls._locked(professional.id, request.chair_room_id):
            with transaction.atomic():
                cls._lock_rows(professional.id, request.chair_room_id)
                chair_room = cls._validate_booking(
                    professional.id, subsidiary.id, request.chair_room_id, start, end
                )

                appointment = Appointment(
                    professional=professional,
                    customer=customer,
                    subsidiary=subsidiary,
                    chair_room=chair_room,
                    item=item,
                    start_time=start,
                    end_time=end,
                    status=cls.determine_status(item, start, request.payment_id, request.confirmed),
                    payment=cls._find_payment(request.payment_id),
                    notes=request.notes,
                )
                cls._save(appointment)

        logger.info(
            f"Scheduled appointment {appointment.id} for professional {professional.id} "
            f"{start:%Y-%m-%d %H:%M}-{end:%H:%M} ({appointment.status})"
        )
        return appointment

    @classmethod
    def reschedule_appointment(
        cls,
        appointment_id,
        start_time: datetime,
        end_time: Optional[datetime] = None,
        professional_id=None,
        chair_room_id=UNSET,
    ) -> Appointment:
        """
        Move an appointment, re-running the full validation chain.

        The appointment itself is ignored by the overlap checks. An omitted
        professional keeps the current one. An omitted chair/room keeps the
        current one, while an explicit ``None`` releases it.

        Raises:
            ResourceNotFoundException: If the appointment or a new resource does not exist
            InvalidRequestException: If the appointment is cancelled or the interval invalid
            BookingConflictException: If any availability rule fails
        """
        appointment = _get_or_not_found(Appointment, appointment_id, "Appointment")
        if appointment.is_cancelled:
            raise InvalidRequestException("Cancelled appointments cannot be rescheduled")

        request = BookingRequest(
            professional_id=professional_id or appointment.professional_id,
            customer_id=appointment.customer_id,
            subsidiary_id=appointment.subsidiary_id,
            item_id=appointment.item_id,
            start_time=start_time,
            end_time=end_time,
            chair_room_id=appointment.chair_room_id if chair_room_id is UNSET else chair_room_id,
            payment_id=appointment.payment_id,
            confirmed=appointment.status == AppointmentStatus.CONFIRMED,
        )
        professional, _customer, subsidiary, item = cls._resolve_parties(request)
        start, end = cls._resolve_interval(request, item)

        with cls._locked(professional.id, request.chair_room_id):
            with transaction.atomic():
                appointment = Appointment.objects.select_for_update().get(id=appointment.id)
                if appointment.is_cancelled:
                    raise InvalidRequestException("Cancelled appointments cannot be rescheduled")

                cls._lock_rows(professional.id, request.chair_room_id)
                chair_room = cls._validate_booking(
                    professional.id,
                    subsidiary.id,
                    request.chair_room_id,
                    start,
                    end,
                    exclude_appointment_id=appointment.id,
                )

                appointment.professional = professional
                appointment.chair_room = chair_room
                appointment.start_time = start
                appointment.end_time = end
                appointment.status = cls.determine_status(
                    item, start, request.payment_id, request.confirmed
                )
                cls._save(appointment)

        logger.info(f"Rescheduled appointment {appointment.id} to {start:%Y-%m-%d %H:%M}")
        return appointment

    @staticmethod
    @transaction.atomic
    def cancel_appointment(appointment_id, reason: str = "") -> Appointment:
        """
        Cancel an appointment. Cancelled appointments no longer block anything.

        Raises:
            ResourceNotFoundException: If the appointment does not exist
            InvalidRequestException: If it is already cancelled
        """
        try:
            appointment = Appointment.objects.select_for_update().get(id=appointment_id)
        except (Appointment.DoesNotExist, ValidationError, ValueError):
            raise ResourceNotFoundException(f"Appointment {appointment_id} not found")

        if appointment.is_cancelled:
            raise InvalidRequestException("Appointment is already cancelled")

        appointment.mark_cancelled(reason)
        logger.info(f"Cancelled appointment {appointment.id}")
        return appointment

    @staticmethod
    @transaction.atomic
    def confirm_appointment(appointment_id, payment_id=None) -> Appointment:
        """
        Confirm an appointment.

        A pre-paid item still inside its payment window must have a completed
        payment, either the one already linked or ``payment_id``.

        Raises:
            ResourceNotFoundException: If the appointment does not exist
            InvalidRequestException: If it is cancelled
            PaymentRequiredException: If payment is still required
        """
        try:
            appointment = (
                Appointment.objects.select_for_update().select_related("item").get(id=appointment_id)
            )
        except (Appointment.DoesNotExist, ValidationError, ValueError):
            raise ResourceNotFoundException(f"Appointment {appointment_id} not found")

        if appointment.is_cancelled:
            raise InvalidRequestException("Cancelled appointments cannot be confirmed")

        payment = PaymentService.verify_pre_payment_if_within_window(
            appointment.item, appointment.start_time, payment_id or appointment.payment_id
        )
        if payment is not None and appointment.payment_id != payment.id:
            appointment.payment = payment
            appointment.save(update_fields=["payment", "updated_at"])

        appointment.mark_confirmed()
        logger.info(f"Confirmed appointment {appointment.id}")
        return appointment

    @staticmethod
    def determine_status(item, start_time: datetime, payment_id=None, confirmed: bool = False) -> str:
        """
        Derive the status of a new or moved appointment.

        PENDING when the item needs pre-payment, the payment window is open
        and no completed payment is referenced; otherwise CONFIRMED when the
        caller pre-confirmed it, else NOT_CONFIRMED.
        """
        try:
            PaymentService.verify_pre_payment_if_within_window(item, start_time, payment_id)
        except PaymentRequiredException:
            return AppointmentStatus.PENDING

        return AppointmentStatus.CONFIRMED if confirmed else AppointmentStatus.NOT_CONFIRMED

    @staticmethod
    def get_agenda(
        professional_id=None,
        subsidiary_id=None,
        chair_room_id=None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> QuerySet:
        """Non-cancelled appointments matching the filters, earliest first."""
        queryset = Appointment.objects.exclude(status=AppointmentStatus.CANCELLED).select_related(
            "professional", "customer", "subsidiary", "chair_room", "item"
        )
        if professional_id:
            queryset = queryset.filter(professional_id=professional_id)
        if subsidiary_id:
            queryset = queryset.filter(subsidiary_id=subsidiary_id)
        if chair_room_id:
            queryset = queryset.filter(chair_room_id=chair_room_id)
        if start:
            queryset = queryset.filter(end_time__gt=start)
        if end:
            queryset = queryset.filter(start_time__lt=end)
        return queryset.order_by("start_time")

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #
    @staticmethod
    def _resolve_parties(request: BookingRequest):
        professional = get_calendar(ResourceKind.PROFESSIONAL).get_resource(request.professional_id)
        customer = _get_or_not_found(Customer, request.customer_id, "Customer")
        subsidiary = get_calendar(ResourceKind.SUBSIDIARY).get_resource(request.subsidiary_id)
        item = _get_or_not_found(Item, request.item_id, "Item")
        return professional, customer, subsidiary, item

    @staticmethod
    def _resolve_interval(request: BookingRequest, item) -> Tuple[datetime, datetime]:
        start = request.start_time
        if timezone.is_naive(start):
            start = timezone.make_aware(start)
        end = request.end_time or start + timedelta(minutes=item.duration_minutes)
        if timezone.is_naive(end):
            end = timezone.make_aware(end)

        if end <= start:
            raise InvalidRequestException("End time must be after start time")

        if timezone.localdate(start) < timezone.localdate():
            raise InvalidRequestException("Appointments cannot be booked on a past date")

        if timezone.localdate(end) != timezone.localdate(start):
            raise InvalidRequestException("Appointments must start and end on the same day")

        return start, end

    @staticmethod
    @contextmanager
    def _locked(professional_id, chair_room_id):
        """Hold the per-resource booking locks; a busy resource is a booking conflict."""
        keys = [f"professional:{professional_id}"]
        if chair_room_id:
            keys.append(f"chair_room:{chair_room_id}")

        agenda = settings.AGENDA
        with resource_locks(
            keys, expires=agenda["BOOKING_LOCK_EXPIRES"], timeout=agenda["BOOKING_LOCK_TIMEOUT"]
        ) as acquired:
            if not acquired:
                raise BookingConflictException("resource is being booked by another request, try again")
            yield

    @staticmethod
    def _lock_rows(professional_id, chair_room_id) -> None:
        get_calendar(ResourceKind.PROFESSIONAL).lock_resource(professional_id)
        if chair_room_id:
            try:
                list(ChairRoom.objects.select_for_update().filter(id=chair_room_id))
            except (ValidationError, ValueError):
                # Malformed ids are reported by the chair/room check
                return

    @classmethod
    def _validate_booking(
        cls,
        professional_id,
        subsidiary_id,
        chair_room_id,
        start: datetime,
        end: datetime,
        exclude_appointment_id=None,
    ):
        """Run checks 3 to 7; returns the resolved chair/room (or None)."""
        local_start = timezone.localtime(start)
        local_end = timezone.localtime(end)
        day = local_start.date()
        start_t, end_t = local_start.time(), local_end.time()

        if not AvailabilityService.is_available(
            ResourceKind.SUBSIDIARY, subsidiary_id, day, start_t, end_t, exclude_appointment_id
        ):
            raise BookingConflictException("subsidiary unavailable")

        if not AvailabilityService.is_available(
            ResourceKind.PROFESSIONAL, professional_id, day, start_t, end_t, exclude_appointment_id
        ):
            raise BookingConflictException("professional unavailable")

        cross_subsidiary = (
            get_calendar(ResourceKind.PROFESSIONAL)
            .find_overlapping_appointments(professional_id, start, end, exclude_appointment_id)
            .exclude(subsidiary_id=subsidiary_id)
        )
        if cross_subsidiary.exists():
            raise BookingConflictException("professional has a conflicting appointment in another subsidiary")

        if not chair_room_id:
            if AssignmentService.requires_assignment(professional_id, day):
                raise BookingConflictException(
                    f"professional is assigned to a chair/room on {day}; a chair/room must be specified"
                )
            return None

        chair_room = get_calendar(ResourceKind.CHAIR_ROOM).get_resource(chair_room_id)
        if chair_room.subsidiary_id != subsidiary_id:
            raise InvalidRequestException("Chair/room does not belong to the selected subsidiary")

        if not AvailabilityService.is_available(
            ResourceKind.CHAIR_ROOM, chair_room.id, day, start_t, end_t, exclude_appointment_id
        ):
            raise BookingConflictException("chair/room unavailable")

        cls._validate_assignment(professional_id, chair_room.id, day, start_t, end_t)
        return chair_room

    @staticmethod
    def _validate_assignment(professional_id, chair_room_id, day: date, start_t: time, end_t: time) -> None:
        assignment = AssignmentService.resolve(professional_id, chair_room_id, day)
        if assignment is not None:
            if not AssignmentService.is_covered(assignment, start_t, end_t):
                raise BookingConflictException(
                    "professional is not assigned to this chair/room at the requested time"
                )
            return

        if AssignmentService.requires_assignment(professional_id, day):
            raise BookingConflictException(f"professional is assigned to another chair/room on {day}")

    @staticmethod
    def _find_payment(payment_id) -> Optional[Payment]:
        if not payment_id:
            return None
        try:
            return Payment.objects.filter(id=payment_id).first()
        except (ValidationError, ValueError):
            return None

    @staticmethod
    def _save(appointment: Appointment) -> None:
        try:
            with transaction.atomic():
                appointment.save()
        except IntegrityError:
            raise BookingConflictException("appointment conflicts with existing data")

