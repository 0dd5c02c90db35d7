"""
Booking app views
Handles endpoints related to appointments and slot availability
"""

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import mixins, permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter
from rest_framework.response import Response

from apps.bookingapp.filters import AppointmentFilter
from apps.bookingapp.models import Appointment
from apps.bookingapp.serializers import (
    AppointmentCancelSerializer,
    AppointmentConfirmSerializer,
    AppointmentCreateSerializer,
    AppointmentRescheduleSerializer,
    AppointmentSerializer,
    AvailableSlotsQuerySerializer,
    SlotSerializer,
)
from apps.bookingapp.services.availability_service import AvailabilityService
from apps.bookingapp.services.booking_service import UNSET, BookingService


class AppointmentViewSet(
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """
    API endpoint for appointments.

    Appointments are created through the booking service, which runs the whole
    availability chain. Additional actions:
    - Cancelling appointments
    - Confirming appointments
    - Rescheduling appointments

    Service exceptions are rendered by the project exception handler.
    """

    queryset = Appointment.objects.select_related(
        "professional", "customer", "subsidiary", "chair_room", "item"
    )
    serializer_class = AppointmentSerializer
    permission_classes = [permissions.AllowAny]
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_class = AppointmentFilter
    ordering_fields = ["start_time", "created_at", "status"]
    ordering = ["start_time"]

    def create(self, request, *args, **kwargs):
        """Book an appointment"""
        serializer = AppointmentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        appointment = BookingService.schedule_appointment(serializer.to_booking_request())

        return Response(self.get_serializer(appointment).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):
        """Cancel an appointment"""
        serializer = AppointmentCancelSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        appointment = BookingService.cancel_appointment(pk, reason=serializer.validated_data["reason"])
        return Response(self.get_serializer(appointment).data)

    @action(detail=True, methods=["post"])
    def confirm(self, request, pk=None):
        """Confirm an appointment"""
        serializer = AppointmentConfirmSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        appointment = BookingService.confirm_appointment(
            pk, payment_id=serializer.validated_data.get("payment")
        )
        return Response(self.get_serializer(appointment).data)

    @action(detail=True, methods=["post"])
    def reschedule(self, request, pk=None):
        """Reschedule an appointment"""
        serializer = AppointmentRescheduleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        appointment = BookingService.reschedule_appointment(
            pk,
            start_time=data["start_time"],
            end_time=data.get("end_time"),
            professional_id=data.get("professional"),
            chair_room_id=data.get("chair_room", UNSET),
        )
        return Response(self.get_serializer(appointment).data)


class AvailabilityViewSet(viewsets.ViewSet):
    """Free-slot lookup across subsidiary, professional and chair/room calendars"""

    permission_classes = [permissions.AllowAny]

    @action(detail=False, methods=["get"])
    def slots(self, request):
        """Get available slots for a professional"""
        serializer = AvailableSlotsQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        slots = AvailabilityService.find_available_slots(
            subsidiary_id=data["subsidiary"],
            professional_id=data["professional"],
            start_date=data["start_date"],
            end_date=data["end_date"],
            duration_minutes=data["duration_minutes"],
            chair_room_id=data.get("chair_room"),
            step_minutes=data.get("step_minutes"),
        )
        return Response({"count": len(slots), "slots": SlotSerializer(slots, many=True).data})
