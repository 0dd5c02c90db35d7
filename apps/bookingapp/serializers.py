# apps/bookingapp/serializers.py
from django.utils.translation import gettext_lazy as _
from rest_framework import serializers

from apps.bookingapp.models import Appointment
from apps.bookingapp.services.booking_service import BookingRequest


class AppointmentSerializer(serializers.ModelSerializer):
    """Read serializer for appointments"""

    status_display = serializers.CharField(source="get_status_display", read_only=True)
    professional_name = serializers.CharField(source="professional.full_name", read_only=True)
    item_name = serializers.CharField(source="item.name", read_only=True)

    class Meta:
        model = Appointment
        fields = [
            "id",
            "professional",
            "professional_name",
            "customer",
            "subsidiary",
            "chair_room",
            "item",
            "item_name",
            "payment",
            "start_time",
            "end_time",
            "status",
            "status_display",
            "notes",
            "cancellation_reason",
            "cancelled_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class AppointmentCreateSerializer(serializers.Serializer):
    """
    Input for booking an appointment.

    ``end_time`` defaults to ``start_time`` plus the item duration. Status is
    never taken from the client; ``confirmed`` only asks for a pre-confirmed
    booking.
    """

    professional = serializers.UUIDField()
    customer = serializers.UUIDField()
    subsidiary = serializers.UUIDField()
    item = serializers.UUIDField()
    chair_room = serializers.UUIDField(required=False, allow_null=True)
    payment = serializers.UUIDField(required=False, allow_null=True)
    start_time = serializers.DateTimeField()
    end_time = serializers.DateTimeField(required=False, allow_null=True)
    confirmed = serializers.BooleanField(required=False, default=False)
    notes = serializers.CharField(required=False, allow_blank=True, default="", max_length=1000)

    def validate(self, data):
        end_time = data.get("end_time")
        if end_time and end_time <= data["start_time"]:
            raise serializers.ValidationError({"end_time": _("End time must be after start time")})
        return data

    def to_booking_request(self) -> BookingRequest:
        data = self.validated_data
        return BookingRequest(
            professional_id=data["professional"],
            customer_id=data["customer"],
            subsidiary_id=data["subsidiary"],
            item_id=data["item"],
            start_time=data["start_time"],
            end_time=data.get("end_time"),
            chair_room_id=data.get("chair_room"),
            payment_id=data.get("payment"),
            confirmed=data.get("confirmed", False),
            notes=data.get("notes", ""),
        )


class AppointmentRescheduleSerializer(serializers.Serializer):
    """Input for moving an appointment"""

    start_time = serializers.DateTimeField()
    end_time = serializers.DateTimeField(required=False, allow_null=True)
    professional = serializers.UUIDField(required=False, allow_null=True)
    chair_room = serializers.UUIDField(required=False, allow_null=True)

    def validate(self, data):
        end_time = data.get("end_time")
        if end_time and end_time <= data["start_time"]:
            raise serializers.ValidationError({"end_time": _("End time must be after start time")})
        return data


class AppointmentCancelSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, default="", max_length=500)


class AppointmentConfirmSerializer(serializers.Serializer):
    payment = serializers.UUIDField(required=False, allow_null=True)


class AvailableSlotsQuerySerializer(serializers.Serializer):
    """Query parameters of the slot finder"""

    subsidiary = serializers.UUIDField()
    professional = serializers.UUIDField()
    chair_room = serializers.UUIDField(required=False, allow_null=True)
    start_date = serializers.DateField()
    end_date = serializers.DateField(required=False)
    duration_minutes = serializers.IntegerField(min_value=1, max_value=1440)
    step_minutes = serializers.IntegerField(required=False, min_value=1, max_value=1440)

    def validate(self, data):
        data.setdefault("end_date", data["start_date"])
        if data["end_date"] < data["start_date"]:
            raise serializers.ValidationError({"end_date": _("End date must be on or after start date")})
        if (data["end_date"] - data["start_date"]).days > 62:
            raise serializers.ValidationError({"end_date": _("Date range cannot exceed 62 days")})
        return data


class SlotSerializer(serializers.Serializer):
    start = serializers.DateTimeField()
    end = serializers.DateTimeField()
