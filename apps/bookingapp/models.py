# apps/bookingapp/models.py
import uuid

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import F, Q
from django.utils import timezone
from django.utils.translation import gettext_lazy as _
from model_utils import FieldTracker

from apps.companiesapp.models import ChairRoom, Subsidiary
from apps.customersapp.models import Customer
from apps.payment.models import Payment
from apps.professionalsapp.models import Professional
from apps.serviceapp.models import Item


class AppointmentStatus(models.TextChoices):
    """Appointment status values; CANCELLED is terminal"""

    PENDING = "pending", _("Pending Payment")
    NOT_CONFIRMED = "not_confirmed", _("Not Confirmed")
    CONFIRMED = "confirmed", _("Confirmed")
    CANCELLED = "cancelled", _("Cancelled")


class Appointment(models.Model):
    """
    A booked interval holding a professional, a subsidiary and optionally a
    chair/room. Status is derived by the booking service, never taken from the
    client.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    professional = models.ForeignKey(
        Professional,
        on_delete=models.PROTECT,
        related_name="appointments",
        verbose_name=_("Professional"),
    )
    customer = models.ForeignKey(
        Customer,
        on_delete=models.PROTECT,
        related_name="appointments",
        verbose_name=_("Customer"),
    )
    subsidiary = models.ForeignKey(
        Subsidiary,
        on_delete=models.PROTECT,
        related_name="appointments",
        verbose_name=_("Subsidiary"),
    )
    chair_room = models.ForeignKey(
        ChairRoom,
        on_delete=models.PROTECT,
        related_name="appointments",
        verbose_name=_("Chair/Room"),
        null=True,
        blank=True,
    )
    item = models.ForeignKey(
        Item,
        on_delete=models.PROTECT,
        related_name="appointments",
        verbose_name=_("Item"),
    )
    payment = models.ForeignKey(
        Payment,
        on_delete=models.SET_NULL,
        related_name="appointments",
        verbose_name=_("Payment"),
        null=True,
        blank=True,
    )
    start_time = models.DateTimeField(_("Start Time"))
    end_time = models.DateTimeField(_("End Time"))
    status = models.CharField(
        _("Status"),
        max_length=20,
        choices=AppointmentStatus.choices,
        default=AppointmentStatus.NOT_CONFIRMED,
    )
    notes = models.TextField(_("Notes"), blank=True)
    cancellation_reason = models.TextField(_("Cancellation Reason"), blank=True)
    cancelled_at = models.DateTimeField(_("Cancelled At"), null=True, blank=True)
    created_at = models.DateTimeField(_("Created At"), auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(_("Updated At"), auto_now=True)

    tracker = FieldTracker(fields=["status", "start_time", "end_time"])

    class Meta:
        verbose_name = _("Appointment")
        verbose_name_plural = _("Appointments")
        ordering = ["-start_time"]
        constraints = [
            models.CheckConstraint(
                condition=Q(end_time__gt=F("start_time")),
                name="appointment_end_after_start",
            ),
        ]
        indexes = [
            models.Index(fields=["professional", "start_time", "status"]),
            models.Index(fields=["chair_room", "start_time", "status"]),
            models.Index(fields=["subsidiary", "start_time", "status"]),
            models.Index(fields=["customer", "start_time"]),
        ]

    def __str__(self):
        return f"{self.professional_id} - {self.start_time:%Y-%m-%d %H:%M} ({self.status})"

    def clean(self):
        """Validate time range and terminal status"""
        if self.end_time <= self.start_time:
            raise ValidationError(_("End time must be after start time"))

        if (
            not self._state.adding
            and self.tracker.previous("status") == AppointmentStatus.CANCELLED
            and self.status != AppointmentStatus.CANCELLED
        ):
            raise ValidationError(_("Cancelled appointments cannot be reopened"))

    def save(self, *args, **kwargs):
        self.clean()
        super().save(*args, **kwargs)

    @property
    def is_cancelled(self):
        return self.status == AppointmentStatus.CANCELLED

    def mark_confirmed(self):
        """Mark appointment as confirmed"""
        self.status = AppointmentStatus.CONFIRMED
        self.save(update_fields=["status", "updated_at"])

    def mark_cancelled(self, reason=""):
        """Mark appointment as cancelled; it stops counting for overlaps"""
        self.status = AppointmentStatus.CANCELLED
        self.cancellation_reason = reason
        self.cancelled_at = timezone.now()
        self.save(update_fields=["status", "cancellation_reason", "cancelled_at", "updated_at"])
