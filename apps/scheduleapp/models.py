# apps/scheduleapp/models.py
import uuid

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import F, Q
from django.utils.translation import gettext_lazy as _

from apps.companiesapp.models import ChairRoom, Subsidiary
from apps.professionalsapp.models import Professional

from .enums import AssignmentMode, Weekday


class ScheduleEntry(models.Model):
    """
    Per-date operating window of one resource.

    There is at most one entry per (resource, date). ``customized`` marks an
    entry written explicitly, as opposed to one materialized mechanically from
    a recurring pattern; only customized entries block a new pattern when the
    conflict checker runs in its default mode.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    date = models.DateField(_("Date"))
    open_time = models.TimeField(_("Open Time"))
    close_time = models.TimeField(_("Close Time"))
    closed = models.BooleanField(_("Closed"), default=False)
    customized = models.BooleanField(_("Customized"), default=False)
    created_at = models.DateTimeField(_("Created At"), auto_now_add=True)
    updated_at = models.DateTimeField(_("Updated At"), auto_now=True)

    class Meta:
        abstract = True
        ordering = ["date"]

    def clean(self):
        if not self.closed and self.close_time <= self.open_time:
            raise ValidationError(_("Close time must be after open time"))

    def covers(self, start_time, end_time):
        """Whether ``[start_time, end_time]`` fits inside an open window."""
        return not self.closed and start_time >= self.open_time and end_time <= self.close_time


def _window_check(name):
    return models.CheckConstraint(
        condition=Q(closed=True) | Q(close_time__gt=F("open_time")),
        name=name,
    )


class SubsidiaryScheduleEntry(ScheduleEntry):
    subsidiary = models.ForeignKey(
        Subsidiary,
        on_delete=models.CASCADE,
        related_name="schedule_entries",
        verbose_name=_("Subsidiary"),
    )

    class Meta(ScheduleEntry.Meta):
        verbose_name = _("Subsidiary Schedule Entry")
        verbose_name_plural = _("Subsidiary Schedule Entries")
        constraints = [
            models.UniqueConstraint(
                fields=["subsidiary", "date"], name="unique_subsidiary_schedule_date"
            ),
            _window_check("subsidiary_schedule_window_valid"),
        ]

    def __str__(self):
        return f"{self.subsidiary_id} {self.date}"


class ChairRoomScheduleEntry(ScheduleEntry):
    chair_room = models.ForeignKey(
        ChairRoom,
        on_delete=models.CASCADE,
        related_name="schedule_entries",
        verbose_name=_("Chair/Room"),
    )

    class Meta(ScheduleEntry.Meta):
        verbose_name = _("Chair/Room Schedule Entry")
        verbose_name_plural = _("Chair/Room Schedule Entries")
        constraints = [
            models.UniqueConstraint(
                fields=["chair_room", "date"], name="unique_chair_room_schedule_date"
            ),
            _window_check("chair_room_schedule_window_valid"),
        ]

    def __str__(self):
        return f"{self.chair_room_id} {self.date}"


class ProfessionalScheduleEntry(ScheduleEntry):
    professional = models.ForeignKey(
        Professional,
        on_delete=models.CASCADE,
        related_name="schedule_entries",
        verbose_name=_("Professional"),
    )

    class Meta(ScheduleEntry.Meta):
        verbose_name = _("Professional Schedule Entry")
        verbose_name_plural = _("Professional Schedule Entries")
        constraints = [
            models.UniqueConstraint(
                fields=["professional", "date"], name="unique_professional_schedule_date"
            ),
            _window_check("professional_schedule_window_valid"),
        ]

    def __str__(self):
        return f"{self.professional_id} {self.date}"


class ProfessionalChairRoomAssignment(models.Model):
    """
    Binds a professional to a chair/room, either on one date (SINGLE) or on
    every occurrence of a weekday (RECURRING).
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    professional = models.ForeignKey(
        Professional,
        on_delete=models.CASCADE,
        related_name="chair_room_assignments",
        verbose_name=_("Professional"),
    )
    chair_room = models.ForeignKey(
        ChairRoom,
        on_delete=models.CASCADE,
        related_name="professional_assignments",
        verbose_name=_("Chair/Room"),
    )
    mode = models.CharField(_("Mode"), max_length=10, choices=AssignmentMode.choices)
    date = models.DateField(_("Date"), null=True, blank=True)
    weekday = models.PositiveSmallIntegerField(
        _("Weekday"), choices=Weekday.choices, null=True, blank=True
    )
    start_time = models.TimeField(_("Start Time"))
    end_time = models.TimeField(_("End Time"))
    created_at = models.DateTimeField(_("Created At"), auto_now_add=True)
    updated_at = models.DateTimeField(_("Updated At"), auto_now=True)

    class Meta:
        verbose_name = _("Professional Chair/Room Assignment")
        verbose_name_plural = _("Professional Chair/Room Assignments")
        constraints = [
            models.UniqueConstraint(
                fields=["professional", "chair_room", "date"],
                condition=Q(mode=AssignmentMode.SINGLE),
                name="unique_single_assignment",
            ),
            models.UniqueConstraint(
                fields=["professional", "chair_room", "weekday"],
                condition=Q(mode=AssignmentMode.RECURRING),
                name="unique_recurring_assignment",
            ),
            models.CheckConstraint(
                condition=Q(end_time__gt=F("start_time")),
                name="assignment_window_valid",
            ),
            models.CheckConstraint(
                condition=(
                    Q(mode=AssignmentMode.SINGLE, date__isnull=False, weekday__isnull=True)
                    | Q(mode=AssignmentMode.RECURRING, date__isnull=True, weekday__isnull=False)
                ),
                name="assignment_key_matches_mode",
            ),
        ]
        indexes = [
            models.Index(fields=["professional", "date"]),
            models.Index(fields=["professional", "weekday"]),
        ]

    def __str__(self):
        when = self.date if self.mode == AssignmentMode.SINGLE else self.get_weekday_display()
        return f"{self.professional_id} @ {self.chair_room_id} {when} {self.start_time}-{self.end_time}"

    def clean(self):
        if self.end_time <= self.start_time:
            raise ValidationError(_("End time must be after start time"))
        if self.mode == AssignmentMode.SINGLE and self.date is None:
            raise ValidationError(_("Single assignments need a date"))
        if self.mode == AssignmentMode.RECURRING and self.weekday is None:
            raise ValidationError(_("Recurring assignments need a weekday"))

    def covers(self, start_time, end_time):
        """
        Closed-interval overlap between the assignment and ``[start, end]``.

        Inclusive at both boundaries, unlike the half-open test used for
        appointment overlaps.
        """
        return not (end_time < self.start_time or start_time > self.end_time)
