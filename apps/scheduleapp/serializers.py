# apps/scheduleapp/serializers.py
from django.utils.translation import gettext_lazy as _
from rest_framework import serializers

from apps.scheduleapp.enums import DayNumbering
from apps.scheduleapp.models import ProfessionalChairRoomAssignment
from apps.scheduleapp.services.recurring_schedule_service import DaySchedule
from apps.scheduleapp.utils.weekdays import to_iso

MAX_RANGE_DAYS = 366


def _normalize_weekday(value, numbering):
    try:
        return to_iso(int(value), numbering)
    except (TypeError, ValueError):
        raise serializers.ValidationError(
            _("Invalid weekday %(day)s for %(numbering)s numbering") % {"day": value, "numbering": numbering}
        )


def _validate_range(data):
    start_date, end_date = data.get("start_date"), data.get("end_date")
    if start_date is None or end_date is None:
        return
    if end_date < start_date:
        raise serializers.ValidationError({"end_date": _("End date must be on or after start date")})
    if (end_date - start_date).days > MAX_RANGE_DAYS:
        raise serializers.ValidationError({"end_date": _("Date range cannot exceed one year")})


class ScheduleEntrySerializer(serializers.Serializer):
    """Read representation shared by all resource kinds"""

    id = serializers.UUIDField(read_only=True)
    date = serializers.DateField(read_only=True)
    open_time = serializers.TimeField(read_only=True)
    close_time = serializers.TimeField(read_only=True)
    closed = serializers.BooleanField(read_only=True)
    customized = serializers.BooleanField(read_only=True)


class ScheduleEntryUpsertSerializer(serializers.Serializer):
    open_time = serializers.TimeField(required=False, allow_null=True)
    close_time = serializers.TimeField(required=False, allow_null=True)
    closed = serializers.BooleanField(required=False, default=False)
    replace_existing = serializers.BooleanField(required=False, default=False)

    def validate(self, data):
        if data["closed"]:
            return data

        open_time, close_time = data.get("open_time"), data.get("close_time")
        if open_time is None or close_time is None:
            raise serializers.ValidationError(_("Open and close times are required unless the day is closed"))
        if close_time <= open_time:
            raise serializers.ValidationError({"close_time": _("Close time must be after open time")})
        return data


class EntryRangeQuerySerializer(serializers.Serializer):
    start_date = serializers.DateField()
    end_date = serializers.DateField()

    def validate(self, data):
        _validate_range(data)
        return data


class DayScheduleSerializer(serializers.Serializer):
    open = serializers.BooleanField()
    open_time = serializers.TimeField(required=False, allow_null=True)
    close_time = serializers.TimeField(required=False, allow_null=True)

    def validate(self, data):
        if data["open"]:
            open_time, close_time = data.get("open_time"), data.get("close_time")
            if open_time is None or close_time is None:
                raise serializers.ValidationError(_("Open days need open and close times"))
            if close_time <= open_time:
                raise serializers.ValidationError({"close_time": _("Close time must be after open time")})
        return data


class WeekScheduleSerializer(serializers.Serializer):
    """
    Weekday pattern applied over a date range.

    ``week_schedule`` maps a weekday to ``{open, open_time, close_time}``.
    Keys are ISO weekdays (1=Monday .. 7=Sunday) unless ``day_numbering`` is
    ``sunday_zero`` (0=Sunday .. 6=Saturday). Validated data carries ISO keys
    and DaySchedule values.
    """

    start_date = serializers.DateField()
    end_date = serializers.DateField()
    day_numbering = serializers.ChoiceField(choices=DayNumbering.choices, default=DayNumbering.ISO)
    week_schedule = serializers.DictField(child=DayScheduleSerializer(), allow_empty=False)
    replace_existing = serializers.BooleanField(required=False, default=False)
    check_conflicts = serializers.BooleanField(required=False, default=True)
    exclude_dates = serializers.ListField(child=serializers.DateField(), required=False, default=list)

    def validate(self, data):
        _validate_range(data)

        week_schedule = {}
        for key, config in data["week_schedule"].items():
            weekday = _normalize_weekday(key, data["day_numbering"])
            if weekday in week_schedule:
                raise serializers.ValidationError({"week_schedule": _("Duplicate weekday %s") % key})
            week_schedule[weekday] = DaySchedule(
                open=config["open"],
                open_time=config.get("open_time"),
                close_time=config.get("close_time"),
            )

        if not any(day.open for day in week_schedule.values()):
            raise serializers.ValidationError({"week_schedule": _("At least one weekday must be open")})

        data["week_schedule"] = week_schedule
        return data


class ClosedDaysSerializer(serializers.Serializer):
    dates = serializers.ListField(child=serializers.DateField(), allow_empty=False, max_length=MAX_RANGE_DAYS)
    replace_existing = serializers.BooleanField(required=False, default=False)


class ConflictCheckSerializer(serializers.Serializer):
    dates = serializers.ListField(child=serializers.DateField(), required=False, default=list)
    weekdays = serializers.ListField(child=serializers.IntegerField(), required=False, default=list)
    day_numbering = serializers.ChoiceField(choices=DayNumbering.choices, default=DayNumbering.ISO)
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)
    include_customized_only = serializers.BooleanField(required=False, default=True)

    def validate(self, data):
        if not data["dates"] and not data["weekdays"]:
            raise serializers.ValidationError(_("Provide dates, weekdays or both"))

        if data["weekdays"]:
            if "start_date" not in data or "end_date" not in data:
                raise serializers.ValidationError(_("A weekday pattern needs start_date and end_date"))
            _validate_range(data)
            data["weekdays"] = [_normalize_weekday(day, data["day_numbering"]) for day in data["weekdays"]]
        return data


class AssignmentSerializer(serializers.ModelSerializer):
    class Meta:
        model = ProfessionalChairRoomAssignment
        fields = [
            "id",
            "professional",
            "chair_room",
            "mode",
            "date",
            "weekday",
            "start_time",
            "end_time",
        ]
        read_only_fields = fields


class AssignmentWindowMixin:
    def validate(self, data):
        if "start_time" in data and data["end_time"] <= data["start_time"]:
            raise serializers.ValidationError({"end_time": _("End time must be after start time")})
        return data


class SingleAssignmentKeySerializer(serializers.Serializer):
    professional = serializers.UUIDField()
    chair_room = serializers.UUIDField()
    date = serializers.DateField()


class SingleAssignmentSerializer(AssignmentWindowMixin, SingleAssignmentKeySerializer):
    start_time = serializers.TimeField()
    end_time = serializers.TimeField()


class RecurringAssignmentKeySerializer(serializers.Serializer):
    professional = serializers.UUIDField()
    chair_room = serializers.UUIDField()
    weekday = serializers.IntegerField()
    day_numbering = serializers.ChoiceField(choices=DayNumbering.choices, default=DayNumbering.ISO)

    def validate(self, data):
        data["weekday"] = _normalize_weekday(data["weekday"], data["day_numbering"])
        return data


class RecurringAssignmentSerializer(AssignmentWindowMixin, serializers.Serializer):
    """Upsert one recurring assignment per listed weekday"""

    professional = serializers.UUIDField()
    chair_room = serializers.UUIDField()
    weekdays = serializers.ListField(child=serializers.IntegerField(), allow_empty=False)
    day_numbering = serializers.ChoiceField(choices=DayNumbering.choices, default=DayNumbering.ISO)
    start_time = serializers.TimeField()
    end_time = serializers.TimeField()

    def validate(self, data):
        data = super().validate(data)
        data["weekdays"] = sorted({_normalize_weekday(day, data["day_numbering"]) for day in data["weekdays"]})
        return data


class AssignmentQuerySerializer(serializers.Serializer):
    professional = serializers.UUIDField(required=False)
    chair_room = serializers.UUIDField(required=False)
    date = serializers.DateField()

    def validate(self, data):
        if bool(data.get("professional")) == bool(data.get("chair_room")):
            raise serializers.ValidationError(_("Filter by exactly one of professional or chair_room"))
        return data
