# apps/bookingapp/filters.py
from django.utils import timezone
from django_filters import rest_framework as filters

from apps.bookingapp.models import Appointment, AppointmentStatus


class AppointmentFilter(filters.FilterSet):
    """Filter for the appointment agenda"""

    start_date = filters.DateFilter(field_name="start_time", lookup_expr="date__gte")
    end_date = filters.DateFilter(field_name="start_time", lookup_expr="date__lte")

    status = filters.ChoiceFilter(field_name="status", choices=AppointmentStatus.choices)
    include_cancelled = filters.BooleanFilter(method="filter_include_cancelled")

    professional = filters.UUIDFilter(field_name="professional__id")
    customer = filters.UUIDFilter(field_name="customer__id")
    subsidiary = filters.UUIDFilter(field_name="subsidiary__id")
    chair_room = filters.UUIDFilter(field_name="chair_room__id")
    item = filters.UUIDFilter(field_name="item__id")

    upcoming = filters.BooleanFilter(method="filter_upcoming")

    class Meta:
        model = Appointment
        fields = [
            "status",
            "start_date",
            "end_date",
            "professional",
            "customer",
            "subsidiary",
            "chair_room",
            "item",
        ]

    def filter_include_cancelled(self, queryset, name, value):
        if value:
            return queryset
        return queryset.exclude(status=AppointmentStatus.CANCELLED)

    def filter_upcoming(self, queryset, name, value):
        if value:
            return queryset.filter(start_time__gte=timezone.now())
        return queryset
