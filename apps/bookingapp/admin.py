# apps/bookingapp/admin.py
from django.contrib import admin
from django.utils.translation import gettext_lazy as _

from apps.bookingapp.models import Appointment


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    """Admin configuration for appointments"""

    list_display = [
        "id",
        "customer_name",
        "item_name",
        "professional_name",
        "subsidiary",
        "chair_room",
        "start_time",
        "end_time",
        "status",
    ]
    list_filter = ["status", "start_time", "subsidiary"]
    search_fields = [
        "customer__name",
        "customer__phone",
        "item__name",
        "professional__first_name",
        "professional__last_name",
        "subsidiary__name",
    ]
    readonly_fields = ["status", "cancelled_at", "created_at", "updated_at"]
    date_hierarchy = "start_time"

    def customer_name(self, obj):
        """Get customer name for display"""
        return obj.customer.name

    customer_name.short_description = _("Customer")

    def item_name(self, obj):
        return obj.item.name

    item_name.short_description = _("Item")

    def professional_name(self, obj):
        return obj.professional.full_name

    professional_name.short_description = _("Professional")
