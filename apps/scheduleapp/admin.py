# apps/scheduleapp/admin.py
from django.contrib import admin

from apps.scheduleapp.models import (
    ChairRoomScheduleEntry,
    ProfessionalChairRoomAssignment,
    ProfessionalScheduleEntry,
    SubsidiaryScheduleEntry,
)


class ScheduleEntryAdmin(admin.ModelAdmin):
    """Shared admin configuration for per-date schedule entries"""

    list_display = ["date", "open_time", "close_time", "closed", "customized"]
    list_filter = ["closed", "customized", "date"]
    readonly_fields = ["created_at", "updated_at"]
    date_hierarchy = "date"


@admin.register(SubsidiaryScheduleEntry)
class SubsidiaryScheduleEntryAdmin(ScheduleEntryAdmin):
    list_display = ["subsidiary"] + ScheduleEntryAdmin.list_display
    search_fields = ["subsidiary__name"]


@admin.register(ChairRoomScheduleEntry)
class ChairRoomScheduleEntryAdmin(ScheduleEntryAdmin):
    list_display = ["chair_room"] + ScheduleEntryAdmin.list_display
    search_fields = ["chair_room__name"]


@admin.register(ProfessionalScheduleEntry)
class ProfessionalScheduleEntryAdmin(ScheduleEntryAdmin):
    list_display = ["professional"] + ScheduleEntryAdmin.list_display
    search_fields = ["professional__first_name", "professional__last_name"]


@admin.register(ProfessionalChairRoomAssignment)
class ProfessionalChairRoomAssignmentAdmin(admin.ModelAdmin):
    list_display = ["professional", "chair_room", "mode", "date", "weekday", "start_time", "end_time"]
    list_filter = ["mode", "weekday"]
    search_fields = ["professional__first_name", "professional__last_name", "chair_room__name"]
