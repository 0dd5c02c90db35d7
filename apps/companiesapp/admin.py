# apps/companiesapp/admin.py
from django.contrib import admin

from . import models


class SubsidiaryInline(admin.TabularInline):
    model = models.Subsidiary
    extra = 0
    fields = ("name", "address")
    show_change_link = True


class ChairRoomInline(admin.TabularInline):
    model = models.ChairRoom
    extra = 0
    fields = ("name", "room_number", "floor", "capacity")


@admin.register(models.Company)
class CompanyAdmin(admin.ModelAdmin):
    list_display = ("name", "phone", "created_at")
    search_fields = ("name", "document_number")
    inlines = [SubsidiaryInline]


@admin.register(models.Subsidiary)
class SubsidiaryAdmin(admin.ModelAdmin):
    list_display = ("name", "company", "created_at")
    list_filter = ("company",)
    search_fields = ("name", "company__name")
    inlines = [ChairRoomInline]


@admin.register(models.ChairRoom)
class ChairRoomAdmin(admin.ModelAdmin):
    list_display = ("name", "subsidiary", "room_number", "capacity")
    list_filter = ("subsidiary",)
    search_fields = ("name", "room_number")
