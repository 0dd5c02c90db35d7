from django.contrib import admin

from .models import Professional


@admin.register(Professional)
class ProfessionalAdmin(admin.ModelAdmin):
    list_display = ("full_name", "subsidiary", "email", "phone")
    list_filter = ("subsidiary",)
    search_fields = ("first_name", "last_name", "email")
