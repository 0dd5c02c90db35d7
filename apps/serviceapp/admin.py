from django.contrib import admin

from .models import Item


@admin.register(Item)
class ItemAdmin(admin.ModelAdmin):
    list_display = ("name", "subsidiary", "price", "duration_minutes", "requires_pre_payment")
    list_filter = ("requires_pre_payment", "subsidiary")
    search_fields = ("name",)
