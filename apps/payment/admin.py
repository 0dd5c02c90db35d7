from django.contrib import admin

from .models import Payment


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ("id", "amount", "payment_method", "status", "payment_date")
    list_filter = ("status", "payment_method")
    readonly_fields = ("created_at", "updated_at")
