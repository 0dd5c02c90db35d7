import uuid

from django.db import models
from django.utils.translation import gettext_lazy as _


class PaymentStatus(models.TextChoices):
    """Payment status choices"""

    PENDING = "pending", _("Pending")
    PROCESSING = "processing", _("Processing")
    COMPLETED = "completed", _("Completed")
    FAILED = "failed", _("Failed")
    REFUNDED = "refunded", _("Refunded")
    CANCELLED = "cancelled", _("Cancelled")


class PaymentMethod(models.TextChoices):
    """Payment method choices"""

    CASH = "cash", _("Cash")
    CREDIT_CARD = "credit_card", _("Credit Card")
    DEBIT_CARD = "debit_card", _("Debit Card")
    PIX = "pix", _("PIX")


class Payment(models.Model):
    """
    Payment reference recorded by the payment provider integration.

    The scheduling engine only reads these rows to decide whether a pre-paid
    item has been settled.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    amount = models.DecimalField(_("Amount"), max_digits=10, decimal_places=2)
    payment_method = models.CharField(
        _("Payment Method"), max_length=20, choices=PaymentMethod.choices
    )
    status = models.CharField(
        _("Status"),
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
    )
    installments = models.PositiveIntegerField(_("Installments"), default=1)
    payment_date = models.DateTimeField(_("Payment Date"), null=True, blank=True)
    created_at = models.DateTimeField(_("Created At"), auto_now_add=True)
    updated_at = models.DateTimeField(_("Updated At"), auto_now=True)

    class Meta:
        verbose_name = _("Payment")
        verbose_name_plural = _("Payments")
        indexes = [
            models.Index(fields=["status"]),
        ]

    def __str__(self):
        return f"{self.id}: {self.amount} ({self.status})"
