import uuid

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _

from apps.companiesapp.models import Company, Subsidiary


class Item(models.Model):
    """Bookable service item offered by a subsidiary"""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    company = models.ForeignKey(
        Company, on_delete=models.CASCADE, related_name="items", verbose_name=_("Company")
    )
    subsidiary = models.ForeignKey(
        Subsidiary,
        on_delete=models.CASCADE,
        related_name="items",
        verbose_name=_("Subsidiary"),
    )
    name = models.CharField(_("Name"), max_length=100)
    description = models.CharField(_("Description"), max_length=255, blank=True)
    price = models.DecimalField(_("Price"), max_digits=10, decimal_places=2)
    duration_minutes = models.PositiveIntegerField(
        _("Duration (minutes)"),
        validators=[MinValueValidator(1), MaxValueValidator(1440)],  # Max 24 hours
    )
    requires_pre_payment = models.BooleanField(_("Requires Pre-payment"), default=False)
    created_at = models.DateTimeField(_("Created At"), auto_now_add=True)
    updated_at = models.DateTimeField(_("Updated At"), auto_now=True)

    class Meta:
        verbose_name = _("Item")
        verbose_name_plural = _("Items")
        ordering = ["name"]

    def __str__(self):
        return self.name
