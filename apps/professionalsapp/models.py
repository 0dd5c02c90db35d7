import uuid

from django.db import models
from django.utils.translation import gettext_lazy as _

from apps.companiesapp.models import Subsidiary


class Professional(models.Model):
    """A professional who attends appointments at a subsidiary"""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    subsidiary = models.ForeignKey(
        Subsidiary,
        on_delete=models.CASCADE,
        related_name="professionals",
        verbose_name=_("Subsidiary"),
    )
    first_name = models.CharField(_("First Name"), max_length=50)
    last_name = models.CharField(_("Last Name"), max_length=50)
    email = models.EmailField(_("Email"), max_length=100)
    phone = models.CharField(_("Phone"), max_length=20, blank=True)
    document_number = models.CharField(_("Document Number"), max_length=20, blank=True)
    created_at = models.DateTimeField(_("Created At"), auto_now_add=True)
    updated_at = models.DateTimeField(_("Updated At"), auto_now=True)

    class Meta:
        verbose_name = _("Professional")
        verbose_name_plural = _("Professionals")
        ordering = ["first_name", "last_name"]
        indexes = [
            models.Index(fields=["subsidiary"]),
        ]

    def __str__(self):
        return self.full_name

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}".strip()
