# apps/companiesapp/models.py
import uuid

from django.db import models
from django.utils.translation import gettext_lazy as _


class Company(models.Model):
    """Company entity that can have multiple subsidiaries/branches"""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(_("Name"), max_length=100)
    phone = models.CharField(_("Phone"), max_length=20, blank=True)
    document_number = models.CharField(_("Document Number"), max_length=20, blank=True)
    created_at = models.DateTimeField(_("Created At"), auto_now_add=True)
    updated_at = models.DateTimeField(_("Updated At"), auto_now=True)

    class Meta:
        verbose_name = _("Company")
        verbose_name_plural = _("Companies")
        ordering = ["name"]

    def __str__(self):
        return self.name


class Subsidiary(models.Model):
    """A physical location of a company where appointments take place"""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    company = models.ForeignKey(
        Company,
        on_delete=models.CASCADE,
        related_name="subsidiaries",
        verbose_name=_("Company"),
    )
    name = models.CharField(_("Name"), max_length=100)
    address = models.CharField(_("Address"), max_length=255, blank=True)
    document_number = models.CharField(_("Document Number"), max_length=20, blank=True)
    created_at = models.DateTimeField(_("Created At"), auto_now_add=True)
    updated_at = models.DateTimeField(_("Updated At"), auto_now=True)

    class Meta:
        verbose_name = _("Subsidiary")
        verbose_name_plural = _("Subsidiaries")
        ordering = ["name"]

    def __str__(self):
        return f"{self.company.name} - {self.name}"


class ChairRoom(models.Model):
    """A chair or room inside a subsidiary that appointments can occupy"""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    subsidiary = models.ForeignKey(
        Subsidiary,
        on_delete=models.CASCADE,
        related_name="chair_rooms",
        verbose_name=_("Subsidiary"),
    )
    name = models.CharField(_("Name"), max_length=100)
    description = models.CharField(_("Description"), max_length=255, blank=True)
    room_number = models.CharField(_("Room Number"), max_length=20, blank=True)
    floor = models.IntegerField(_("Floor"), null=True, blank=True)
    capacity = models.PositiveIntegerField(_("Capacity"), null=True, blank=True)
    created_at = models.DateTimeField(_("Created At"), auto_now_add=True)
    updated_at = models.DateTimeField(_("Updated At"), auto_now=True)

    class Meta:
        verbose_name = _("Chair/Room")
        verbose_name_plural = _("Chairs/Rooms")
        ordering = ["subsidiary", "name"]

    def __str__(self):
        return f"{self.name} ({self.subsidiary.name})"
