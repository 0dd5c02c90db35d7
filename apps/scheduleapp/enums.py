from django.db import models
from django.utils.translation import gettext_lazy as _


class Weekday(models.IntegerChoices):
    """ISO day of week (1=Monday, 7=Sunday)"""

    MONDAY = 1, _("Monday")
    TUESDAY = 2, _("Tuesday")
    WEDNESDAY = 3, _("Wednesday")
    THURSDAY = 4, _("Thursday")
    FRIDAY = 5, _("Friday")
    SATURDAY = 6, _("Saturday")
    SUNDAY = 7, _("Sunday")


class ResourceKind(models.TextChoices):
    """Kinds of resource that own a calendar of schedule entries"""

    SUBSIDIARY = "subsidiary", _("Subsidiary")
    CHAIR_ROOM = "chair_room", _("Chair/Room")
    PROFESSIONAL = "professional", _("Professional")


class AssignmentMode(models.TextChoices):
    """How a professional is bound to a chair/room"""

    SINGLE = "single", _("Single Date")
    RECURRING = "recurring", _("Recurring Weekday")


class DayNumbering(models.TextChoices):
    """Weekday numbering schemes accepted at the API edge"""

    ISO = "iso", _("1=Monday .. 7=Sunday")
    SUNDAY_ZERO = "sunday_zero", _("0=Sunday .. 6=Saturday")
