from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class ScheduleAppConfig(AppConfig):
    name = "apps.scheduleapp"
    verbose_name = _("Schedules")

    def ready(self):
        pass
