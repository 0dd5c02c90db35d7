from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class ProfessionalsAppConfig(AppConfig):
    name = "apps.professionalsapp"
    verbose_name = _("Professionals")

    def ready(self):
        pass
