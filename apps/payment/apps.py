from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class PaymentConfig(AppConfig):
    name = "apps.payment"
    verbose_name = _("Payments")

    def ready(self):
        pass
