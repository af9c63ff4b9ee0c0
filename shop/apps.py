"""
Shop App Configuration

Builds the process-wide AppConfiguration once at startup and runs the
registration hooks that fill its environment. Other apps read it through
shop.services.get_configuration().
"""

from django.apps import AppConfig


class ShopConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "shop"
    verbose_name = "Shop"

    configuration = None

    def ready(self):
        from . import services

        self.configuration = services.build_configuration()
        services.run_registrations(self.configuration.environment)
