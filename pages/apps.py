# pages/apps.py
from importlib import import_module

from django.apps import AppConfig
from django.conf import settings


class PagesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "pages"
    verbose_name = "Page Management"

    def ready(self):
        # Built-in handlers register on import, project handlers via settings
        from . import handlers  # noqa: F401

        for module in getattr(settings, "PAGES_TEMPLATE_HANDLER_MODULES", []):
            import_module(module)
