from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class DynamicGridConfig(AppConfig):
    name = "django_dynamic_grid"
    verbose_name = _("django_dynamic_grid")
    default_auto_field = "django.db.models.BigAutoField"

    def ready(self):
        # connects the login/logout receivers that manage the navigation context
        from . import signals  # noqa: F401
