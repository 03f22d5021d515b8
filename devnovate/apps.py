"""Django app configuration for devnovate."""
from django.apps import AppConfig


class DevnovateConfig(AppConfig):
    """Configuration for the devnovate app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "devnovate"
    verbose_name = "Devnovate Blog"

    def ready(self):
        """Connect signal receivers."""
        from . import notifications  # noqa: F401
