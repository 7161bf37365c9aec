"""
apps.py: App configuration with signal registration
"""
from django.apps import AppConfig


class ClubTreasuryConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name               = "club_treasury"
    verbose_name       = "Tesorería y ranking del club"

    def ready(self):
        import club_treasury.signals  # noqa: F401  ← registers payment signals
