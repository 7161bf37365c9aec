"""
club_config/celery.py
─────────────────────────────────────────────────────────────────────
Celery application configuration + beat schedule
"""
import os

from celery import Celery
from celery.schedules import crontab

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "club_config.settings.development")

app = Celery("club_treasury")

# Read config from Django settings (CELERY_* keys)
app.config_from_object("django.conf:settings", namespace="CELERY")

# Auto-discover tasks in all INSTALLED_APPS
app.autodiscover_tasks()


# ── Periodic Task Schedule ────────────────────────────────────────────
app.conf.beat_schedule = {
    # resumen del mes anterior, día 1, 8 de la mañana
    "monthly-treasury-summary": {
        "task":     "club_treasury.tasks.monthly_treasury_summary_task",
        "schedule": crontab(day_of_month=1, hour=8, minute=0),
    },
    # muro de la vergüenza, lunes, 10 de la mañana
    "wall-of-shame-check-weekly": {
        "task":     "club_treasury.tasks.wall_of_shame_check_task",
        "schedule": crontab(day_of_week=1, hour=10, minute=0),
    },
}

app.conf.timezone = "America/Argentina/Buenos_Aires"
