"""
club_config/settings/development.py
─────────────────────────────────────────────────────────────────────
Entorno de desarrollo
"""
from .base import *  # noqa: F401, F403

DEBUG = True

ALLOWED_HOSTS = ["*"]

# ── Database ──────────────────────────────────────────────────────────
import os
if os.environ.get("DATABASE_URL"):
    import dj_database_url
    DATABASES = {"default": dj_database_url.config(conn_max_age=600)}
# sin DATABASE_URL se usa el SQLite de base.py

# ── Cache en memoria (sin Redis en desarrollo) ────────────────────────
CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
    }
}

# ── Static files served by Django in dev ──────────────────────────────
STORAGES["staticfiles"] = {"BACKEND": "django.contrib.staticfiles.storage.StaticFilesStorage"}  # noqa: F405

# ── Logging: show everything in development ───────────────────────────
LOGGING["root"]["level"] = "DEBUG"  # noqa: F405
LOGGING["loggers"]["club_treasury"]["level"] = "DEBUG"  # noqa: F405
