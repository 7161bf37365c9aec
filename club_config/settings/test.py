"""
club_config/settings/test.py
─────────────────────────────────────────────────────────────────────
Entorno de tests (pytest-django)
"""
from .base import *  # noqa: F401, F403

DEBUG = False

# ── Database en memoria ───────────────────────────────────────────────
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME":   ":memory:",
    }
}

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
    }
}

STORAGES["staticfiles"] = {"BACKEND": "django.contrib.staticfiles.storage.StaticFilesStorage"}  # noqa: F405

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

# ── Celery sin broker ─────────────────────────────────────────────────
CELERY_TASK_ALWAYS_EAGER = True

CLUB_TREASURY = {  # noqa: F405
    **CLUB_TREASURY,  # noqa: F405
    "SEASON_START": (2025, 1),
}
