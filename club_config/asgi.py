"""
club_config/asgi.py
ASGI config for async servers (Uvicorn).
"""
import os
from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "club_config.settings.development")
application = get_asgi_application()
