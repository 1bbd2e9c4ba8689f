# backend/asgi.py
"""
ASGI entrypoint for the rice mill backend.

DJANGO_SETTINGS_MODULE wins when set; local runs fall back to dev.
"""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "backend.settings.dev")

application = get_asgi_application()
