# backend/wsgi.py
"""
WSGI entrypoint for the rice mill backend (gunicorn / uwsgi).

Deployments must export DJANGO_SETTINGS_MODULE=backend.settings.prod;
without it the dev settings are used.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "backend.settings.dev")

application = get_wsgi_application()
