# backend/settings/__init__.py
"""
Settings package for the rice mill backend.

Nothing is imported here. Pick a module with DJANGO_SETTINGS_MODULE:
- backend.settings.dev   (local, sqlite, DEBUG on)
- backend.settings.prod  (DATABASE_URL, whitenoise, HTTPS hardening)
"""
