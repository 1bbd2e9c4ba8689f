# backend/settings/dev.py
"""
LOCAL DEVELOPMENT SETTINGS

DEBUG on, localhost only, CORS open to the Vite dev server of the mill
dashboard.
"""

from __future__ import annotations

from .base import *  # noqa: F403
from .base import env

DEBUG = True

ALLOWED_HOSTS = env.list("ALLOWED_HOSTS", default=["localhost", "127.0.0.1", "testserver"])

DASHBOARD_DEV_ORIGINS = ["http://localhost:5173", "http://127.0.0.1:5173"]

CORS_ALLOWED_ORIGINS = env.list("CORS_ALLOWED_ORIGINS", default=DASHBOARD_DEV_ORIGINS)
CSRF_TRUSTED_ORIGINS = env.list("CSRF_TRUSTED_ORIGINS", default=DASHBOARD_DEV_ORIGINS)

CORS_ALLOW_CREDENTIALS = True
