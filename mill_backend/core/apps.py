# core/apps.py

"""
CORE APP CONFIG

Mill-wide plumbing shared by every domain app:
- MillSettings singleton + injected MillConfig snapshot
- Atomic document numbering (PO / INV / BATCH / SO)
- Best-effort side effects and compensating steps
- Notification signals
"""

from django.apps import AppConfig


class CoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "core"
    verbose_name = "Mill Core"

    def ready(self):
        from core import receivers  # noqa: F401
