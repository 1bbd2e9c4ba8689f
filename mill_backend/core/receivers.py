# core/receivers.py

"""
Default notification receiver: write every event to the log.
"""

import logging

from django.dispatch import receiver

from core.services.notifications import SIGNALS

logger = logging.getLogger("core.notifications")


@receiver(list(SIGNALS.values()))
def log_notification(sender, **payload):
    logger.info("Notification: %s", sender, extra={"event": sender, "payload": payload})
