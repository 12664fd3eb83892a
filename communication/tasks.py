# communication/tasks.py
import logging

from celery import shared_task

from .services.notification_service import NotificationService

logger = logging.getLogger(__name__)


@shared_task
def dispatch_due_notifications():
    """Send every pending notification whose firing time has passed"""
    due, sent = NotificationService.dispatch_due()
    if due:
        logger.info(f"Dispatched {sent} of {due} due notifications")
    return sent
