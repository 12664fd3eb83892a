# communication/services/notification_service.py
import logging

from django.db import DatabaseError
from django.utils import timezone

from ..models import ScheduledNotification
from .email_service import EmailService

logger = logging.getLogger(__name__)


class NotificationService:
    """Service for scheduling and delivering patient notifications"""

    @staticmethod
    def schedule_notification(patient_id, title, body, fires_at, related_object=None):
        """
        Schedule a notification for a patient

        Scheduling is fire-and-forget: a failure is logged and never reaches
        the caller, whose own data is already saved.

        Args:
            patient_id: The patient to notify
            title: The notification title
            body: The notification text
            fires_at: When the notification should go out
            related_object: Optional object that caused it (fasting plan, suspension)

        Returns:
            ScheduledNotification: The stored notification, or None on failure
        """
        related_object_type = None
        related_object_id = None

        if related_object is not None:
            related_object_type = related_object.__class__.__name__.lower()
            related_object_id = related_object.pk

        try:
            notification = ScheduledNotification.objects.create(
                patient_id=patient_id,
                title=title,
                body=body,
                fires_at=fires_at,
                related_object_type=related_object_type,
                related_object_id=related_object_id,
            )
        except DatabaseError as e:
            logger.error(f"Failed to schedule notification '{title}' for patient {patient_id}: {str(e)}")
            return None

        logger.info(f"Notification '{title}' scheduled for patient {patient_id} at {fires_at}")
        return notification

    @staticmethod
    def cancel_pending(patient_id, related_object_type, related_object_id=None):
        """
        Cancel notifications that have not gone out yet

        Args:
            patient_id: The patient whose notifications to cancel
            related_object_type: Only notifications scheduled by this kind of object
            related_object_id: Optionally only those of one object

        Returns:
            int: Number of cancelled notifications
        """
        queryset = ScheduledNotification.objects.filter(
            patient_id=patient_id,
            related_object_type=related_object_type,
            status=ScheduledNotification.PENDING,
        )
        if related_object_id is not None:
            queryset = queryset.filter(related_object_id=related_object_id)

        try:
            cancelled = queryset.update(status=ScheduledNotification.CANCELLED)
        except DatabaseError as e:
            logger.error(f"Failed to cancel {related_object_type} notifications for patient {patient_id}: {str(e)}")
            return 0

        if cancelled:
            logger.info(f"Cancelled {cancelled} pending {related_object_type} notifications for patient {patient_id}")
        return cancelled

    @staticmethod
    def get_due_notifications(now=None):
        """Pending notifications whose firing time has passed"""
        now = now or timezone.now()
        return ScheduledNotification.objects.select_related('patient').filter(
            status=ScheduledNotification.PENDING,
            fires_at__lte=now,
        )

    @staticmethod
    def deliver(notification):
        """
        Email a due notification to its patient and record the outcome

        Args:
            notification: The notification to deliver

        Returns:
            bool: True if the email was sent
        """
        patient = notification.patient

        if not patient.email:
            logger.warning(f"Cannot deliver notification {notification.id}: patient {patient.id} has no email")
            sent = False
        else:
            html_content = f"""
            <html>
            <body>
                <h2>{notification.title}</h2>
                <p>{notification.body}</p>
                <p>Gracias,<br>
                Gestor de Consentimientos</p>
            </body>
            </html>
            """
            text_content = f"{notification.title}\n\n{notification.body}\n\nGracias,\nGestor de Consentimientos"

            sent = EmailService.send_email(
                recipient_email=patient.email,
                subject=notification.title,
                html_content=html_content,
                text_content=text_content
            )

        if sent:
            notification.status = ScheduledNotification.SENT
            notification.sent_at = timezone.now()
        else:
            notification.status = ScheduledNotification.FAILED
        notification.save(update_fields=['status', 'sent_at'])

        return sent

    @staticmethod
    def dispatch_due(now=None):
        """
        Deliver every due notification

        Returns:
            tuple: (due, sent) counts
        """
        due = list(NotificationService.get_due_notifications(now))
        sent = 0
        for notification in due:
            if NotificationService.deliver(notification):
                sent += 1
        return len(due), sent
