# communication/management/commands/send_patient_notifications.py

from django.core.management.base import BaseCommand
from communication.services.notification_service import NotificationService

class Command(BaseCommand):
    """Django management command to deliver scheduled patient notifications"""

    help = 'Send patient notifications whose firing time has passed'

    def handle(self, *args, **options):
        """
        Execute the command to send due notifications

        Same work as the periodic celery task, for deployments that run
        it from cron instead.
        """
        notifications = NotificationService.get_due_notifications()

        self.stdout.write(f"Found {notifications.count()} notifications due")

        sent_count = 0
        for notification in notifications:
            if NotificationService.deliver(notification):
                sent_count += 1

        self.stdout.write(self.style.SUCCESS(
            f"Successfully sent {sent_count} patient notifications"
        ))
