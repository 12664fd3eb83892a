# communication/models.py
import uuid

from django.db import models


class ScheduledNotification(models.Model):
    """
    Patient notification waiting for its firing time.

    Attributes:
        patient (FK): The patient to notify
        title (str): Short notification title
        body (str): Longer notification text
        fires_at (datetime): When the notification should go out
        status (str): pending, sent, failed or cancelled
        sent_at (datetime): When it was delivered (or null)
        related_object_type (str): Model that scheduled it (fastingplan, suspension)
        related_object_id (UUID): Id of that object
    """
    PENDING = 'pending'
    SENT = 'sent'
    FAILED = 'failed'
    CANCELLED = 'cancelled'

    STATUS_CHOICES = [
        (PENDING, 'Pending'),
        (SENT, 'Sent'),
        (FAILED, 'Failed'),
        (CANCELLED, 'Cancelled'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    patient = models.ForeignKey(
        'healthcare.Patient',
        on_delete=models.CASCADE,
        related_name='notifications'
    )
    title = models.CharField(max_length=255)
    body = models.TextField()
    fires_at = models.DateTimeField()
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=PENDING)
    created_at = models.DateTimeField(auto_now_add=True)
    sent_at = models.DateTimeField(null=True, blank=True)

    # Optional related object for context
    related_object_type = models.CharField(max_length=50, blank=True, null=True)
    related_object_id = models.UUIDField(blank=True, null=True)

    class Meta:
        ordering = ['fires_at']
        indexes = [
            models.Index(fields=['status', 'fires_at']),
        ]

    def __str__(self):
        return f"{self.title} -> {self.patient_id} at {self.fires_at}"
