# consent/models.py
import uuid

from django.db import models

SURGICAL = 'SURGICAL'
ANESTHESIA = 'ANESTHESIA'

# Per-patient consent states
UNASSIGNED = 'unassigned'
ASSIGNED = 'assigned'
SIGNED = 'signed'


def consent_upload_path(instance, filename):
    return f"consent_forms/{instance.type.lower()}/{filename}"


class ConsentForm(models.Model):
    """
    Reusable consent PDF template.

    Forms are seeded or uploaded once and then shared read-only by every
    patient that references them.
    """
    CONSENT_TYPES = [
        (SURGICAL, 'Surgical'),
        (ANESTHESIA, 'Anesthesia'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    type = models.CharField(max_length=20, choices=CONSENT_TYPES)
    file_name = models.CharField(max_length=255)
    file = models.FileField(upload_to=consent_upload_path)
    file_size = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['file_name']
        unique_together = ['type', 'file_name']

    def __str__(self):
        return f"{self.file_name} ({self.get_type_display()})"

    def save(self, *args, **kwargs):
        if self.file and not self.file_size:
            self.file_size = self.file.size
        super().save(*args, **kwargs)
