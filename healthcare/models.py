# healthcare/models.py
import uuid

from django.db import models

from consent.models import ANESTHESIA, ASSIGNED, SIGNED, SURGICAL, UNASSIGNED

# consent type -> (form FK, signature image, signed timestamp)
CONSENT_FIELDS = {
    SURGICAL: ('surgical_consent', 'surgical_signature_image', 'surgical_signed_date'),
    ANESTHESIA: ('anesthesia_consent', 'anesthesia_signature_image', 'anesthesia_signed_date'),
}


class PatientQuerySet(models.QuerySet):
    def with_relations(self):
        """Load everything the patient serializer touches in one query"""
        return self.select_related(
            'surgeon', 'anesthesiologist', 'provider',
            'surgical_consent', 'anesthesia_consent'
        )


class Patient(models.Model):
    """
    Surgical patient and the state of their two consents.

    Age and the archived / action-required flags are derived on every read
    by ``healthcare.services.status_service`` and are never stored.
    """
    SEX_CHOICES = [
        ('Masculino', 'Masculino'),
        ('Femenino', 'Femenino'),
        ('Otro', 'Otro'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    # Identity; (email, cedula) is the patient login
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    email = models.EmailField()
    cedula = models.CharField(max_length=30)
    date_of_birth = models.DateField()
    sex = models.CharField(max_length=10, choices=SEX_CHOICES)

    provider = models.ForeignKey(
        'users.HealthProvider',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='patients'
    )

    # Surgery
    surgical_procedure = models.TextField(blank=True, null=True)
    surgery_date_time = models.DateTimeField(blank=True, null=True)
    surgeon = models.ForeignKey(
        'users.Surgeon',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='patients'
    )

    # Anesthesia
    anesthesia_instructions = models.TextField(blank=True, null=True)
    medication_to_suspend = models.JSONField(default=list, blank=True)
    anesthesiologist = models.ForeignKey(
        'users.Anesthesiologist',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='patients'
    )

    # Consents
    surgical_consent = models.ForeignKey(
        'consent.ConsentForm',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='surgical_patients'
    )
    anesthesia_consent = models.ForeignKey(
        'consent.ConsentForm',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='anesthesia_patients'
    )
    surgical_signature_image = models.TextField(blank=True, null=True)
    surgical_signed_date = models.DateTimeField(blank=True, null=True)
    anesthesia_signature_image = models.TextField(blank=True, null=True)
    anesthesia_signed_date = models.DateTimeField(blank=True, null=True)

    objects = PatientQuerySet.as_manager()

    class Meta:
        ordering = ['-surgery_date_time']
        unique_together = ['email', 'cedula']

    def __str__(self):
        return f"{self.get_full_name()} ({self.cedula})"

    def get_full_name(self):
        return f"{self.first_name} {self.last_name}".strip()

    def get_consent_form(self, consent_type):
        form_field = CONSENT_FIELDS[consent_type][0]
        return getattr(self, form_field)

    def is_signed(self, consent_type):
        """A consent is signed only when both the image and the timestamp exist"""
        _, image_field, date_field = CONSENT_FIELDS[consent_type]
        return getattr(self, image_field) is not None and getattr(self, date_field) is not None

    def consent_state(self, consent_type):
        """Return 'unassigned', 'assigned' or 'signed' for the given consent type"""
        form_field = CONSENT_FIELDS[consent_type][0]
        if getattr(self, f"{form_field}_id") is None:
            return UNASSIGNED
        if self.is_signed(consent_type):
            return SIGNED
        return ASSIGNED

    def get_consent_forms(self):
        """Consent forms currently associated, surgical first"""
        return [form for form in (self.surgical_consent, self.anesthesia_consent) if form]


class FastingPlan(models.Model):
    """Pre-operative fasting instructions, one per patient"""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    patient = models.OneToOneField(Patient, on_delete=models.CASCADE, related_name='fasting_plan')
    solids = models.CharField(max_length=100)
    clear_liquids = models.CharField(max_length=100)
    cow_milk = models.CharField(max_length=100, blank=True, null=True)
    breast_milk = models.CharField(max_length=100, blank=True, null=True)
    start_at = models.DateTimeField()

    def __str__(self):
        return f"Fasting plan for {self.patient.get_full_name()} from {self.start_at}"


class Suspension(models.Model):
    """Scheduled pause (and optional resumption) of a medication"""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='suspensions')
    medication_name = models.CharField(max_length=255)
    suspend_at = models.DateTimeField()
    resume_at = models.DateTimeField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['suspend_at']

    def __str__(self):
        return f"{self.medication_name} - {self.patient.get_full_name()}"
