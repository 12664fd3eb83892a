# healthcare/services/patient_service.py
import logging
import uuid

from django.db import transaction
from django.db.models import Q
from django.utils import timezone

from consent.models import SURGICAL
from consent.services.consent_service import ConsentService
from consentflow.exceptions import ConflictError, ValidationError, get_object_or_not_found
from users.models import HealthProvider, Surgeon
from ..models import Patient

logger = logging.getLogger(__name__)


class PatientService:
    """Service for patient record operations"""

    @staticmethod
    def get_patient(patient_id, queryset=None):
        """
        Fetch a patient with the relations the API renders

        Args:
            patient_id: UUID of the patient
            queryset: Optional base queryset (e.g. one locked for update)

        Returns:
            Patient: The patient

        Raises:
            NotFoundError: If the patient does not exist
        """
        if queryset is None:
            queryset = Patient.objects.all()
        return get_object_or_not_found(queryset.with_relations(), patient_id, 'Patient')

    @staticmethod
    def list_patients(surgeon_id=None, anesthesiologist_id=None, archived=None, search=None, now=None):
        """
        List patients, most recent surgery first

        Args:
            surgeon_id: Only patients of this surgeon
            anesthesiologist_id: Only patients of this anesthesiologist
            archived (bool): Only past (True) or upcoming (False) surgeries
            search (str): Match on names, cedula or email
            now (datetime): Reference time for ``archived``

        Returns:
            QuerySet: Matching patients
        """
        queryset = Patient.objects.with_relations()

        for name, value in (('surgeon', surgeon_id), ('anesthesiologist', anesthesiologist_id)):
            if value:
                try:
                    uuid.UUID(str(value))
                except ValueError:
                    raise ValidationError(f"Query parameter {name} must be a UUID.")

        if surgeon_id:
            queryset = queryset.filter(surgeon_id=surgeon_id)
        if anesthesiologist_id:
            queryset = queryset.filter(anesthesiologist_id=anesthesiologist_id)

        if archived is not None:
            now = now or timezone.now()
            if archived:
                queryset = queryset.filter(surgery_date_time__lt=now)
            else:
                queryset = queryset.filter(
                    Q(surgery_date_time__gte=now) | Q(surgery_date_time__isnull=True)
                )

        if search:
            queryset = queryset.filter(
                Q(first_name__icontains=search) |
                Q(last_name__icontains=search) |
                Q(cedula__icontains=search) |
                Q(email__icontains=search)
            )

        return queryset

    @staticmethod
    @transaction.atomic
    def create_patient(surgeon_id, surgical_consent_id, provider_id=None, **fields):
        """
        Register a patient and attach the surgical consent

        The surgeon creating the record is the surgeon of record, and the
        surgical consent leaves the ``unassigned`` state right away.

        Args:
            surgeon_id: Surgeon creating the record
            surgical_consent_id: SURGICAL consent form to attach
            provider_id: Optional health provider
            **fields: Identity and surgery fields of the patient

        Returns:
            Patient: The created patient

        Raises:
            ValidationError: Missing login fields or wrong consent type
            NotFoundError: Unknown surgeon, consent form or provider
            ConflictError: A patient with the same email and cedula exists
        """
        email = (fields.get('email') or '').strip()
        cedula = (fields.get('cedula') or '').strip()
        if not email or not cedula:
            raise ValidationError('Email and cedula are required.')

        surgeon = get_object_or_not_found(Surgeon, surgeon_id, 'Surgeon')
        form = ConsentService.get_consent_form(surgical_consent_id, SURGICAL)

        provider = None
        if provider_id:
            provider = get_object_or_not_found(HealthProvider, provider_id, 'Health provider')

        if Patient.objects.filter(email__iexact=email, cedula=cedula).exists():
            raise ConflictError(f"A patient with email {email} and cedula {cedula} already exists.")

        fields.update(email=email, cedula=cedula)
        patient = Patient.objects.create(
            surgeon=surgeon,
            surgical_consent=form,
            provider=provider,
            **fields
        )

        logger.info(f"Patient {patient.id} created by surgeon {surgeon.id}")
        return PatientService.get_patient(patient.id)
