# consent/services/consent_service.py
import logging
import re

from django.db import transaction
from django.utils import timezone

from consentflow.exceptions import (
    NotFoundError, PreconditionError, ValidationError, get_object_or_not_found
)
from ..models import ANESTHESIA, SIGNED, SURGICAL, UNASSIGNED, ConsentForm

logger = logging.getLogger(__name__)

DATA_URL_PATTERN = re.compile(r'^data:image/[a-zA-Z0-9.+-]+;base64,[A-Za-z0-9+/=\s]+$')


class ConsentService:
    """
    Consent association and signing.

    Each consent type moves independently through
    ``unassigned -> assigned -> signed``; there is no way back.
    """

    @staticmethod
    def get_consent_form(consent_form_id, consent_type):
        """
        Fetch a consent form and check it is of the expected type

        Raises:
            NotFoundError: If the id does not exist
            ValidationError: If the form belongs to the other consent type
        """
        form = get_object_or_not_found(ConsentForm, consent_form_id, "Consent form")

        if form.type != consent_type:
            raise ValidationError(f"Consent form {form.file_name} is not a {consent_type.lower()} consent.")

        return form

    @staticmethod
    @transaction.atomic
    def assign_anesthesia_consent(patient_id, consent_form_id, anesthesiologist_id,
                                  instructions=None, medication_to_suspend=None):
        """
        Attach the anesthesia consent and the anesthesiologist's instructions

        Args:
            patient_id: Patient to update
            consent_form_id: ANESTHESIA consent form to attach
            anesthesiologist_id: Anesthesiologist of record
            instructions (str): Free-text anesthesia instructions
            medication_to_suspend (list): Medication names to stop before surgery

        Returns:
            Patient: The updated patient

        Raises:
            NotFoundError: Unknown patient, form or anesthesiologist
            ValidationError: The form is not an anesthesia consent
            PreconditionError: The anesthesia consent is already signed
        """
        from healthcare.models import Patient
        from healthcare.services.patient_service import PatientService
        from users.models import Anesthesiologist

        patient = PatientService.get_patient(patient_id, queryset=Patient.objects.select_for_update(of=('self',)))

        if patient.consent_state(ANESTHESIA) == SIGNED:
            raise PreconditionError('The anesthesia consent is already signed.')

        form = ConsentService.get_consent_form(consent_form_id, ANESTHESIA)

        anesthesiologist = get_object_or_not_found(Anesthesiologist, anesthesiologist_id, "Anesthesiologist")

        patient.anesthesia_consent = form
        patient.anesthesiologist = anesthesiologist
        patient.anesthesia_instructions = instructions
        patient.medication_to_suspend = list(medication_to_suspend or [])
        patient.save(update_fields=[
            'anesthesia_consent', 'anesthesiologist', 'anesthesia_instructions',
            'medication_to_suspend', 'updated_at'
        ])

        logger.info(f"Anesthesia consent {form.id} assigned to patient {patient.id}")
        return PatientService.get_patient(patient.id)

    @staticmethod
    def validate_signature_image(signature_image):
        """The signature must be an image encoded as a base64 data URL"""
        if not signature_image or not DATA_URL_PATTERN.match(signature_image):
            raise ValidationError('The signature must be an image data URL.')
        return signature_image

    @staticmethod
    def sign(patient_id, consent_type, signature_image, now=None):
        """
        Record the patient's signature for one consent

        Image and timestamp are written together by a single conditional
        UPDATE, so of two concurrent signers only the first one wins.

        Args:
            patient_id: Patient signing
            consent_type (str): SURGICAL or ANESTHESIA
            signature_image (str): Captured photo as a data URL
            now (datetime): Signing time, defaults to the current time

        Returns:
            Patient: The updated patient

        Raises:
            ValidationError: Bad consent type or signature payload
            NotFoundError: Unknown patient
            PreconditionError: Consent not assigned yet or already signed
        """
        from healthcare.models import CONSENT_FIELDS, Patient
        from healthcare.services.patient_service import PatientService

        if consent_type not in (SURGICAL, ANESTHESIA):
            raise ValidationError(f"Unknown consent type {consent_type}.")

        ConsentService.validate_signature_image(signature_image)
        patient = PatientService.get_patient(patient_id)

        state = patient.consent_state(consent_type)
        if state == UNASSIGNED:
            raise PreconditionError(f"There is no {consent_type.lower()} consent to sign.")
        if state == SIGNED:
            raise PreconditionError(f"The {consent_type.lower()} consent is already signed.")

        _, image_field, date_field = CONSENT_FIELDS[consent_type]
        updated = Patient.objects.filter(
            pk=patient.pk, **{f"{image_field}__isnull": True}
        ).update(**{
            image_field: signature_image,
            date_field: now or timezone.now(),
            'updated_at': timezone.now(),
        })

        if not updated:
            raise PreconditionError(f"The {consent_type.lower()} consent is already signed.")

        logger.info(f"Patient {patient.id} signed the {consent_type.lower()} consent")
        return PatientService.get_patient(patient.pk)
