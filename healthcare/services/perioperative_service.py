# healthcare/services/perioperative_service.py
"""
Fasting plan and medication suspension scheduling.

Each change is saved first and the notifier is asked afterwards; notifier
problems are logged by the notifier and never undo the saved data.
"""
import logging

from django.db import transaction

from communication.services.notification_service import NotificationService
from consentflow.exceptions import NotFoundError, ValidationError, get_object_or_not_found
from ..models import FastingPlan, Suspension
from .patient_service import PatientService

logger = logging.getLogger(__name__)

FASTING_FIELDS = ('solids', 'clear_liquids', 'cow_milk', 'breast_milk', 'start_at')


class PerioperativeService:
    """Service for pre-operative fasting and medication instructions"""

    @staticmethod
    def get_fasting_plan(patient_id):
        """
        Get the fasting plan of a patient

        Raises:
            NotFoundError: If the patient or its plan does not exist
        """
        patient = PatientService.get_patient(patient_id)
        try:
            return patient.fasting_plan
        except FastingPlan.DoesNotExist:
            raise NotFoundError(f"Patient {patient.id} has no fasting plan.")

    @staticmethod
    def upsert_fasting_plan(patient_id, plan):
        """
        Create or replace the fasting plan and schedule the fasting reminder

        Args:
            patient_id: The patient
            plan (dict): solids, clear_liquids, cow_milk, breast_milk, start_at

        Returns:
            FastingPlan: The stored plan
        """
        patient = PatientService.get_patient(patient_id)

        with transaction.atomic():
            fasting_plan, created = FastingPlan.objects.update_or_create(
                patient=patient,
                defaults={field: plan.get(field) for field in FASTING_FIELDS}
            )

        logger.info(f"Fasting plan {'created' if created else 'updated'} for patient {patient.id}")

        NotificationService.cancel_pending(patient.id, 'fastingplan')
        NotificationService.schedule_notification(
            patient.id,
            title='Comenzar ayuno',
            body=(
                f"Sólidos: {fasting_plan.solids}. "
                f"Líquidos claros: {fasting_plan.clear_liquids}."
            ),
            fires_at=fasting_plan.start_at,
            related_object=fasting_plan
        )

        return fasting_plan

    @staticmethod
    def list_suspensions(patient_id):
        """Suspensions of a patient ordered by suspension time"""
        patient = PatientService.get_patient(patient_id)
        return Suspension.objects.filter(patient=patient).order_by('suspend_at')

    @staticmethod
    def create_suspension(patient_id, data):
        """
        Add a medication suspension and schedule its reminders

        One "suspend" notification fires at ``suspend_at`` and, when the
        medication is to be resumed, one "resume" notification at ``resume_at``.
        Past dates are accepted as they are.

        Args:
            patient_id: The patient
            data (dict): medication_name, suspend_at, resume_at (optional)

        Returns:
            Suspension: The created suspension

        Raises:
            ValidationError: Missing name or date, or resume before suspend
        """
        patient = PatientService.get_patient(patient_id)

        medication_name = (data.get('medication_name') or '').strip()
        suspend_at = data.get('suspend_at')
        resume_at = data.get('resume_at')

        if not medication_name or suspend_at is None:
            raise ValidationError('Medication name and suspension date are required.')
        if resume_at is not None and resume_at < suspend_at:
            raise ValidationError('The resume date cannot be earlier than the suspension date.')

        suspension = Suspension.objects.create(
            patient=patient,
            medication_name=medication_name,
            suspend_at=suspend_at,
            resume_at=resume_at
        )
        logger.info(f"Suspension of {medication_name} created for patient {patient.id}")

        NotificationService.schedule_notification(
            patient.id,
            title=f"Suspender {medication_name}",
            body=f"Es momento de suspender {medication_name} antes de su cirugía.",
            fires_at=suspend_at,
            related_object=suspension
        )
        if resume_at is not None:
            NotificationService.schedule_notification(
                patient.id,
                title=f"Reanudar {medication_name}",
                body=f"Ya puede reanudar {medication_name}.",
                fires_at=resume_at,
                related_object=suspension
            )

        return suspension

    @staticmethod
    def delete_suspension(patient_id, suspension_id):
        """
        Remove a suspension and cancel its pending reminders

        Raises:
            NotFoundError: If the suspension does not belong to the patient
        """
        patient = PatientService.get_patient(patient_id)

        suspension = get_object_or_not_found(
            Suspension.objects.filter(patient=patient), suspension_id, "Suspension"
        )

        suspension_pk = suspension.pk
        suspension.delete()
        logger.info(f"Suspension {suspension_pk} deleted for patient {patient.id}")

        NotificationService.cancel_pending(patient.id, 'suspension', suspension_pk)
