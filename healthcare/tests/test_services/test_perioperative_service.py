# healthcare/tests/test_services/test_perioperative_service.py
import uuid
from datetime import timedelta
from unittest.mock import patch

from django.test import TestCase
from django.utils import timezone

from communication.models import ScheduledNotification
from consentflow.exceptions import NotFoundError, ValidationError
from healthcare.models import FastingPlan, Suspension
from healthcare.services.perioperative_service import PerioperativeService
from healthcare.tests.utils import make_consent_form, make_patient, make_surgeon


class FastingPlanServiceTest(TestCase):
    """Test suite for fasting plan upserts"""

    def setUp(self):
        self.patient = make_patient(surgeon=make_surgeon(), surgical_consent=make_consent_form())
        self.start_at = timezone.now() + timedelta(days=2)
        self.plan = {
            'solids': '8 horas',
            'clear_liquids': '2 horas',
            'cow_milk': '6 horas',
            'breast_milk': None,
            'start_at': self.start_at,
        }

    def test_get_missing_plan(self):
        with self.assertRaises(NotFoundError):
            PerioperativeService.get_fasting_plan(self.patient.id)

    def test_upsert_creates_plan_and_schedules_reminder(self):
        plan = PerioperativeService.upsert_fasting_plan(self.patient.id, self.plan)

        self.assertEqual(plan.solids, '8 horas')
        self.assertEqual(PerioperativeService.get_fasting_plan(self.patient.id), plan)

        notification = ScheduledNotification.objects.get(patient=self.patient)
        self.assertEqual(notification.title, 'Comenzar ayuno')
        self.assertEqual(notification.fires_at, self.start_at)
        self.assertEqual(notification.related_object_type, 'fastingplan')
        self.assertEqual(notification.related_object_id, plan.id)

    def test_upsert_is_idempotent(self):
        first = PerioperativeService.upsert_fasting_plan(self.patient.id, self.plan)
        second = PerioperativeService.upsert_fasting_plan(self.patient.id, self.plan)

        self.assertEqual(FastingPlan.objects.filter(patient=self.patient).count(), 1)
        self.assertEqual(first.id, second.id)
        stored = FastingPlan.objects.get(patient=self.patient)
        for field, value in self.plan.items():
            self.assertEqual(getattr(stored, field), value)

    def test_replacing_plan_cancels_previous_reminder(self):
        PerioperativeService.upsert_fasting_plan(self.patient.id, self.plan)
        new_start = self.start_at + timedelta(hours=4)
        PerioperativeService.upsert_fasting_plan(self.patient.id, dict(self.plan, start_at=new_start))

        pending = ScheduledNotification.objects.filter(patient=self.patient, status=ScheduledNotification.PENDING)
        self.assertEqual(pending.count(), 1)
        self.assertEqual(pending.get().fires_at, new_start)
        self.assertEqual(
            ScheduledNotification.objects.filter(status=ScheduledNotification.CANCELLED).count(), 1
        )

    @patch('healthcare.services.perioperative_service.NotificationService.schedule_notification')
    def test_notifier_failure_keeps_plan(self, mock_schedule):
        mock_schedule.return_value = None

        plan = PerioperativeService.upsert_fasting_plan(self.patient.id, self.plan)

        self.assertTrue(FastingPlan.objects.filter(pk=plan.pk).exists())
        mock_schedule.assert_called_once()

    def test_unknown_patient(self):
        with self.assertRaises(NotFoundError):
            PerioperativeService.upsert_fasting_plan(uuid.uuid4(), self.plan)


class SuspensionServiceTest(TestCase):
    """Test suite for medication suspensions"""

    def setUp(self):
        self.patient = make_patient(surgeon=make_surgeon(), surgical_consent=make_consent_form())
        self.now = timezone.now()

    @patch('healthcare.services.perioperative_service.NotificationService.schedule_notification')
    def test_past_suspension_is_created_and_notified_once(self, mock_schedule):
        suspend_at = self.now - timedelta(days=1)

        suspension = PerioperativeService.create_suspension(self.patient.id, {
            'medication_name': 'Aspirina',
            'suspend_at': suspend_at,
        })

        self.assertTrue(Suspension.objects.filter(pk=suspension.pk).exists())
        mock_schedule.assert_called_once()
        self.assertEqual(mock_schedule.call_args.kwargs['fires_at'], suspend_at)
        self.assertEqual(mock_schedule.call_args.kwargs['title'], 'Suspender Aspirina')

    @patch('healthcare.services.perioperative_service.NotificationService.schedule_notification')
    def test_resume_date_schedules_second_notification(self, mock_schedule):
        suspend_at = self.now + timedelta(days=3)
        resume_at = self.now + timedelta(days=10)

        PerioperativeService.create_suspension(self.patient.id, {
            'medication_name': 'Warfarina',
            'suspend_at': suspend_at,
            'resume_at': resume_at,
        })

        self.assertEqual(mock_schedule.call_count, 2)
        fires = [call.kwargs['fires_at'] for call in mock_schedule.call_args_list]
        self.assertEqual(fires, [suspend_at, resume_at])

    def test_resume_before_suspend_is_rejected(self):
        with self.assertRaises(ValidationError):
            PerioperativeService.create_suspension(self.patient.id, {
                'medication_name': 'Warfarina',
                'suspend_at': self.now,
                'resume_at': self.now - timedelta(days=1),
            })
        self.assertFalse(Suspension.objects.exists())

    def test_missing_medication_name(self):
        with self.assertRaises(ValidationError):
            PerioperativeService.create_suspension(self.patient.id, {'suspend_at': self.now})

    def test_list_is_ordered_by_suspend_at(self):
        later = PerioperativeService.create_suspension(self.patient.id, {
            'medication_name': 'Metformina', 'suspend_at': self.now + timedelta(days=2)
        })
        earlier = PerioperativeService.create_suspension(self.patient.id, {
            'medication_name': 'Aspirina', 'suspend_at': self.now + timedelta(days=1)
        })

        self.assertEqual(list(PerioperativeService.list_suspensions(self.patient.id)), [earlier, later])

    def test_delete_cancels_pending_notifications(self):
        suspension = PerioperativeService.create_suspension(self.patient.id, {
            'medication_name': 'Aspirina',
            'suspend_at': self.now + timedelta(days=1),
            'resume_at': self.now + timedelta(days=5),
        })
        self.assertEqual(ScheduledNotification.objects.filter(related_object_id=suspension.id).count(), 2)

        PerioperativeService.delete_suspension(self.patient.id, suspension.id)

        self.assertFalse(Suspension.objects.filter(pk=suspension.pk).exists())
        statuses = set(
            ScheduledNotification.objects.filter(related_object_id=suspension.id).values_list('status', flat=True)
        )
        self.assertEqual(statuses, {ScheduledNotification.CANCELLED})

    def test_delete_suspension_of_another_patient(self):
        other = make_patient(email='otro@example.com', cedula='999')
        suspension = PerioperativeService.create_suspension(other.id, {
            'medication_name': 'Aspirina', 'suspend_at': self.now
        })

        with self.assertRaises(NotFoundError):
            PerioperativeService.delete_suspension(self.patient.id, suspension.id)
        self.assertTrue(Suspension.objects.filter(pk=suspension.pk).exists())
