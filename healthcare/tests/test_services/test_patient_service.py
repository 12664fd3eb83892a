# healthcare/tests/test_services/test_patient_service.py
import uuid
from datetime import date, timedelta

from django.test import TestCase
from django.utils import timezone

from consent.models import ANESTHESIA, ASSIGNED, SURGICAL, UNASSIGNED
from consentflow.exceptions import ConflictError, NotFoundError, ValidationError
from healthcare.models import Patient
from healthcare.services.patient_service import PatientService
from healthcare.tests.utils import (
    make_anesthesiologist, make_consent_form, make_patient, make_surgeon
)
from users.models import HealthProvider


class CreatePatientTest(TestCase):
    """Test suite for patient registration"""

    def setUp(self):
        self.surgeon = make_surgeon()
        self.surgical_form = make_consent_form(SURGICAL)
        self.fields = {
            'first_name': 'Ana',
            'last_name': 'Torres',
            'email': 'ana@example.com',
            'cedula': '0102030405',
            'date_of_birth': date(1990, 6, 15),
            'sex': 'Femenino',
            'surgical_procedure': 'Apendicectomía',
            'surgery_date_time': timezone.now() + timedelta(days=7),
        }

    def test_create_patient_assigns_surgical_consent(self):
        patient = PatientService.create_patient(self.surgeon.id, self.surgical_form.id, **self.fields)

        self.assertEqual(patient.surgeon, self.surgeon)
        self.assertEqual(patient.surgical_consent, self.surgical_form)
        self.assertEqual(patient.consent_state(SURGICAL), ASSIGNED)
        self.assertEqual(patient.consent_state(ANESTHESIA), UNASSIGNED)
        self.assertIsNone(patient.anesthesiologist)
        self.assertEqual(patient.medication_to_suspend, [])

    def test_create_patient_with_provider(self):
        provider = HealthProvider.objects.create(name='Clínica Central')

        patient = PatientService.create_patient(
            self.surgeon.id, self.surgical_form.id, provider_id=provider.id, **self.fields
        )

        self.assertEqual(patient.provider, provider)

    def test_duplicate_email_and_cedula(self):
        PatientService.create_patient(self.surgeon.id, self.surgical_form.id, **self.fields)

        with self.assertRaises(ConflictError):
            PatientService.create_patient(self.surgeon.id, self.surgical_form.id, **self.fields)
        self.assertEqual(Patient.objects.count(), 1)

    def test_anesthesia_form_is_rejected(self):
        anesthesia_form = make_consent_form(ANESTHESIA)

        with self.assertRaises(ValidationError):
            PatientService.create_patient(self.surgeon.id, anesthesia_form.id, **self.fields)

    def test_unknown_surgeon(self):
        with self.assertRaises(NotFoundError):
            PatientService.create_patient(uuid.uuid4(), self.surgical_form.id, **self.fields)

    def test_unknown_consent_form(self):
        with self.assertRaises(NotFoundError):
            PatientService.create_patient(self.surgeon.id, uuid.uuid4(), **self.fields)

    def test_missing_cedula(self):
        fields = dict(self.fields, cedula='')
        with self.assertRaises(ValidationError):
            PatientService.create_patient(self.surgeon.id, self.surgical_form.id, **fields)


class ListPatientsTest(TestCase):
    """Test suite for patient filtering"""

    def setUp(self):
        self.now = timezone.now()
        self.surgeon = make_surgeon()
        self.other_surgeon = make_surgeon('S-99999', first_name='Luis')
        self.anesthesiologist = make_anesthesiologist()
        form = make_consent_form(SURGICAL)

        self.upcoming = make_patient(
            surgeon=self.surgeon, surgical_consent=form,
            surgery_date_time=self.now + timedelta(days=3),
            anesthesiologist=self.anesthesiologist
        )
        self.past = make_patient(
            surgeon=self.surgeon, surgical_consent=form,
            email='pedro@example.com', cedula='111', first_name='Pedro',
            surgery_date_time=self.now - timedelta(days=3)
        )
        self.other = make_patient(
            surgeon=self.other_surgeon, surgical_consent=form,
            email='lucia@example.com', cedula='222', first_name='Lucía',
            surgery_date_time=self.now + timedelta(days=30)
        )

    def test_ordered_by_surgery_date_desc(self):
        patients = list(PatientService.list_patients())
        self.assertEqual(patients, [self.other, self.upcoming, self.past])

    def test_filter_by_surgeon(self):
        patients = PatientService.list_patients(surgeon_id=self.surgeon.id)
        self.assertEqual(set(patients), {self.upcoming, self.past})

    def test_filter_by_anesthesiologist(self):
        patients = PatientService.list_patients(anesthesiologist_id=self.anesthesiologist.id)
        self.assertEqual(list(patients), [self.upcoming])

    def test_filter_archived(self):
        self.assertEqual(list(PatientService.list_patients(archived=True, now=self.now)), [self.past])
        self.assertEqual(
            set(PatientService.list_patients(archived=False, now=self.now)),
            {self.upcoming, self.other}
        )

    def test_search(self):
        self.assertEqual(list(PatientService.list_patients(search='pedro')), [self.past])
        self.assertEqual(list(PatientService.list_patients(search='222')), [self.other])

    def test_malformed_filter_id(self):
        with self.assertRaises(ValidationError):
            PatientService.list_patients(surgeon_id='not-a-uuid')
