# healthcare/tests/utils.py
"""
Factories shared by the test suites of every app.
"""
from datetime import date, timedelta

from django.core.files.uploadedfile import SimpleUploadedFile
from django.utils import timezone
from rest_framework.test import APIClient

from consent.models import ANESTHESIA, SURGICAL, ConsentForm
from healthcare.models import Patient
from users.models import (
    ROLE_ADMINISTRATOR, ROLE_ANESTHESIOLOGIST, ROLE_PATIENT, ROLE_SURGEON,
    Administrator, Anesthesiologist, Surgeon
)
from users.services.auth_service import AuthService

PDF_BYTES = b'%PDF-1.4\n1 0 obj\n<< /Type /Catalog >>\nendobj\ntrailer\n<< /Root 1 0 R >>\n%%EOF\n'
SIGNATURE = 'data:image/png;base64,AAA'

ACCOUNT_ROLES = {
    Surgeon: ROLE_SURGEON,
    Anesthesiologist: ROLE_ANESTHESIOLOGIST,
    Administrator: ROLE_ADMINISTRATOR,
    Patient: ROLE_PATIENT,
}


def make_consent_form(consent_type=SURGICAL, file_name=None):
    file_name = file_name or f"{consent_type.lower()}.pdf"
    return ConsentForm.objects.create(
        type=consent_type,
        file_name=file_name,
        file=SimpleUploadedFile(file_name, PDF_BYTES, content_type='application/pdf')
    )


def make_surgeon(license_number='S-12345', password='password123', **kwargs):
    fields = {'first_name': 'María', 'last_name': 'García', 'specialty': 'Cirugía General'}
    fields.update(kwargs)
    surgeon = Surgeon(professional_license_number=license_number, **fields)
    surgeon.set_password(password)
    surgeon.save()
    return surgeon


def make_anesthesiologist(license_number='A-54321', password='password123', **kwargs):
    fields = {'first_name': 'Juan', 'last_name': 'Pérez'}
    fields.update(kwargs)
    anesthesiologist = Anesthesiologist(professional_license_number=license_number, **fields)
    anesthesiologist.set_password(password)
    anesthesiologist.save()
    return anesthesiologist


def make_admin(email='admin@demo.com', password='admin123'):
    admin = Administrator(email=email, first_name='Admin', last_name='Demo')
    admin.set_password(password)
    admin.save()
    return admin


def make_patient(surgeon=None, surgical_consent=None, **kwargs):
    fields = {
        'first_name': 'Ana',
        'last_name': 'Torres',
        'email': 'ana@example.com',
        'cedula': '0102030405',
        'date_of_birth': date(1990, 6, 15),
        'sex': 'Femenino',
        'surgical_procedure': 'Colecistectomía laparoscópica',
        'surgery_date_time': timezone.now() + timedelta(days=10),
    }
    fields.update(kwargs)
    return Patient.objects.create(surgeon=surgeon, surgical_consent=surgical_consent, **fields)


def make_patient_with_anesthesia(surgeon=None, anesthesiologist=None, **kwargs):
    """Patient with both consents assigned and none signed"""
    return make_patient(
        surgeon=surgeon or make_surgeon(),
        surgical_consent=make_consent_form(SURGICAL),
        anesthesiologist=anesthesiologist or make_anesthesiologist(),
        anesthesia_consent=make_consent_form(ANESTHESIA),
        **kwargs
    )


def login_as(client, account):
    """Send a real access token for ``account`` with every request of ``client``"""
    token = AuthService.issue_token(ACCOUNT_ROLES[type(account)], account)
    client.credentials(HTTP_AUTHORIZATION=f'Token {token.key}')
    return token


def client_for(account):
    client = APIClient()
    login_as(client, account)
    return client
